from __future__ import annotations

from tanglesmith.core.diagnostics import SourceRange
from tanglesmith.core.fragments import Fragment, FragmentLocation, FragmentTable


def _location(line: int = 0) -> FragmentLocation:
    return FragmentLocation("doc.literate", SourceRange(line))


def _fragment(name: str, code: str) -> Fragment:
    return Fragment(
        name=name,
        language="c",
        source_document="doc.literate",
        code=code,
        locations=[_location()],
    )


def test_define_stores_code_verbatim() -> None:
    table = FragmentTable()

    assert table.define(_fragment("F", "a\n")) is True
    assert table["F"].code == "a\n"


def test_define_refuses_to_overwrite() -> None:
    table = FragmentTable()
    table.define(_fragment("F", "first\n"))

    assert table.define(_fragment("F", "second\n")) is False
    assert table["F"].code == "first\n"


def test_append_concatenates_and_records_location() -> None:
    table = FragmentTable()
    table.define(_fragment("F", "a\n"))

    assert table.append("F", "b\n", _location(10)) is True
    assert table["F"].code == "a\nb\n"
    assert [loc.range.start_line for loc in table["F"].locations] == [0, 10]


def test_append_to_missing_fragment_fails() -> None:
    table = FragmentTable()

    assert table.append("missing", "b\n", _location()) is False
    assert "missing" not in table


def test_roots_and_references() -> None:
    table = FragmentTable()
    table.define(_fragment("lib.*", "<<helper>>\n"))
    table.define(_fragment("helper", "x();\n"))

    assert [fragment.name for fragment in table.roots()] == ["lib.*"]
    assert [ref.name for ref in table.references("lib.*")] == ["helper"]
    assert [fragment.name for fragment in table] == ["lib.*", "helper"]
    assert {fragment.name: fragment.code for fragment in table} == {"lib.*": "<<helper>>\n", "helper": "x();\n"}
