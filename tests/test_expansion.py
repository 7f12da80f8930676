from __future__ import annotations

import logging

import pytest

from tanglesmith.core.diagnostics import DiagnosticCollection, DiagnosticKind, SourceRange
from tanglesmith.core.expansion import (
    MAX_FRAGMENT_SIZE,
    MAX_PASSES,
    expand_fragments,
    indent_block,
)
from tanglesmith.core.fragments import Fragment, FragmentLocation, FragmentTable


def _table(codes: dict[str, str]) -> FragmentTable:
    table = FragmentTable()
    for index, (name, code) in enumerate(codes.items()):
        table.define(
            Fragment(
                name=name,
                language="c",
                source_document="doc.literate",
                code=code,
                output_filename="out.c" if ".*" in name else "",
                locations=[FragmentLocation("doc.literate", SourceRange(index * 4))],
            )
        )
    return table


def test_simple_expansion_applies_reference_indent() -> None:
    table = _table({"main": "  <<helper>>\n", "helper": "x();\n"})

    report = expand_fragments(table)

    assert table["main"].code == "  x();\n"
    assert report.converged is True


def test_multiline_expansion_indents_every_line() -> None:
    table = _table({"main": "int f() {\n\t<<body>>\n}\n", "body": "a();\nb();\n"})

    expand_fragments(table)

    assert table["main"].code == "int f() {\n\ta();\n\tb();\n}\n"


def test_transitive_expansion_within_two_passes() -> None:
    table = _table({"a": "<<b>>", "b": "<<c>>", "c": "done();\n"})

    report = expand_fragments(table, max_passes=2)

    assert table["a"].code == "done();\n"
    assert report.passes == 2


def test_transitive_expansion_reaches_fixed_point() -> None:
    table = _table({"a": "<<b>>", "b": "<<c>>", "c": "done();\n"})

    report = expand_fragments(table)

    assert report.converged is True
    assert report.passes == 3
    assert report.substitutions == 3


def test_unresolved_reference_is_reported_once_and_left_verbatim() -> None:
    table = _table({"main": "<<missing>>\n", "other": "<<main>>\n"})
    diagnostics = DiagnosticCollection()

    expand_fragments(table, diagnostics)

    assert "<<missing>>" in table["main"].code
    assert all(diag.kind is DiagnosticKind.UNRESOLVED_REFERENCE for diag in diagnostics)
    assert [diag.message for diag in diagnostics] == [
        "Could not find fragment <<missing>> (missing) referenced in <<main>>",
        "Could not find fragment <<missing>> (missing) referenced in <<other>>",
    ]


def test_malformed_marker_warns_but_still_resolves() -> None:
    table = _table({"main": "<<helper>>=\n", "helper": "x();\n"})
    diagnostics = DiagnosticCollection()

    expand_fragments(table, diagnostics)

    assert table["main"].code == "x();\n"
    (diagnostic,) = diagnostics
    assert diagnostic.kind is DiagnosticKind.MALFORMED_REFERENCE_MARKER
    assert "'='" in diagnostic.message


def test_reference_diagnostics_anchor_on_first_defining_block() -> None:
    table = _table({"ok": "x\n", "main": "<<nope>>\n"})
    diagnostics = DiagnosticCollection()

    expand_fragments(table, diagnostics)

    (diagnostic,) = diagnostics
    assert diagnostic.document == "doc.literate"
    assert diagnostic.range.start_line == 4


def test_cycle_terminates_at_ceiling(caplog: pytest.LogCaptureFixture) -> None:
    table = _table({"a": "<<b>>", "b": "<<a>>"})

    with caplog.at_level(logging.WARNING):
        report = expand_fragments(table)

    assert report.passes == MAX_PASSES
    assert report.converged is False
    assert {fragment.name: fragment.code for fragment in table} == {"a": "<<a>>", "b": "<<a>>"}
    assert any("fixed point" in record.message for record in caplog.records)


def test_cycle_residue_is_deterministic() -> None:
    first = _table({"a": "x <<a>>\n"})
    second = _table({"a": "x <<a>>\n"})

    expand_fragments(first, max_passes=5)
    expand_fragments(second, max_passes=5)

    assert first["a"].code == second["a"].code
    assert "<<a>>" in first["a"].code


def test_branching_self_reference_is_bounded_by_fragment_size(
    caplog: pytest.LogCaptureFixture,
) -> None:
    table = _table({"a": "<<a>>\n<<a>>\n"})

    with caplog.at_level(logging.WARNING):
        report = expand_fragments(table)

    code = table["a"].code
    assert len(code) <= MAX_FRAGMENT_SIZE
    assert "<<a>>" in code
    assert report.converged is False
    assert report.passes < MAX_PASSES
    assert report.truncated == ["a"]
    assert any("<<a>>" in record.message for record in caplog.records)


def test_size_limit_leaves_oversized_references_verbatim() -> None:
    table = _table({"main": "<<big>> <<big>>\n", "big": "0123456789"})

    report = expand_fragments(table, max_size=20)

    assert table["main"].code == "0123456789 <<big>>\n"
    assert report.truncated == ["main"]
    assert report.converged is False


def test_size_limited_residue_is_deterministic() -> None:
    first = _table({"a": "<<a>>\n<<a>>\n"})
    second = _table({"a": "<<a>>\n<<a>>\n"})

    expand_fragments(first, max_size=4096)
    expand_fragments(second, max_size=4096)

    assert first["a"].code == second["a"].code


def test_empty_fragment_removes_the_reference_line_content() -> None:
    table = _table({"main": "a\n  <<empty>>\nb\n", "empty": ""})

    report = expand_fragments(table)

    assert table["main"].code == "a\n\nb\n"
    assert report.converged is True


def test_unreferenced_fragments_are_left_alone() -> None:
    table = _table({"lib.*": "int x;\n", "helper": "unused();\n"})
    diagnostics = DiagnosticCollection()

    report = expand_fragments(table, diagnostics)

    assert not diagnostics
    assert report.passes == 1
    assert table["helper"].code == "unused();\n"


def test_max_passes_must_be_positive() -> None:
    with pytest.raises(ValueError):
        expand_fragments(FragmentTable(), max_passes=0)
    with pytest.raises(ValueError):
        expand_fragments(FragmentTable(), max_size=0)


def test_indent_block_keeps_newline_only_when_requested() -> None:
    assert indent_block("a\nb\n", "  ") == "  a\n  b"
    assert indent_block("a\nb\n", "  ", keep_newline=True) == "  a\n  b\n"
    assert indent_block("a", "  ", keep_newline=True) == "  a"
    assert indent_block("", "  ", keep_newline=True) == ""
