from __future__ import annotations

from pathlib import Path

import pytest

from tanglesmith.core.diagnostics import SourceRange
from tanglesmith.core.emission import TangledFile, select_roots, write_tangled_files
from tanglesmith.core.exceptions import EmissionError
from tanglesmith.core.fragments import Fragment, FragmentLocation, FragmentTable


def _define(table: FragmentTable, name: str, code: str, output: str = "") -> None:
    table.define(
        Fragment(
            name=name,
            language="c",
            source_document="doc.literate",
            code=code,
            output_filename=output,
            locations=[FragmentLocation("doc.literate", SourceRange(0))],
        )
    )


def test_only_file_roots_are_selected() -> None:
    table = FragmentTable()
    _define(table, "lib.*", "int lib;\n", "lib.c")
    _define(table, "helper", "unused;\n")

    files = select_roots(table)

    assert files == [TangledFile(output_name="lib.c", code="int lib;\n", fragment="lib.*")]


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    files = [TangledFile(output_name=" src/app/main.py ", code="print('hi')\n", fragment="main.*")]

    written = write_tangled_files(files, tmp_path)

    target = tmp_path / "src" / "app" / "main.py"
    assert written == [target]
    assert target.read_text(encoding="utf-8") == "print('hi')\n"


def test_write_failure_raises_emission_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    files = [TangledFile(output_name="blocker/out.c", code="x\n", fragment="out.*")]

    with pytest.raises(EmissionError):
        write_tangled_files(files, tmp_path)


@pytest.mark.parametrize("name", ["../escape.c", "nested/../../escape.c"])
def test_output_names_leaving_the_output_dir_are_refused(tmp_path: Path, name: str) -> None:
    out_dir = tmp_path / "out"
    files = [
        TangledFile(output_name="ok.c", code="x\n", fragment="ok.*"),
        TangledFile(output_name=name, code="x\n", fragment="escape.*"),
    ]

    with pytest.raises(EmissionError, match="escape"):
        write_tangled_files(files, out_dir)
    assert not (tmp_path / "escape.c").exists()
    assert not (out_dir / "ok.c").exists()


def test_absolute_output_names_are_refused(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "abs.c"
    item = TangledFile(output_name=str(absolute), code="x\n", fragment="abs.*")

    with pytest.raises(EmissionError):
        item.target(tmp_path / "out")


def test_written_bytes_keep_line_endings(tmp_path: Path) -> None:
    files = [TangledFile(output_name="mixed.txt", code="a\nb\r\nc", fragment="mixed.*")]

    (target,) = write_tangled_files(files, tmp_path)

    assert target.read_bytes() == b"a\nb\r\nc"
