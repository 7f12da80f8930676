from __future__ import annotations

from pathlib import Path
import textwrap

from typer.testing import CliRunner

from tanglesmith.ui.cli import app


MAIN = textwrap.dedent(
    """\
    ```c : the program <<hello.*>>= hello.c
    int main(void) {
        <<body>>
    }
    ```
    """
)

BODY = textwrap.dedent(
    """\
    ```c : <<body>>=
    puts("hi");
    return 0;
    ```
    """
)


def _write(root: Path, files: dict[str, str]) -> None:
    for name, text in files.items():
        (root / name).write_text(text, encoding="utf-8")


def test_tangle_command_writes_root_files(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Tangle completed (2 documents, 1 file written, 2 expansion passes)" in result.output
    assert (tmp_path / "hello.c").read_text(encoding="utf-8") == (
        'int main(void) {\n    puts("hi");\n    return 0;\n}\n'
    )


def test_tangle_dry_run_does_not_write(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "<<hello.*>>" in result.output
    assert not (tmp_path / "hello.c").exists()


def test_tangle_output_dir_option(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(
        app, ["tangle", str(tmp_path), "--output-dir", str(tmp_path / "build")]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "build" / "hello.c").exists()


def test_tangle_reports_errors_and_withholds_files(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN})
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path)])

    assert result.exit_code == 1
    assert "Could not find fragment <<body>>" in result.output
    assert "Errors encountered during tangle" in result.output
    assert not (tmp_path / "hello.c").exists()


def test_tangle_force_writes_partial_output(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN})
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path), "--force"])

    assert result.exit_code == 1
    assert "<<body>>" in (tmp_path / "hello.c").read_text(encoding="utf-8")


def test_tangle_invalid_configuration(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "tanglesmith.yml": "max_passes: nope\n"})
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_fragments_command_lists_references(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["fragments", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "<<hello.*>> [root] a.literate -> hello.c" in result.output
    assert "uses <<body>>" in result.output
    assert "<<body>> [fragment] b.literate" in result.output


def test_fragments_command_shows_code_for_one_fragment(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["fragments", str(tmp_path), "--name", "body", "--code"])

    assert result.exit_code == 0, result.output
    assert 'puts("hi");' in result.output
    assert "hello.*" not in result.output


def test_fragments_command_unknown_name(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN})
    runner = CliRunner()

    result = runner.invoke(app, ["fragments", str(tmp_path), "--name", "nope"])

    assert result.exit_code == 1
    assert "Unknown fragment <<nope>>" in result.output


def test_show_command_prints_expanded_fragment(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["show", "hello.*", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert '    puts("hi");\n    return 0;\n' in result.output


def test_verbose_flag_reports_events(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    result = runner.invoke(app, ["-v", "tangle", str(tmp_path), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Loaded a.literate" in result.output


def test_unreadable_document_reports_root_cause(tmp_path: Path) -> None:
    (tmp_path / "broken.literate").write_bytes(b"\xff\xfe not utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["tangle", str(tmp_path)])

    assert result.exit_code == 1
    assert "Unable to read literate document" in result.output
    assert "can't decode byte 0xff" in result.output


def test_verbosity_does_not_leak_between_invocations(tmp_path: Path) -> None:
    _write(tmp_path, {"a.literate": MAIN, "b.literate": BODY})
    runner = CliRunner()

    verbose = runner.invoke(app, ["-v", "tangle", str(tmp_path), "--dry-run"])
    quiet = runner.invoke(app, ["tangle", str(tmp_path), "--dry-run"])

    assert "Loaded a.literate" in verbose.output
    assert "Loaded a.literate" not in quiet.output
    assert "Tangle completed (2 documents, 2 expansion passes)" in quiet.output


def test_version_flag() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip()
