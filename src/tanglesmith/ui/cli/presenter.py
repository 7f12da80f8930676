"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from tanglesmith.core.emission import TangledFile
from tanglesmith.core.fragments import Fragment, FragmentTable

from .state import CLIState


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console


def _get_console(state: CLIState, *, stderr: bool = False) -> Console | None:
    """Retrieve the active Rich console when output goes to an interactive terminal.

    Piped or captured output falls back to plain text so it stays greppable.
    """
    console = state.err_console if stderr else state.console
    if console.is_terminal:
        return console
    return None


def _build_table(*, title: str | None, columns: Sequence[str], header_style: str = "bold cyan") -> Any:
    """Create a Rich table with the house style."""
    from rich import box
    from rich.table import Table

    table = Table(title=title or None, box=box.SQUARE, show_edge=True, header_style=header_style)
    for col in columns:
        table.add_column(col)
    return table


def _format_path(path: Path) -> str:
    """Format a path relative to the current working directory for display."""
    resolved = path.resolve()
    try:
        return str(resolved.relative_to(Path.cwd()))
    except ValueError:
        return str(resolved)


def _size_details(code: str) -> str:
    size = len(code.encode("utf-8"))
    if size >= 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size} B"


def present_tangle_summary(
    state: CLIState,
    files: Sequence[TangledFile],
    output_dir: Path,
    *,
    written: bool,
) -> None:
    """Render the list of tangled files, written or merely planned."""
    if not files:
        typer.echo("No root fragments to tangle.")
        return

    title = "Tangled Files" if written else "Tangle Plan (dry run)"
    rows = [
        (
            f"<<{item.fragment}>>",
            _format_path(output_dir / item.output_name.strip()),
            _size_details(item.code),
        )
        for item in files
    ]

    console = _get_console(state)
    if console is not None:
        table = _build_table(title=title, columns=["Fragment", "Location", "Size"])
        for fragment, location, size in rows:
            table.add_row(fragment, location, size)
        console.print(table)
        return

    typer.echo(f"{title}:")
    for fragment, location, size in rows:
        typer.echo(f"  * {fragment}: {location} ({size})")


def _fragment_kind(fragment: Fragment) -> str:
    return "root" if fragment.is_file_root else "fragment"


def present_fragments(
    state: CLIState,
    table: FragmentTable,
    *,
    name: str | None = None,
    show_code: bool = False,
) -> None:
    """Display fragments with their kind, origin, and the references they use."""
    fragments = [table[name]] if name is not None else list(table)
    if not fragments:
        typer.echo("No fragments found.")
        return

    console = _get_console(state)
    if console is not None and not show_code:
        rich_table = _build_table(
            title="Fragments",
            columns=["Fragment", "Kind", "Document", "Output", "References"],
        )
        for fragment in fragments:
            references = ", ".join(ref.name for ref in table.references(fragment.name))
            rich_table.add_row(
                fragment.name,
                _fragment_kind(fragment),
                fragment.source_document,
                fragment.output_filename,
                references,
            )
        console.print(rich_table)
        return

    for fragment in fragments:
        header = f"<<{fragment.name}>> [{_fragment_kind(fragment)}] {fragment.source_document}"
        if fragment.output_filename:
            header += f" -> {fragment.output_filename}"
        typer.echo(header)
        for ref in table.references(fragment.name):
            typer.echo(f"  uses <<{ref.name}>>")
        if show_code:
            typer.echo(fragment.code, nl=not fragment.code.endswith("\n"))


def _run_details(state: CLIState) -> list[str]:
    details: list[str] = []
    loaded = state.consume_events("document_loaded")
    if loaded:
        details.append(f"{len(loaded)} document{'' if len(loaded) == 1 else 's'}")
    written = state.consume_events("file_written")
    if written:
        details.append(f"{len(written)} file{'' if len(written) == 1 else 's'} written")
    finished = state.consume_events("expansion_finished")
    if finished:
        passes = finished[-1].get("passes", 0)
        details.append(f"{passes} expansion pass{'' if passes == 1 else 'es'}")
    return details


def present_status(state: CLIState, *, succeeded: bool, error_count: int) -> None:
    """Print the closing status line of a tangle run.

    The line is completed from the `file_written` and `expansion_finished`
    events recorded on ``state`` during the run, which are consumed.
    """
    console = _get_console(state, stderr=not succeeded)
    details = _run_details(state)
    if succeeded:
        message = "Tangle completed"
    else:
        noun = "error" if error_count == 1 else "errors"
        message = "Errors encountered during tangle"
        details.insert(0, f"{error_count} {noun}")
    if details:
        message = f"{message} ({', '.join(details)})"
    if console is not None:
        style = "bold green" if succeeded else "bold red"
        console.print(message, style=style)
        return
    typer.echo(message, err=not succeeded)


__all__ = [
    "present_fragments",
    "present_status",
    "present_tangle_summary",
]
