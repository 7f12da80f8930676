"""Implementation of the `tanglesmith fragments` and `tanglesmith show` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from tanglesmith.api.service import TangleService
from tanglesmith.core.exceptions import TanglesmithError

from .._options import ConfigOption, MaxPassesOption, ProjectDirArgument
from ..diagnostics import CliEmitter
from ..presenter import present_fragments
from ..state import debug_enabled, emit_error, get_cli_state
from ._common import build_request, fail


_SERVICE = TangleService()

FragmentNameOption = Annotated[
    str | None,
    typer.Option("--name", "-n", help="Only list the fragment with this name."),
]

ShowCodeOption = Annotated[
    bool,
    typer.Option("--code", help="Print the unexpanded code of each fragment."),
]


def fragments(
    project_dir: ProjectDirArgument = Path("."),
    config: ConfigOption = None,
    name: FragmentNameOption = None,
    show_code: ShowCodeOption = False,
) -> None:
    """List the fragments defined by the project and the references they use."""
    state = get_cli_state()
    emitter = CliEmitter(state=state, debug_enabled=debug_enabled())
    request = build_request(project_dir, config_path=config, emitter=emitter, expand=False)
    try:
        response = _SERVICE.tangle(request)
    except TanglesmithError as exc:
        raise fail(exc) from exc

    table = response.bundle.table
    if name is not None and name not in table:
        emit_error(f"Unknown fragment <<{name}>>.")
        raise typer.Exit(code=1)
    present_fragments(state, table, name=name, show_code=show_code)


def show(
    name: Annotated[str, typer.Argument(metavar="NAME", help="Fragment to expand.")],
    project_dir: ProjectDirArgument = Path("."),
    config: ConfigOption = None,
    max_passes: MaxPassesOption = None,
) -> None:
    """Print the fully expanded code of one fragment."""
    state = get_cli_state()
    emitter = CliEmitter(state=state, debug_enabled=debug_enabled())
    request = build_request(
        project_dir, config_path=config, emitter=emitter, max_passes=max_passes
    )
    try:
        response = _SERVICE.tangle(request)
    except TanglesmithError as exc:
        raise fail(exc) from exc

    fragment = response.bundle.table.get(name)
    if fragment is None:
        emit_error(f"Unknown fragment <<{name}>>.")
        raise typer.Exit(code=1)
    typer.echo(fragment.code, nl=not fragment.code.endswith("\n"))
    if not response.succeeded:
        raise typer.Exit(code=1)
