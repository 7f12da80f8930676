"""Implementation of the `tanglesmith tangle` command."""

from __future__ import annotations

from pathlib import Path

import typer

from tanglesmith.api.service import TangleService
from tanglesmith.core.exceptions import TanglesmithError

from .._options import (
    ConfigOption,
    DryRunOption,
    ForceOption,
    MaxPassesOption,
    OutputDirOption,
    ProjectDirArgument,
)
from ..diagnostics import CliEmitter
from ..presenter import present_status, present_tangle_summary
from ..state import debug_enabled, get_cli_state
from ._common import build_request, fail


_SERVICE = TangleService()


def tangle(
    project_dir: ProjectDirArgument = Path("."),
    config: ConfigOption = None,
    output_dir: OutputDirOption = None,
    max_passes: MaxPassesOption = None,
    dry_run: DryRunOption = False,
    force: ForceOption = False,
) -> None:
    """Expand every fragment and write the root fragments to their files."""
    state = get_cli_state()
    emitter = CliEmitter(state=state, debug_enabled=debug_enabled())
    request = build_request(
        project_dir, config_path=config, emitter=emitter, max_passes=max_passes
    )

    try:
        response = _SERVICE.tangle(request)
    except TanglesmithError as exc:
        raise fail(exc) from exc

    target_dir = output_dir or response.output_dir
    files = response.bundle.files
    write_allowed = response.succeeded or force or request.config.write_on_error

    if dry_run:
        present_tangle_summary(state, files, target_dir, written=False)
    elif write_allowed:
        try:
            _SERVICE.write(response, output_dir=target_dir, force=True)
        except TanglesmithError as exc:
            raise fail(exc) from exc
        present_tangle_summary(state, files, target_dir, written=True)
    elif files:
        emitter.warning("Tangled files were withheld; rerun with --force to write them anyway.")

    error_count = len(response.bundle.diagnostics)
    if not response.bundle.expansion.converged:
        error_count += 1
    present_status(state, succeeded=response.succeeded, error_count=error_count)
    if not response.succeeded:
        raise typer.Exit(code=1)
