"""Helpers shared by the tangle CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from tanglesmith.api.service import TangleRequest
from tanglesmith.core.diagnostics import DiagnosticEmitter
from tanglesmith.core.exceptions import ConfigurationError, TanglesmithError, exception_hint

from ..state import emit_error


def fail(exc: TanglesmithError) -> typer.Exit:
    """Report ``exc`` with its root cause and return the exit to raise."""
    message = str(exc)
    hint = exception_hint(exc)
    if hint and hint not in message:
        message = f"{message} ({hint})"
    emit_error(message, exception=exc)
    return typer.Exit(code=1)


def build_request(
    project_dir: Path,
    *,
    config_path: Path | None,
    emitter: DiagnosticEmitter,
    max_passes: int | None = None,
    expand: bool = True,
) -> TangleRequest:
    """Load the project configuration and apply command-line overrides."""
    try:
        request = TangleRequest.from_project(
            project_dir.resolve(), config_path=config_path, emitter=emitter
        )
    except ConfigurationError as exc:
        raise fail(exc) from exc
    if max_passes is not None:
        request.config = request.config.model_copy(update={"max_passes": max_passes})
    request.expand = expand
    return request
