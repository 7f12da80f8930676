"""Per-invocation CLI state: verbosity, consoles and the events of a run.

Commands obtain the state through `get_cli_state`, which prefers the object
attached to the active click context and otherwise falls back to the last
state seen in this context variable scope. Emitters record the structured
events of a tangle run (`file_written`, `expansion_finished`, ...) on it so
the closing status line can summarise the run.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

import click

from tanglesmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Options and recorded events of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict, init=False)
    _consoles: dict[bool, Console] = field(default_factory=dict, init=False, repr=False)

    def _console_for(self, stderr: bool) -> Console:
        from rich.console import Console

        stream = sys.stderr if stderr else sys.stdout
        console = self._consoles.get(stderr)
        # test runners swap the standard streams between invocations
        if console is None or console.file is not stream:
            console = Console(file=stream, highlight=not stderr)
            self._consoles[stderr] = console
        return console

    @property
    def console(self) -> Console:
        return self._console_for(False)

    @property
    def err_console(self) -> Console:
        return self._console_for(True)

    def record_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        self.events.setdefault(name, []).append(dict(payload or {}))

    def consume_events(self, name: str) -> list[dict[str, Any]]:
        """Return and forget the events recorded under ``name``."""
        return self.events.pop(name, [])


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("tanglesmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None, *, create: bool = True) -> CLIState:
    """Return the state of the running command, creating it when allowed."""
    ctx = ctx or click.get_current_context(silent=True)
    state = ctx.find_object(CLIState) if ctx is not None else _STATE_VAR.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
        if ctx is not None:
            ctx.obj = state
    _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply the global command-line options to the current state."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message``; warnings and errors go to stderr.

    With ``-v`` the exception type is added, with ``-vv`` its causes as well.
    """
    state = get_cli_state()

    if level == "info":
        state.console.log(message)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))

    details: list[str] = []
    if exception is not None and state.verbosity >= 1:
        details.append(f"type: {type(exception).__name__}")
        if state.verbosity >= 2:
            causes = exception_messages(exception)[1:]
            if causes:
                details.append("caused by:")
                details.extend(f"  {cause}" for cause in causes)
    for line in details:
        text.append(f"\n{line}", style=style)

    state.err_console.print(text, soft_wrap=True)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
