"""Diagnostic records and emitters shared across the tangle pipeline.

Architecture
: `Diagnostic` describes one structural problem found in a literate document:
  which document, which range, which kind of error, and a message. They are
  plain values produced by the extractor and the expansion engine.
: `DiagnosticCollection` accumulates them over a whole run so independent
  mistakes in independent fragments are all surfaced together.
: `DiagnosticEmitter` implementations decide how diagnostics and structured
  events are presented (ignored, logged, or rendered by the CLI).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Taxonomy of structural errors reported by a tangle run."""

    DUPLICATE_DEFINITION = "duplicate-definition"
    APPEND_TO_MISSING = "append-to-missing"
    MISSING_ROOT_FILENAME = "missing-root-filename"
    UNRESOLVED_REFERENCE = "unresolved-reference"
    MALFORMED_REFERENCE_MARKER = "malformed-reference-marker"


@dataclass(frozen=True, slots=True)
class SourceRange:
    """Document-relative span, 0-based lines and columns, end line exclusive."""

    start_line: int
    start_column: int = 0
    end_line: int | None = None
    end_column: int = 0

    @property
    def line(self) -> int:
        """Return the 1-based line number of the start of the range."""
        return self.start_line + 1


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single structural error anchored in a literate document."""

    document: str
    range: SourceRange
    kind: DiagnosticKind
    message: str
    severity: str = "error"

    def format(self) -> str:
        """Return a compiler-style ``document:line:column: severity: message`` string."""
        location = f"{self.document}:{self.range.line}:{self.range.start_column + 1}"
        return f"{location}: {self.severity}: {self.message}"


@dataclass(slots=True)
class DiagnosticCollection:
    """Ordered, duplicate-free accumulation of diagnostics for one run."""

    _items: list[Diagnostic] = field(default_factory=list)
    _seen: set[Diagnostic] = field(default_factory=set, repr=False)

    def add(self, diagnostic: Diagnostic) -> bool:
        """Record a diagnostic, returning False when it was already present."""
        if diagnostic in self._seen:
            return False
        self._seen.add(diagnostic)
        self._items.append(diagnostic)
        logger.debug("diagnostic recorded: %s", diagnostic.format())
        return True

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def emit_diagnostics(emitter: DiagnosticEmitter, diagnostics: Iterable[Diagnostic]) -> int:
    """Forward every diagnostic to ``emitter.error`` and return how many were sent."""
    count = 0
    for diagnostic in diagnostics:
        emitter.error(diagnostic.format())
        count += 1
    return count


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "document_loaded":
        document = data.get("document") or "<unknown>"
        blocks = data.get("blocks", 0)
        return f"Loaded {document} ({blocks} code blocks)"

    if name == "expansion_finished":
        passes = data.get("passes", 0)
        if data.get("converged", True):
            return f"Expansion reached a fixed point after {passes} passes"
        truncated = data.get("truncated") or []
        if truncated:
            names = ", ".join(f"<<{name}>>" for name in truncated)
            return f"Expansion stopped after {passes} passes; {names} hit the size limit"
        return f"Expansion stopped at the {passes}-pass ceiling without a fixed point"

    if name == "file_written":
        path = data.get("path") or "<unknown>"
        fragment = data.get("fragment")
        suffix = f" (from <<{fragment}>>)" if fragment else ""
        return f"Wrote {path}{suffix}"

    return None


__all__ = [
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticEmitter",
    "DiagnosticKind",
    "LoggingEmitter",
    "NullEmitter",
    "SourceRange",
    "emit_diagnostics",
    "format_event_message",
]
