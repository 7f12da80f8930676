"""Custom exception hierarchy for hard failures around a tangle run.

Structural problems in literate documents (duplicate definitions, missing
references, ...) are never raised; they are collected as diagnostics.
"""

from __future__ import annotations


class TanglesmithError(RuntimeError):
    """Base exception for failures that abort a tangle run."""


class DocumentLoadError(TanglesmithError):
    """Raised when a literate document cannot be read or decoded."""


class ConfigurationError(TanglesmithError):
    """Raised when the project configuration is malformed or invalid."""


class EmissionError(TanglesmithError):
    """Raised when tangled files cannot or must not be written."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "DocumentLoadError",
    "EmissionError",
    "TanglesmithError",
    "exception_hint",
    "exception_messages",
]
