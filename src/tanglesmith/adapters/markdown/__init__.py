"""Markdown parsing utilities turning literate documents into code blocks."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any


__all__ = [
    "DEFAULT_PARSER_PRESET",
    "MarkdownParseError",
    "RawCodeBlock",
    "get_parser",
    "parse_code_blocks",
]


DEFAULT_PARSER_PRESET = "commonmark"


class MarkdownParseError(Exception):
    """Raised when a Markdown source cannot be tokenised."""


@dataclass(frozen=True, slots=True)
class RawCodeBlock:
    """Fenced block as reported by the Markdown tokenizer."""

    info: str
    content: str
    start: int
    end: int


_PARSER_CACHE: dict[str, Any] = {}
_PARSER_CACHE_GUARD = Lock()


def get_parser(preset: str = DEFAULT_PARSER_PRESET) -> Any:
    """Return a shared ``MarkdownIt`` instance configured with ``preset``."""
    with _PARSER_CACHE_GUARD:
        parser = _PARSER_CACHE.get(preset)
        if parser is not None:
            return parser
        try:
            from markdown_it import MarkdownIt
        except ModuleNotFoundError as exc:  # pragma: no cover - environment dependent
            raise MarkdownParseError(
                "markdown-it-py is required to read literate documents; "
                "install the 'markdown-it-py' package."
            ) from exc
        try:
            parser = MarkdownIt(preset)
        except Exception as exc:  # pragma: no cover - library-controlled
            raise MarkdownParseError(f"Failed to initialize Markdown parser: {exc}") from exc
        _PARSER_CACHE[preset] = parser
        return parser


def parse_code_blocks(source: str, *, preset: str = DEFAULT_PARSER_PRESET) -> list[RawCodeBlock]:
    """Return every fenced code block of ``source`` in document order.

    Fences nested in lists or block quotes are included; their content is
    already stripped of the container indentation by the tokenizer. Indented
    code blocks carry no info string and are skipped.
    """
    parser = get_parser(preset)
    try:
        tokens = parser.parse(source)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownParseError(f"Failed to parse Markdown source: {exc}") from exc

    blocks: list[RawCodeBlock] = []
    for token in tokens:
        if token.type != "fence":
            continue
        start, end = token.map if token.map else (-1, -1)
        blocks.append(RawCodeBlock(info=token.info, content=token.content, start=start, end=end))
    return blocks
