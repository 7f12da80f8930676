"""Document abstractions consumed by the fragment extractor.

Architecture
: `CodeBlock` is the only thing the tangle core knows about a parsed
  document: the info string after the opening fence, the raw body, and the
  line span used for diagnostics.
: `LiterateDocument` pairs an identifier with its ordered blocks. Parsing
  prose markup is delegated to :mod:`tanglesmith.adapters.markdown`, so the
  core stays independent of any Markdown dialect.

Usage Example
:
    >>> from tanglesmith.core.documents import LiterateDocument
    >>> doc = LiterateDocument.from_text("intro.literate", "```c : <<x>>=\\nint x;\\n```\\n")
    >>> [block.info for block in doc.blocks]
    ['c : <<x>>=']
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path

from ..adapters.markdown import MarkdownParseError, parse_code_blocks
from .diagnostics import SourceRange
from .exceptions import DocumentLoadError
from .tags import parse_definition


__all__ = [
    "CodeBlock",
    "LiterateDocument",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Fenced code block with its document-relative line span (0-based, end exclusive)."""

    info: str
    content: str
    start_line: int
    end_line: int

    def tag_range(self) -> SourceRange:
        """Return the range spanning the block, with columns framing the tag name."""
        tag = parse_definition(self.info)
        if tag is None:
            return SourceRange(self.start_line, 0, self.end_line, 0)
        return SourceRange(self.start_line, tag.name_start, self.end_line, tag.name_end)


@dataclass(slots=True)
class LiterateDocument:
    """A literate source identified by name, with its code blocks in document order."""

    identifier: str
    blocks: Sequence[CodeBlock] = field(default_factory=list)
    path: Path | None = None

    @classmethod
    def from_text(
        cls, identifier: str, text: str, *, path: Path | None = None
    ) -> LiterateDocument:
        try:
            raw_blocks = parse_code_blocks(text)
        except MarkdownParseError as exc:
            raise DocumentLoadError(f"Failed to parse '{identifier}': {exc}") from exc
        blocks = [
            CodeBlock(info=raw.info, content=raw.content, start_line=raw.start, end_line=raw.end)
            for raw in raw_blocks
        ]
        return cls(identifier=identifier, blocks=blocks, path=path)

    @classmethod
    def from_path(cls, path: Path, *, root: Path | None = None) -> LiterateDocument:
        """Read and parse ``path``; the identifier is relative to ``root`` when given."""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"Unable to read literate document '{path}'.") from exc

        identifier = path.as_posix()
        if root is not None:
            try:
                identifier = path.resolve().relative_to(root.resolve()).as_posix()
            except ValueError:
                logger.debug("document %s lies outside %s", path, root)
        return cls.from_text(identifier, text, path=path)
