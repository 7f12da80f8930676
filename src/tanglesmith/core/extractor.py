"""Population of a fragment table from the code blocks of literate documents."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from .diagnostics import Diagnostic, DiagnosticCollection, DiagnosticKind
from .documents import CodeBlock, LiterateDocument
from .fragments import Fragment, FragmentLocation, FragmentTable
from .tags import DefinitionTag, parse_definition


__all__ = [
    "FragmentExtractor",
    "extract_fragments",
]

logger = logging.getLogger(__name__)


class FragmentExtractor:
    """Classify code blocks and apply define/append operations to a table.

    Documents are processed in the order they are fed; the extractor never
    reorders input, so an append encountered before its definition is
    reported rather than deferred.
    """

    def __init__(
        self,
        table: FragmentTable | None = None,
        diagnostics: DiagnosticCollection | None = None,
    ) -> None:
        self.table = table if table is not None else FragmentTable()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollection()

    def feed(self, document: LiterateDocument) -> None:
        for block in document.blocks:
            self.feed_block(document.identifier, block)

    def feed_block(self, document: str, block: CodeBlock) -> None:
        tag = parse_definition(block.info)
        if tag is None:
            return
        if tag.appends:
            self._append(document, block, tag)
        elif tag.defines:
            self._define(document, block, tag)
        else:
            logger.debug("ignoring block <<%s>> without definition marker in %s", tag.name, document)

    def _append(self, document: str, block: CodeBlock, tag: DefinitionTag) -> None:
        location = FragmentLocation(document, block.tag_range())
        if self.table.append(tag.name, block.content, location):
            return
        self._report(
            location,
            DiagnosticKind.APPEND_TO_MISSING,
            f"Trying to append to non-existent fragment <<{tag.name}>> "
            f"at {document}:{location.range.line}",
        )

    def _define(self, document: str, block: CodeBlock, tag: DefinitionTag) -> None:
        location = FragmentLocation(document, block.tag_range())
        existing = self.table.get(tag.name)
        if existing is not None:
            first = existing.anchor
            self._report(
                location,
                DiagnosticKind.DUPLICATE_DEFINITION,
                f"Trying to overwrite existing fragment <<{tag.name}>> "
                f"defined at {first.document}:{first.range.line}",
            )
            return
        if tag.is_file_root and not tag.filename:
            self._report(
                location,
                DiagnosticKind.MISSING_ROOT_FILENAME,
                f"Expected a filename for root fragment <<{tag.name}>>",
            )
            return
        self.table.define(
            Fragment(
                name=tag.name,
                language=tag.language,
                source_document=document,
                code=block.content,
                output_filename=tag.filename,
                locations=[location],
            )
        )

    def _report(self, location: FragmentLocation, kind: DiagnosticKind, message: str) -> None:
        self.diagnostics.add(Diagnostic(location.document, location.range, kind, message))


def extract_fragments(
    documents: Iterable[LiterateDocument],
    *,
    diagnostics: DiagnosticCollection | None = None,
) -> tuple[FragmentTable, DiagnosticCollection]:
    """Build a fresh fragment table from ``documents`` in the supplied order."""
    extractor = FragmentExtractor(diagnostics=diagnostics)
    for document in documents:
        extractor.feed(document)
    logger.debug(
        "extracted %d fragments with %d diagnostics",
        len(extractor.table),
        len(extractor.diagnostics),
    )
    return extractor.table, extractor.diagnostics
