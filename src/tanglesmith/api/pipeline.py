"""Tangle helpers exposing a friendly façade over the core engine.

Architecture
: `TangleBundle` collects everything a run produces: the expanded fragment
  table, the diagnostics, the expansion report and the file artifacts.
: `tangle_documents` chains extraction, expansion and root selection over
  already parsed documents. It never raises for structural problems; callers
  inspect `TangleBundle.succeeded` to decide whether to emit files.

Usage Example
:
    >>> from tanglesmith.api.pipeline import tangle_documents
    >>> from tanglesmith.core.documents import LiterateDocument
    >>> source = "```c : <<hello.*>>= hello.c\\n<<body>>\\n```\\n\\n```c : <<body>>=\\nputs(\\"hi\\");\\n```\\n"
    >>> bundle = tangle_documents([LiterateDocument.from_text("hello.literate", source)])
    >>> bundle.file_map()
    {'hello.c': 'puts("hi");\\n'}
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.diagnostics import DiagnosticCollection
from ..core.documents import LiterateDocument
from ..core.emission import TangledFile, select_roots
from ..core.expansion import MAX_FRAGMENT_SIZE, MAX_PASSES, ExpansionReport, expand_fragments
from ..core.extractor import extract_fragments
from ..core.fragments import FragmentTable


__all__ = [
    "TangleBundle",
    "tangle_documents",
]


@dataclass(slots=True)
class TangleBundle:
    """Best-effort result of one tangle run."""

    table: FragmentTable
    diagnostics: DiagnosticCollection
    expansion: ExpansionReport
    files: list[TangledFile] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return True when no diagnostic was raised and expansion converged."""
        return not self.diagnostics and self.expansion.converged

    def file_map(self) -> dict[str, str]:
        """Return output names mapped to their tangled code."""
        return {item.output_name: item.code for item in self.files}


def tangle_documents(
    documents: Iterable[LiterateDocument],
    *,
    max_passes: int = MAX_PASSES,
    max_size: int = MAX_FRAGMENT_SIZE,
    expand: bool = True,
) -> TangleBundle:
    """Extract, expand and select root fragments from ``documents``.

    With ``expand`` disabled the table keeps the raw block contents, which is
    what fragment listings want to show.
    """
    table, diagnostics = extract_fragments(documents)
    if expand:
        report = expand_fragments(
            table, diagnostics, max_passes=max_passes, max_size=max_size
        )
    else:
        report = ExpansionReport(converged=True)
    return TangleBundle(
        table=table,
        diagnostics=diagnostics,
        expansion=report,
        files=select_roots(table),
    )
