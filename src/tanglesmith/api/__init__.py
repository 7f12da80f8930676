"""Facade aggregating the high-level tangle workflow.

Architecture
: `tangle_documents` runs extraction, expansion and root selection over
  parsed documents and returns a `TangleBundle`.
: `TangleService` adds project concerns on top: configuration, document
  discovery, diagnostic emission, and writing files.

Usage Example
:
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> from tanglesmith.api import TangleRequest, TangleService
    >>> with TemporaryDirectory() as tmpdir:
    ...     root = Path(tmpdir)
    ...     _ = (root / "main.literate").write_text("```sh : <<run.*>>= run.sh\\necho hi\\n```\\n")
    ...     service = TangleService()
    ...     response = service.tangle(TangleRequest.from_project(root))
    ...     [path.name for path in service.write(response)]
    ['run.sh']
"""

from __future__ import annotations

from .pipeline import TangleBundle, tangle_documents
from .service import TangleRequest, TangleResponse, TangleService


__all__ = [
    "TangleBundle",
    "TangleRequest",
    "TangleResponse",
    "TangleService",
    "tangle_documents",
]
