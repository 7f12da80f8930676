"""Discovery of literate documents inside a project directory."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatch
import logging
from pathlib import Path

from .config import TangleConfig
from .documents import LiterateDocument


__all__ = [
    "discover_documents",
    "load_documents",
]

logger = logging.getLogger(__name__)


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def discover_documents(project_dir: Path, config: TangleConfig | None = None) -> list[Path]:
    """Return literate documents under ``project_dir`` sorted by relative path.

    The sort order is the encounter order used by the extractor, so a fragment
    must be defined in a document that sorts before any document appending to it.
    """
    config = config or TangleConfig()
    root = project_dir.resolve()
    found: dict[str, Path] = {}
    for pattern in config.include:
        for candidate in root.glob(pattern):
            if not candidate.is_file():
                continue
            relative = _relative(candidate, root)
            if any(fnmatch(relative, excluded) for excluded in config.exclude):
                logger.debug("excluding %s", relative)
                continue
            found.setdefault(relative, candidate)
    return [found[key] for key in sorted(found)]


def load_documents(paths: Iterable[Path], project_dir: Path) -> list[LiterateDocument]:
    """Read and parse every path, keeping the given order."""
    return [LiterateDocument.from_path(path, root=project_dir) for path in paths]
