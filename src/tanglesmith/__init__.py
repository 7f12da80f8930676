"""Primary public API for Tanglesmith."""

from __future__ import annotations

from tanglesmith.api import (
    TangleBundle,
    TangleRequest,
    TangleResponse,
    TangleService,
    tangle_documents,
)
from tanglesmith.core import (
    MAX_PASSES,
    CodeBlock,
    Diagnostic,
    DiagnosticCollection,
    DiagnosticKind,
    ExpansionReport,
    Fragment,
    FragmentTable,
    LiterateDocument,
    SourceRange,
    TangledFile,
    expand_fragments,
    extract_fragments,
    select_roots,
)
from tanglesmith.core.config import TangleConfig, load_config
from tanglesmith.core.exceptions import (
    ConfigurationError,
    DocumentLoadError,
    EmissionError,
    TanglesmithError,
)
from tanglesmith.version import get_version


__version__ = get_version()

__all__ = [
    "MAX_PASSES",
    "CodeBlock",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticKind",
    "DocumentLoadError",
    "EmissionError",
    "ExpansionReport",
    "Fragment",
    "FragmentTable",
    "LiterateDocument",
    "SourceRange",
    "TangleBundle",
    "TangleConfig",
    "TangleRequest",
    "TangleResponse",
    "TangleService",
    "TangledFile",
    "TanglesmithError",
    "__version__",
    "expand_fragments",
    "extract_fragments",
    "load_config",
    "select_roots",
    "tangle_documents",
]
