"""Tangle core: tag grammar, fragment table, extraction and expansion."""

from __future__ import annotations

from .diagnostics import (
    Diagnostic,
    DiagnosticCollection,
    DiagnosticEmitter,
    DiagnosticKind,
    LoggingEmitter,
    NullEmitter,
    SourceRange,
)
from .documents import CodeBlock, LiterateDocument
from .emission import TangledFile, select_roots, write_tangled_files
from .expansion import MAX_FRAGMENT_SIZE, MAX_PASSES, ExpansionReport, expand_fragments
from .extractor import FragmentExtractor, extract_fragments
from .fragments import Fragment, FragmentLocation, FragmentTable
from .tags import DefinitionTag, FragmentTag, find_references, parse_definition


__all__ = [
    "MAX_FRAGMENT_SIZE",
    "MAX_PASSES",
    "CodeBlock",
    "DefinitionTag",
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticEmitter",
    "DiagnosticKind",
    "ExpansionReport",
    "Fragment",
    "FragmentExtractor",
    "FragmentLocation",
    "FragmentTable",
    "FragmentTag",
    "LiterateDocument",
    "LoggingEmitter",
    "NullEmitter",
    "SourceRange",
    "TangledFile",
    "expand_fragments",
    "extract_fragments",
    "find_references",
    "parse_definition",
    "select_roots",
    "write_tangled_files",
]
