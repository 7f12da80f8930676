"""Recognition of fragment definition and reference tags.

Definition tags live in the info string of a fenced code block::

    python : the entry point <<main.*>>= src/main.py

Reference tags live inside fragment bodies, one or more per line::

        <<parse arguments>>

Both grammars are pure pattern matching and never consult a fragment table.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import re


__all__ = [
    "APPEND_MARKER",
    "DEFINITION_RE",
    "FILE_ROOT_MARKER",
    "REFERENCE_RE",
    "ROOT_MARKER",
    "DefinitionTag",
    "FragmentTag",
    "find_references",
    "is_file_root",
    "parse_definition",
]

ROOT_MARKER = "="
APPEND_MARKER = "+"
FILE_ROOT_MARKER = ".*"

# A name is any run of characters that does not contain the closing ``>>``.
_NAME = r"(?P<name>(?:(?!>>)[^\n])+)"
_MARKERS = r"(?P<root>=)?(?P<add>\+)?"

DEFINITION_RE = re.compile(
    r"^(?P<lang>[^:\n]*):[^\n]*<<" + _NAME + ">>" + _MARKERS + r"\s*(?P<filename>[^\n]*)$"
)
REFERENCE_RE = re.compile(r"(?P<indent>[ \t]*)<<" + _NAME + ">>" + _MARKERS)


def is_file_root(name: str) -> bool:
    """Return whether a fragment name marks an emitted output file."""
    return FILE_ROOT_MARKER in name


@dataclass(frozen=True, slots=True)
class FragmentTag:
    """A tag matched at a reference site inside fragment code."""

    indent: str
    name: str
    is_root: bool
    is_append: bool
    text: str
    start: int
    end: int

    @property
    def has_markers(self) -> bool:
        """Return whether the reference illegally carries definition markers."""
        return self.is_root or self.is_append

    @property
    def tag(self) -> str:
        """Return the tag text without its leading indentation."""
        return self.text[len(self.indent) :]


@dataclass(frozen=True, slots=True)
class DefinitionTag:
    """A tag matched in the info string of a code block."""

    language: str
    name: str
    is_root: bool
    is_append: bool
    filename: str
    name_start: int
    name_end: int

    @property
    def is_file_root(self) -> bool:
        return is_file_root(self.name)

    @property
    def defines(self) -> bool:
        """Return True for a defining block (root marker without append marker)."""
        return self.is_root and not self.is_append

    @property
    def appends(self) -> bool:
        """Return True for an appending block (root marker paired with append marker)."""
        return self.is_root and self.is_append


def parse_definition(info: str) -> DefinitionTag | None:
    """Parse the info string of a code block, returning None when it carries no tag."""
    match = DEFINITION_RE.match(info.strip("\n"))
    if match is None:
        return None
    return DefinitionTag(
        language=match.group("lang").strip(),
        name=match.group("name"),
        is_root=match.group("root") is not None,
        is_append=match.group("add") is not None,
        filename=match.group("filename").strip(),
        name_start=match.start("name"),
        name_end=match.end("name"),
    )


def find_references(code: str) -> Iterator[FragmentTag]:
    """Yield every reference tag found in ``code``, left to right."""
    for match in REFERENCE_RE.finditer(code):
        yield FragmentTag(
            indent=match.group("indent"),
            name=match.group("name"),
            is_root=match.group("root") is not None,
            is_append=match.group("add") is not None,
            text=match.group(0),
            start=match.start(),
            end=match.end(),
        )
