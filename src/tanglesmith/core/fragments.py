"""Fragment records and the table that accumulates them during a run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .diagnostics import SourceRange
from .tags import FragmentTag, find_references, is_file_root


__all__ = [
    "Fragment",
    "FragmentLocation",
    "FragmentTable",
]


@dataclass(frozen=True, slots=True)
class FragmentLocation:
    """Source position of a block contributing to a fragment."""

    document: str
    range: SourceRange


@dataclass(slots=True)
class Fragment:
    """Named unit of code assembled from one defining block and its appends."""

    name: str
    language: str
    source_document: str
    code: str
    output_filename: str = ""
    locations: list[FragmentLocation] = field(default_factory=list)

    @property
    def is_file_root(self) -> bool:
        return is_file_root(self.name)

    @property
    def anchor(self) -> FragmentLocation:
        """Location used to report problems found in the fragment body."""
        return self.locations[0]


class FragmentTable:
    """Mapping from fragment name to fragment, owned by a single tangle run.

    Iteration follows insertion order, which is the encounter order of the
    defining blocks.
    """

    def __init__(self) -> None:
        self._fragments: dict[str, Fragment] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __getitem__(self, name: str) -> Fragment:
        return self._fragments[name]

    def __iter__(self) -> Iterator[Fragment]:
        return iter(list(self._fragments.values()))

    def __len__(self) -> int:
        return len(self._fragments)

    def get(self, name: str) -> Fragment | None:
        return self._fragments.get(name)

    def define(self, fragment: Fragment) -> bool:
        """Insert a new fragment; refuse to replace an existing one."""
        if fragment.name in self._fragments:
            return False
        self._fragments[fragment.name] = fragment
        return True

    def append(self, name: str, code: str, location: FragmentLocation) -> bool:
        """Concatenate ``code`` onto an existing fragment; False when it is missing."""
        fragment = self._fragments.get(name)
        if fragment is None:
            return False
        fragment.code = f"{fragment.code}{code}"
        fragment.locations.append(location)
        return True

    def roots(self) -> list[Fragment]:
        """Return fragments whose name marks them as output files."""
        return [fragment for fragment in self._fragments.values() if fragment.is_file_root]

    def references(self, name: str) -> list[FragmentTag]:
        """Return the reference tags currently present in a fragment's code."""
        return list(find_references(self._fragments[name].code))
