"""Selection of file-root fragments and the file-system sink that writes them."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
from pathlib import Path

from .exceptions import EmissionError
from .fragments import FragmentTable


__all__ = [
    "TangledFile",
    "select_roots",
    "write_tangled_files",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TangledFile:
    """Final artifact: an output file name and the expanded code to store in it."""

    output_name: str
    code: str
    fragment: str

    def target(self, output_dir: Path) -> Path:
        """Return the path of the file below ``output_dir``.

        Absolute names and names climbing out of ``output_dir`` are refused.
        """
        name = self.output_name.strip()
        target = output_dir / name
        if Path(name).is_absolute() or not target.resolve().is_relative_to(output_dir.resolve()):
            raise EmissionError(
                f"Output file '{name}' of <<{self.fragment}>> lies outside '{output_dir}'."
            )
        return target


def select_roots(table: FragmentTable) -> list[TangledFile]:
    """Return the artifacts of every file-root fragment, in table order.

    Fragments without the file-root marker are intermediate and never emitted,
    whether or not anything references them.
    """
    return [
        TangledFile(output_name=fragment.output_filename, code=fragment.code, fragment=fragment.name)
        for fragment in table.roots()
    ]


def write_tangled_files(files: Iterable[TangledFile], output_dir: Path) -> list[Path]:
    """Write ``files`` as UTF-8 below ``output_dir`` and return the written paths.

    Every target is checked before the first write. Line endings are written
    exactly as expansion produced them.
    """
    items = list(files)
    targets = [item.target(output_dir) for item in items]
    written: list[Path] = []
    for item, target in zip(items, targets):
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(item.code, encoding="utf-8", newline="")
        except OSError as exc:
            raise EmissionError(f"Failed to write '{target}' for <<{item.fragment}>>.") from exc
        logger.debug("wrote %s (%d characters)", target, len(item.code))
        written.append(target)
    return written
