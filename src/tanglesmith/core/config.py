"""Project configuration for tangle runs.

TangleConfig

`include` (`list[str]`)
: Glob patterns, relative to the project root, selecting literate documents.
  Defaults to every `*.literate` file in the tree.

`exclude` (`list[str]`)
: Glob patterns removing documents matched by `include`.

`output_dir` (`Path | None`)
: Directory receiving tangled files. Relative values are resolved against the
  project root; the project root itself is used when omitted.

`max_passes` (`int`)
: Ceiling on expansion passes. Cyclic references stop expanding once it is
  reached.

`max_fragment_size` (`int`)
: Largest size, in characters, a fragment may grow to during expansion.
  References whose expansion would exceed it are left unexpanded.

`write_on_error` (`bool`)
: Write tangled files even when the run reported diagnostics or expansion
  did not converge. Files are withheld by default.

The configuration is read from `tanglesmith.yml` (or `tanglesmith.yaml`) at the
project root when present.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError
from .expansion import MAX_FRAGMENT_SIZE, MAX_PASSES


__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_INCLUDE",
    "TangleConfig",
    "find_config_file",
    "load_config",
]

CONFIG_FILENAMES = ("tanglesmith.yml", "tanglesmith.yaml")
DEFAULT_INCLUDE = "**/*.literate"


class TangleConfig(BaseModel):
    """Settings controlling document discovery, expansion and emission."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(default_factory=lambda: [DEFAULT_INCLUDE])
    exclude: list[str] = Field(default_factory=list)
    output_dir: Path | None = None
    max_passes: int = Field(default=MAX_PASSES, ge=1)
    max_fragment_size: int = Field(default=MAX_FRAGMENT_SIZE, ge=1)
    write_on_error: bool = False

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _coerce_patterns(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def resolve_output_dir(self, project_dir: Path) -> Path:
        """Return the absolute output directory for ``project_dir``."""
        if self.output_dir is None:
            return project_dir
        if self.output_dir.is_absolute():
            return self.output_dir
        return project_dir / self.output_dir


def find_config_file(project_dir: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_config(project_dir: Path, path: Path | None = None) -> TangleConfig:
    """Load the project configuration, falling back to defaults when absent."""
    source = path if path is not None else find_config_file(project_dir)
    if source is None:
        return TangleConfig()

    try:
        raw_text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{source}'.") from exc

    try:
        payload = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration file '{source}'.") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(
            f"Configuration file '{source}' must contain a mapping at the top level."
        )

    try:
        return TangleConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{source}': {exc}") from exc
