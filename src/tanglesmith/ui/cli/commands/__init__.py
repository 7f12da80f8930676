"""CLI command implementations exposed via `tanglesmith.ui.cli`."""

from __future__ import annotations

from .fragments import fragments, show
from .tangle import tangle


__all__ = ["fragments", "show", "tangle"]
