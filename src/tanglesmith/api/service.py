"""Tangle orchestration utilities for CLI and embedding integrations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path

from tanglesmith.core.config import TangleConfig, load_config
from tanglesmith.core.diagnostics import DiagnosticEmitter, NullEmitter, emit_diagnostics
from tanglesmith.core.documents import LiterateDocument
from tanglesmith.core.emission import write_tangled_files
from tanglesmith.core.exceptions import EmissionError
from tanglesmith.core.workspace import discover_documents, load_documents

from .pipeline import TangleBundle, tangle_documents


__all__ = [
    "TangleRequest",
    "TangleResponse",
    "TangleService",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TangleRequest:
    """Description of a tangle run over one project directory."""

    project_dir: Path
    config: TangleConfig = field(default_factory=TangleConfig)
    documents: Sequence[Path] | None = None
    expand: bool = True
    emitter: DiagnosticEmitter | None = None

    @classmethod
    def from_project(
        cls,
        project_dir: Path,
        *,
        config_path: Path | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> TangleRequest:
        """Build a request using the configuration file found in ``project_dir``."""
        return cls(
            project_dir=project_dir,
            config=load_config(project_dir, config_path),
            emitter=emitter,
        )


@dataclass(slots=True)
class TangleResponse:
    """Captured outcome of :class:`TangleService` execution."""

    request: TangleRequest
    documents: list[LiterateDocument]
    bundle: TangleBundle

    @property
    def succeeded(self) -> bool:
        return self.bundle.succeeded

    @property
    def output_dir(self) -> Path:
        return self.request.config.resolve_output_dir(self.request.project_dir)


class TangleService:
    """Coordinate discovery, tangling and emission for a project."""

    def load(self, request: TangleRequest) -> list[LiterateDocument]:
        """Discover (unless given) and parse the request's documents."""
        emitter = request.emitter or NullEmitter()
        if request.documents is not None:
            paths = list(request.documents)
        else:
            paths = discover_documents(request.project_dir, request.config)
        documents = load_documents(paths, request.project_dir)
        for document in documents:
            emitter.event(
                "document_loaded",
                {"document": document.identifier, "blocks": len(document.blocks)},
            )
        return documents

    def tangle(self, request: TangleRequest) -> TangleResponse:
        """Run a complete tangle and report its diagnostics once it has finished."""
        emitter = request.emitter or NullEmitter()
        documents = self.load(request)
        bundle = tangle_documents(
            documents,
            max_passes=request.config.max_passes,
            max_size=request.config.max_fragment_size,
            expand=request.expand,
        )
        if request.expand:
            emitter.event(
                "expansion_finished",
                {
                    "passes": bundle.expansion.passes,
                    "converged": bundle.expansion.converged,
                    "substitutions": bundle.expansion.substitutions,
                    "truncated": list(bundle.expansion.truncated),
                },
            )
        emit_diagnostics(emitter, bundle.diagnostics)
        if bundle.expansion.truncated:
            names = ", ".join(f"<<{name}>>" for name in bundle.expansion.truncated)
            emitter.warning(
                f"Expansion of {names} was cut off at {request.config.max_fragment_size} "
                "characters; the fragments reference a cycle more than once."
            )
        elif not bundle.expansion.converged:
            emitter.warning(
                f"Expansion stopped after {bundle.expansion.passes} passes without reaching "
                "a fixed point; some fragments reference each other cyclically."
            )
        return TangleResponse(request=request, documents=documents, bundle=bundle)

    def write(
        self,
        response: TangleResponse,
        *,
        output_dir: Path | None = None,
        force: bool = False,
    ) -> list[Path]:
        """Write the tangled files of ``response``.

        Failed runs are refused unless ``force`` is set or the configuration
        enables ``write_on_error``.
        """
        allowed = force or response.request.config.write_on_error
        if not response.succeeded and not allowed:
            raise EmissionError(
                "Refusing to write tangled files: the run reported errors "
                "(use --force to write them anyway)."
            )
        target_dir = output_dir or response.output_dir
        emitter = response.request.emitter or NullEmitter()
        written = write_tangled_files(response.bundle.files, target_dir)
        for path, item in zip(written, response.bundle.files):
            emitter.event("file_written", {"path": str(path), "fragment": item.fragment})
        logger.debug("wrote %d tangled files to %s", len(written), target_dir)
        return written
