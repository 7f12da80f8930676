"""Bounded fixed-point expansion of fragment references.

Every pass walks the table in insertion order and replaces each resolvable
reference tag with the referenced fragment's current code, re-indented to
the reference site. Passes repeat until one performs no substitution or the
pass ceiling is reached. Cyclic fragments never reach a fixed point; the
ceiling guarantees termination and leaves their tags in the output.

A fragment that references a cycle more than once grows geometrically from
one pass to the next, so the ceiling alone does not bound the work. No
fragment is allowed to grow past ``max_size`` characters: a substitution
that would cross that size is skipped and its tag stays verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from .diagnostics import Diagnostic, DiagnosticCollection, DiagnosticKind
from .fragments import Fragment, FragmentTable
from .tags import FragmentTag, find_references


__all__ = [
    "MAX_FRAGMENT_SIZE",
    "MAX_PASSES",
    "ExpansionReport",
    "expand_fragments",
    "indent_block",
]

logger = logging.getLogger(__name__)

MAX_PASSES = 25
MAX_FRAGMENT_SIZE = 1 << 20


@dataclass(slots=True)
class ExpansionReport:
    """Outcome of an expansion run.

    ``truncated`` lists, in table order, the fragments that hit the size
    limit at least once. A truncated run never counts as converged.
    """

    passes: int = 0
    substitutions: int = 0
    converged: bool = False
    truncated: list[str] = field(default_factory=list)


def indent_block(code: str, indent: str, *, keep_newline: bool = False) -> str:
    """Prefix every line of ``code`` with ``indent``.

    The empty segment left by a trailing newline is dropped; the newline is
    put back only when ``keep_newline`` is set, i.e. when nothing follows the
    reference site to terminate the line. Empty code has no lines at all and
    stays empty, indent included.
    """
    if not code:
        return ""
    lines = code.split("\n")
    terminated = len(lines) > 1 and lines[-1] == ""
    if terminated:
        lines.pop()
    block = "\n".join(f"{indent}{line}" for line in lines)
    if terminated and keep_newline:
        block += "\n"
    return block


class _Expander:
    def __init__(
        self, table: FragmentTable, diagnostics: DiagnosticCollection, max_size: int
    ) -> None:
        self.table = table
        self.diagnostics = diagnostics
        self.max_size = max_size
        self.truncated: dict[str, None] = {}
        self._reported: set[tuple[str, str, DiagnosticKind]] = set()

    def run_pass(self) -> tuple[int, bool]:
        substitutions = 0
        truncated = False
        for fragment in self.table:
            count, skipped = self._expand(fragment)
            substitutions += count
            if skipped:
                truncated = True
                self.truncated.setdefault(fragment.name)
        return substitutions, truncated

    def _expand(self, fragment: Fragment) -> tuple[int, bool]:
        code = fragment.code
        size = len(code)
        pieces: list[str] = []
        blocks: dict[tuple[str, str, bool], str] = {}
        cursor = 0
        substitutions = 0
        skipped = False
        for ref in find_references(code):
            if ref.has_markers:
                markers = ("=" if ref.is_root else "") + ("+" if ref.is_append else "")
                self._report(
                    fragment,
                    ref,
                    DiagnosticKind.MALFORMED_REFERENCE_MARKER,
                    f"Found '{markers}': incorrect fragment tag in fragment "
                    f"<<{fragment.name}>>: {ref.tag}",
                )
            target = self.table.get(ref.name)
            if target is None:
                self._report(
                    fragment,
                    ref,
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    f"Could not find fragment {ref.tag} ({ref.name}) "
                    f"referenced in <<{fragment.name}>>",
                )
                continue
            # target.code is stable while this fragment is rewritten
            key = (ref.name, ref.indent, ref.end == len(code))
            block = blocks.get(key)
            if block is None:
                block = blocks[key] = indent_block(target.code, ref.indent, keep_newline=key[2])
            grown = size + len(block) - (ref.end - ref.start)
            if grown > self.max_size:
                skipped = True
                continue
            size = grown
            pieces.append(code[cursor : ref.start])
            pieces.append(block)
            cursor = ref.end
            substitutions += 1

        if substitutions:
            pieces.append(code[cursor:])
            fragment.code = "".join(pieces)
        return substitutions, skipped

    def _report(
        self, fragment: Fragment, ref: FragmentTag, kind: DiagnosticKind, message: str
    ) -> None:
        key = (fragment.name, ref.tag, kind)
        if key in self._reported:
            return
        self._reported.add(key)
        anchor = fragment.anchor
        self.diagnostics.add(Diagnostic(anchor.document, anchor.range, kind, message))


def expand_fragments(
    table: FragmentTable,
    diagnostics: DiagnosticCollection | None = None,
    *,
    max_passes: int = MAX_PASSES,
    max_size: int = MAX_FRAGMENT_SIZE,
) -> ExpansionReport:
    """Expand every fragment of ``table`` in place.

    Unresolved and malformed references are recorded in ``diagnostics`` once
    per fragment and tag, however many passes encounter them. The run stops
    early, unconverged, when a pass could only have grown fragments past
    ``max_size``.
    """
    if max_passes < 1:
        raise ValueError("max_passes must be at least 1")
    if max_size < 1:
        raise ValueError("max_size must be at least 1")
    expander = _Expander(
        table, diagnostics if diagnostics is not None else DiagnosticCollection(), max_size
    )
    report = ExpansionReport()

    while report.passes < max_passes:
        report.passes += 1
        substitutions, truncated = expander.run_pass()
        report.substitutions += substitutions
        logger.debug("expansion pass %d: %d substitutions", report.passes, substitutions)
        if not substitutions:
            report.converged = not (truncated or expander.truncated)
            break

    report.truncated = list(expander.truncated)
    if report.truncated:
        logger.warning(
            "Fragment expansion stopped growing %s at %d characters; "
            "the remaining references are left unexpanded.",
            ", ".join(f"<<{name}>>" for name in report.truncated),
            max_size,
        )
    elif not report.converged:
        logger.warning(
            "Fragment expansion did not reach a fixed point within %d passes; "
            "cyclic references are left unexpanded.",
            max_passes,
        )
    return report
