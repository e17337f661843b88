"""Classification of full-system environments against the compatibility matrix."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from compatibility.models import Compatibility, CompatibilityEntry, EntryStatus
from core.logging import logger as LOGGER
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind
from diagnostics.runner import format_diagnosis

_KIND_ORDER = {kind: index for index, kind in enumerate(PieceKind)}


def describe(environment: Iterable[EnvironmentPiece]) -> str:
    """Return a stable, human-readable listing of environment pieces."""

    pieces = sorted(environment, key=lambda piece: (_KIND_ORDER[piece.kind], piece.version.parts))
    return ", ".join(str(piece) for piece in pieces)


@dataclass(frozen=True)
class Incompatibility:
    """A matrix problem together with the pieces that triggered it."""

    entry: CompatibilityEntry
    pieces: frozenset[EnvironmentPiece]


@dataclass(frozen=True)
class EnvironmentVerdict:
    """Classification of one environment, reduced to the kinds the matrix knows."""

    environment: frozenset[EnvironmentPiece]
    incompatibilities: tuple[Incompatibility, ...] = ()
    compatible: bool = False

    @property
    def unknown(self) -> bool:
        return not self.incompatibilities and not self.compatible


class CompatibilityAnalyzer:
    """Checks environments against a downloaded compatibility matrix."""

    def __init__(self, compatibility: Compatibility) -> None:
        self._compatibility = compatibility
        self._kinds = compatibility.kinds

    def classify(self, environment: Iterable[EnvironmentPiece]) -> EnvironmentVerdict | None:
        """Classify an environment, or return None if the matrix says nothing about it."""

        reduced = frozenset(piece for piece in environment if piece.kind in self._kinds)
        if not reduced:
            return None

        incompatibilities: list[Incompatibility] = []
        compatible = False
        for entry in self._compatibility.entries:
            matched = entry.match(reduced)
            if matched is None:
                continue
            if entry.status is EntryStatus.INCOMPATIBLE:
                incompatibilities.append(Incompatibility(entry=entry, pieces=matched))
            else:
                compatible = True

        return EnvironmentVerdict(
            environment=reduced,
            incompatibilities=tuple(incompatibilities),
            compatible=compatible and not incompatibilities,
        )

    def check(self, environments: Iterable[Iterable[EnvironmentPiece]], verbose: bool) -> str:
        """Return the compatibility report, or an empty string if nothing is worth showing."""

        incompatibilities: dict[Incompatibility, None] = {}
        unknown: dict[frozenset[EnvironmentPiece], None] = {}
        compatible: dict[frozenset[EnvironmentPiece], None] = {}

        checked = 0
        for environment in environments:
            verdict = self.classify(environment)
            if verdict is None:
                continue
            checked += 1
            for incompatibility in verdict.incompatibilities:
                incompatibilities.setdefault(incompatibility, None)
            if verdict.compatible:
                compatible.setdefault(verdict.environment, None)
            elif verdict.unknown:
                unknown.setdefault(verdict.environment, None)

        LOGGER.debug(
            "[Compatibility] Checked %s environments: %s problems, %s unknown, %s compatible",
            checked,
            len(incompatibilities),
            len(unknown),
            len(compatible),
        )

        result = Diagnosis.Builder("Compatibility")
        for incompatibility in incompatibilities:
            entry = incompatibility.entry
            details = [f"Affected environment: {describe(incompatibility.pieces)}"]
            if entry.url:
                details.append(f"More information: {entry.url}")
            result.add_warning(entry.text or "Known incompatible combination", *details)

        for environment in unknown:
            result.add_info(
                f"Unknown combination: {describe(environment)}",
                "This combination is not listed in the compatibility data. It may still work.",
            )

        if verbose:
            for environment in compatible:
                result.add_success(f"Known compatible: {describe(environment)}")

        diagnosis = result.build()
        if not diagnosis.messages:
            return ""
        return format_diagnosis(diagnosis, verbose=True)
