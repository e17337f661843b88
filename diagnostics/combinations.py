"""Cross-product of per-probe environment hypotheses."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from diagnostics.models import EnvironmentPiece


def all_combinations(
    sets: Sequence[Iterable[frozenset[EnvironmentPiece]]],
) -> list[frozenset[EnvironmentPiece]]:
    """Return every full-system environment one hypothesis per probe can form.

    The first probe varies slowest and the last fastest. A probe with no
    hypotheses adds no constraint, so the result always holds at least one
    environment (empty when no probe detected anything).
    """

    combinations: list[frozenset[EnvironmentPiece]] = [frozenset()]
    for hypotheses in sets:
        choices = list(hypotheses)
        if not choices:
            continue
        combinations = [combination | choice for combination in combinations for choice in choices]
    return combinations
