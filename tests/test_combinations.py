"""Tests for the environment cross-product."""

from __future__ import annotations

from math import prod

from diagnostics.combinations import all_combinations
from diagnostics.models import EnvironmentPiece, PieceKind


def _jdk(version: str) -> EnvironmentPiece:
    return EnvironmentPiece.of(PieceKind.JDK, version)


def _studio(version: str) -> EnvironmentPiece:
    return EnvironmentPiece.of(PieceKind.ANDROID_STUDIO, version)


def _xcode(version: str) -> EnvironmentPiece:
    return EnvironmentPiece.of(PieceKind.XCODE, version)


def test_ambiguous_middle_probe_doubles_environments() -> None:
    first = [frozenset({_xcode("15.0")})]
    second = [frozenset({_jdk("11")}), frozenset({_jdk("17")})]
    third = [frozenset({_studio("2023.1")})]

    combinations = all_combinations([first, second, third])

    assert combinations == [
        frozenset({_xcode("15.0"), _jdk("11"), _studio("2023.1")}),
        frozenset({_xcode("15.0"), _jdk("17"), _studio("2023.1")}),
    ]


def test_first_probe_varies_slowest() -> None:
    jdks = [frozenset({_jdk("11")}), frozenset({_jdk("17")})]
    studios = [frozenset({_studio("2022.3")}), frozenset({_studio("2023.1")})]

    combinations = all_combinations([jdks, studios])

    assert combinations == [
        frozenset({_jdk("11"), _studio("2022.3")}),
        frozenset({_jdk("11"), _studio("2023.1")}),
        frozenset({_jdk("17"), _studio("2022.3")}),
        frozenset({_jdk("17"), _studio("2023.1")}),
    ]


def test_probe_without_hypotheses_adds_no_constraint() -> None:
    jdks = [frozenset({_jdk("11")}), frozenset({_jdk("17")})]

    assert all_combinations([[], jdks, []]) == all_combinations([jdks])
    assert len(all_combinations([[], jdks, []])) == 2


def test_no_hypotheses_at_all_yields_single_empty_environment() -> None:
    assert all_combinations([]) == [frozenset()]
    assert all_combinations([[], []]) == [frozenset()]


def test_result_size_is_product_of_nonzero_counts() -> None:
    for counts in ([1, 2, 1], [3, 0, 2], [0], [2, 2, 2, 2], [4, 1, 0, 3]):
        sets = [
            [frozenset({EnvironmentPiece.of(kind, f"{index + 1}")}) for index in range(count)]
            for kind, count in zip(PieceKind, counts)
        ]
        expected = prod(count for count in counts if count > 0)
        assert len(all_combinations(sets)) == expected


def test_generation_is_deterministic() -> None:
    sets = [
        [frozenset({_jdk("11")}), frozenset({_jdk("17")}), frozenset({_jdk("21")})],
        [frozenset({_studio("2023.1"), EnvironmentPiece.of(PieceKind.KOTLIN_PLUGIN, "1.9.0")})],
        [frozenset({_xcode("14.3")}), frozenset({_xcode("15.0")})],
    ]

    assert all_combinations(sets) == all_combinations(sets)


def test_accepts_generators_of_hypotheses() -> None:
    sets = [(frozenset({_jdk(version)}) for version in ("11", "17"))]

    assert len(all_combinations(sets)) == 2
