"""Compatibility matrix model and JSON parsing."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
import json
from typing import Any

from core.logging import logger as LOGGER
from diagnostics.models import EnvironmentPiece, PieceKind, Version


class CompatibilityFormatError(ValueError):
    """Raised when a compatibility document does not match the expected layout."""


class EntryStatus(str, Enum):
    """Classification of a matrix entry."""

    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class VersionRange:
    """Versions of one component kind.

    ``version`` matches a release line by prefix; ``since`` is inclusive and
    ``until`` exclusive. Unset bounds are open.
    """

    kind: PieceKind
    version: Version | None = None
    since: Version | None = None
    until: Version | None = None

    def contains(self, piece: EnvironmentPiece) -> bool:
        if piece.kind is not self.kind:
            return False
        if self.version is not None and not piece.version.matches(self.version):
            return False
        if self.since is not None and piece.version < self.since:
            return False
        if self.until is not None and not piece.version < self.until:
            return False
        return True

    def __str__(self) -> str:
        name = self.kind.display_name
        if self.version is not None:
            return f"{name} {self.version}"
        if self.since is not None and self.until is not None:
            return f"{name} {self.since} to {self.until} (exclusive)"
        if self.since is not None:
            return f"{name} {self.since} or newer"
        if self.until is not None:
            return f"{name} older than {self.until}"
        return f"{name} (any version)"


@dataclass(frozen=True)
class CompatibilityEntry:
    """A combination of version ranges known to work, or known to break."""

    status: EntryStatus
    ranges: tuple[VersionRange, ...]
    text: str | None = None
    url: str | None = None

    @property
    def kinds(self) -> frozenset[PieceKind]:
        return frozenset(version_range.kind for version_range in self.ranges)

    def match(self, environment: Iterable[EnvironmentPiece]) -> frozenset[EnvironmentPiece] | None:
        """Return the pieces satisfying every range, or None if any range is unmet."""

        pieces = list(environment)
        matched: set[EnvironmentPiece] = set()
        for version_range in self.ranges:
            hits = [piece for piece in pieces if version_range.contains(piece)]
            if not hits:
                return None
            matched.update(hits)
        return frozenset(matched)


@dataclass(frozen=True)
class Compatibility:
    """Reference matrix of known-compatible and known-incompatible combinations."""

    entries: tuple[CompatibilityEntry, ...] = ()

    @property
    def kinds(self) -> frozenset[PieceKind]:
        kinds: set[PieceKind] = set()
        for entry in self.entries:
            kinds.update(entry.kinds)
        return frozenset(kinds)

    @classmethod
    def from_json(cls, text: str) -> "Compatibility":
        return cls.from_dict(json.loads(text))

    @classmethod
    def from_dict(cls, data: Any) -> "Compatibility":
        if not isinstance(data, Mapping):
            raise CompatibilityFormatError("Compatibility document must be an object")
        raw_entries = data.get("entries")
        if not isinstance(raw_entries, list):
            raise CompatibilityFormatError("Compatibility document needs an 'entries' list")

        entries: list[CompatibilityEntry] = []
        for index, raw_entry in enumerate(raw_entries):
            entry = _parse_entry(index, raw_entry)
            if entry is not None:
                entries.append(entry)
        return cls(entries=tuple(entries))


def _parse_version(index: int, raw: Mapping[str, Any], key: str) -> Version | None:
    value = raw.get(key)
    if value is None:
        return None
    version = Version.parse(str(value))
    if version is None:
        raise CompatibilityFormatError(f"Entry {index}: invalid {key!r} version {value!r}")
    return version


def _parse_entry(index: int, raw: Any) -> CompatibilityEntry | None:
    if not isinstance(raw, Mapping):
        raise CompatibilityFormatError(f"Entry {index} must be an object")
    try:
        status = EntryStatus(str(raw.get("status", "")).lower())
    except ValueError as exc:
        raise CompatibilityFormatError(f"Entry {index}: unknown status {raw.get('status')!r}") from exc

    raw_ranges = raw.get("environment")
    if not isinstance(raw_ranges, list) or not raw_ranges:
        raise CompatibilityFormatError(f"Entry {index}: 'environment' must be a non-empty list")

    ranges: list[VersionRange] = []
    for raw_range in raw_ranges:
        if not isinstance(raw_range, Mapping) or "name" not in raw_range:
            raise CompatibilityFormatError(f"Entry {index}: every range needs a 'name'")
        try:
            kind = PieceKind(raw_range["name"])
        except ValueError:
            # Newer documents may describe components this version cannot detect.
            LOGGER.info("[Compatibility] Skipping entry %s: unknown component %r", index, raw_range["name"])
            return None
        ranges.append(
            VersionRange(
                kind=kind,
                version=_parse_version(index, raw_range, "version"),
                since=_parse_version(index, raw_range, "from"),
                until=_parse_version(index, raw_range, "until"),
            )
        )

    text = raw.get("text")
    url = raw.get("url")
    return CompatibilityEntry(
        status=status,
        ranges=tuple(ranges),
        text=str(text) if text else None,
        url=str(url) if url else None,
    )
