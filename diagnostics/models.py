"""Models for diagnosis results and the environment pieces they detect."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
import functools
import re

_VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)*")


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """Dotted numeric version such as ``17.0.2``.

    Versions compare numerically; missing trailing components count as zero,
    so ``17`` and ``17.0`` are equal.
    """

    text: str

    def __post_init__(self) -> None:
        if not _VERSION_PATTERN.fullmatch(self.text):
            raise ValueError(f"Not a dotted numeric version: {self.text!r}")

    @classmethod
    def parse(cls, raw: str | None) -> "Version | None":
        """Extract the first dotted number from free text, if any."""

        if not raw:
            return None
        match = _VERSION_PATTERN.search(raw)
        if match is None:
            return None
        return cls(match.group(0))

    @property
    def parts(self) -> tuple[int, ...]:
        return tuple(int(part) for part in self.text.split("."))

    def _key(self) -> tuple[int, ...]:
        parts = list(self.parts)
        while len(parts) > 1 and parts[-1] == 0:
            parts.pop()
        return tuple(parts)

    def matches(self, prefix: "Version") -> bool:
        """Return True if ``prefix`` names this version or a release line containing it."""

        prefix_parts = prefix.parts
        own_parts = self.parts + (0,) * max(0, len(prefix_parts) - len(self.parts))
        return own_parts[: len(prefix_parts)] == prefix_parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        width = max(len(self.parts), len(other.parts))
        own = self.parts + (0,) * (width - len(self.parts))
        theirs = other.parts + (0,) * (width - len(other.parts))
        return own < theirs

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.text


class PieceKind(str, Enum):
    """Kinds of versioned components relevant to compatibility."""

    MACOS = "Macos"
    JDK = "Jdk"
    ANDROID_STUDIO = "AndroidStudio"
    KOTLIN_PLUGIN = "KotlinPlugin"
    XCODE = "Xcode"
    COCOAPODS = "Cocoapods"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    PieceKind.MACOS: "macOS",
    PieceKind.JDK: "JDK",
    PieceKind.ANDROID_STUDIO: "Android Studio",
    PieceKind.KOTLIN_PLUGIN: "Kotlin Plugin",
    PieceKind.XCODE: "Xcode",
    PieceKind.COCOAPODS: "CocoaPods",
}


@dataclass(frozen=True)
class EnvironmentPiece:
    """One versioned component, e.g. JDK 17."""

    kind: PieceKind
    version: Version

    @classmethod
    def of(cls, kind: PieceKind, version: str | Version) -> "EnvironmentPiece":
        if isinstance(version, str):
            version = Version(version)
        return cls(kind=kind, version=version)

    def __str__(self) -> str:
        return f"{self.kind.display_name} {self.version}"


class Conclusion(str, Enum):
    """Outcome of a message or diagnosis, ordered by severity."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    FAILURE = "failure"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def style(self) -> str:
        return _STYLES[self]


_SEVERITY = {
    Conclusion.SUCCESS: 0,
    Conclusion.INFO: 1,
    Conclusion.WARNING: 2,
    Conclusion.FAILURE: 3,
}
_SYMBOLS = {
    Conclusion.SUCCESS: "✓",
    Conclusion.INFO: "i",
    Conclusion.WARNING: "!",
    Conclusion.FAILURE: "✖",
}
_STYLES = {
    Conclusion.SUCCESS: "green",
    Conclusion.INFO: "blue",
    Conclusion.WARNING: "yellow",
    Conclusion.FAILURE: "red",
}


def worst(conclusions: Iterable[Conclusion]) -> Conclusion:
    """Return the most severe conclusion, or SUCCESS for none."""

    return max(conclusions, key=lambda conclusion: conclusion.severity, default=Conclusion.SUCCESS)


@dataclass(frozen=True)
class Message:
    """A titled block of report text with optional detail lines."""

    conclusion: Conclusion
    title: str
    details: tuple[str, ...] = ()


@dataclass(frozen=True)
class Diagnosis:
    """Result of one diagnostic probe.

    ``checked_environments`` holds the alternative sets of pieces the probe may
    have detected. It is usually a single hypothesis; it holds several when
    detection is ambiguous and is empty when nothing was detected.
    """

    title: str
    messages: tuple[Message, ...] = ()
    checked_environments: tuple[frozenset[EnvironmentPiece], ...] = field(default=())

    @property
    def conclusion(self) -> Conclusion:
        return worst(message.conclusion for message in self.messages)

    class Builder:
        """Accumulates messages and hypotheses for a single diagnosis."""

        def __init__(self, title: str) -> None:
            self._title = title
            self._messages: list[Message] = []
            self._environments: list[frozenset[EnvironmentPiece]] = []
            self._conclusion = Conclusion.SUCCESS

        @property
        def conclusion(self) -> Conclusion:
            return self._conclusion

        def add(self, conclusion: Conclusion, title: str, *details: str) -> "Diagnosis.Builder":
            self._messages.append(Message(conclusion=conclusion, title=title, details=tuple(details)))
            self._conclusion = worst((self._conclusion, conclusion))
            return self

        def add_success(self, title: str, *details: str) -> "Diagnosis.Builder":
            return self.add(Conclusion.SUCCESS, title, *details)

        def add_info(self, title: str, *details: str) -> "Diagnosis.Builder":
            return self.add(Conclusion.INFO, title, *details)

        def add_warning(self, title: str, *details: str) -> "Diagnosis.Builder":
            return self.add(Conclusion.WARNING, title, *details)

        def add_failure(self, title: str, *details: str) -> "Diagnosis.Builder":
            return self.add(Conclusion.FAILURE, title, *details)

        def add_environment(self, pieces: Iterable[EnvironmentPiece]) -> "Diagnosis.Builder":
            """Record one hypothesis; duplicates are ignored."""

            hypothesis = frozenset(pieces)
            if hypothesis not in self._environments:
                self._environments.append(hypothesis)
            return self

        def build(self) -> "Diagnosis":
            return Diagnosis(
                title=self._title,
                messages=tuple(self._messages),
                checked_environments=tuple(self._environments),
            )
