"""Interface implemented by every diagnostic probe."""

from __future__ import annotations

from abc import ABC, abstractmethod

from diagnostics.models import Diagnosis


class Diagnostic(ABC):
    """A probe that inspects one part of the toolchain.

    Expected problems such as a missing tool are reported as a Failure
    diagnosis, never raised.
    """

    title: str = "Diagnostic"

    @abstractmethod
    def diagnose(self) -> Diagnosis:
        """Inspect the system and return a diagnosis."""
