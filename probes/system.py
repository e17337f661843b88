"""Diagnostics routines for the host operating system."""

from __future__ import annotations

from core.system import System
from diagnostics.base import Diagnostic
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind, Version


class SystemDiagnostic(Diagnostic):
    """Reports the operating system and CPU architecture."""

    title = "Operating System"

    def __init__(self, system: System) -> None:
        self._system = system

    def diagnose(self) -> Diagnosis:
        result = Diagnosis.Builder(self.title)
        arch = self._system.execute("uname", "-m")
        cpu = arch.output if arch.ok and arch.output else "unknown"

        if not self._system.is_macos:
            result.add_warning(
                f"{self._system.os_name} ({cpu})",
                "iOS development requires macOS; only Android targets can be built on this machine.",
            )
            return result.build()

        version_result = self._system.execute("sw_vers", "-productVersion")
        version = Version.parse(version_result.output) if version_result.ok else None
        if version is None:
            result.add_warning(
                f"macOS ({cpu})",
                "Unable to determine the macOS version",
            )
            return result.build()

        result.add_success(f"macOS ({version})\nCPU: {cpu}")
        result.add_environment([EnvironmentPiece.of(PieceKind.MACOS, version)])
        return result.build()
