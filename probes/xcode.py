"""Diagnostics routines for Xcode."""

from __future__ import annotations

from core.system import System
from diagnostics.base import Diagnostic
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind, Version

XCODE_DOWNLOAD_URL = "https://developer.apple.com/xcode/"


class XcodeDiagnostic(Diagnostic):
    """Checks the selected Xcode and its command line tools."""

    title = "Xcode"

    def __init__(self, system: System) -> None:
        self._system = system

    def diagnose(self) -> Diagnosis:
        result = Diagnosis.Builder(self.title)
        if not self._system.is_macos:
            result.add_info("Xcode is only available on macOS", "iOS targets will be skipped")
            return result.build()

        build = self._system.execute("xcodebuild", "-version")
        lines = build.output.splitlines() if build.ok and build.output else []
        version = Version.parse(lines[0]) if lines else None
        if version is None:
            result.add_failure("Xcode not found", f"Get Xcode from {XCODE_DOWNLOAD_URL}")
            return result.build()

        location = self._system.execute("xcode-select", "-p")
        path = location.output if location.ok and location.output else "unknown"
        result.add_success(f"Xcode ({version})\nLocation: {path}")
        result.add_environment([EnvironmentPiece.of(PieceKind.XCODE, version)])

        if path.startswith("/Library/Developer/CommandLineTools"):
            result.add_failure(
                "Xcode command line tools are selected instead of Xcode",
                "Select Xcode with: sudo xcode-select --switch /Applications/Xcode.app",
            )

        license_check = self._system.execute("xcrun", "clang", "--version")
        if license_check.output is not None and "license" in license_check.output.lower():
            result.add_failure(
                "Xcode license is not accepted",
                "Accept the license with: sudo xcodebuild -license accept",
            )
        return result.build()
