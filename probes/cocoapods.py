"""Diagnostics routines for CocoaPods."""

from __future__ import annotations

from core.system import System
from diagnostics.base import Diagnostic
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind, Version

COCOAPODS_INSTALL_URL = "https://guides.cocoapods.org/using/getting-started.html"


class CocoapodsDiagnostic(Diagnostic):
    """Checks the CocoaPods installation used for iOS dependency integration."""

    title = "CocoaPods"

    def __init__(self, system: System) -> None:
        self._system = system

    def diagnose(self) -> Diagnosis:
        result = Diagnosis.Builder(self.title)
        if not self._system.is_macos:
            result.add_info("CocoaPods is only used on macOS", "iOS targets will be skipped")
            return result.build()

        ruby = self._system.execute("ruby", "-v")
        ruby_version = Version.parse(ruby.output) if ruby.ok else None
        if ruby_version is None:
            result.add_warning("Ruby not found", "CocoaPods requires Ruby")
        else:
            result.add_success(f"Ruby ({ruby_version})")

        pods = self._system.execute("pod", "--version")
        version = Version.parse(pods.output) if pods.ok else None
        if version is None:
            result.add_warning(
                "CocoaPods not found",
                "CocoaPods is only required for projects that integrate iOS dependencies with it",
                f"Installation guide: {COCOAPODS_INSTALL_URL}",
            )
            return result.build()

        result.add_success(f"CocoaPods ({version})")
        result.add_environment([EnvironmentPiece.of(PieceKind.COCOAPODS, version)])

        locale = self._system.get_env_var("LC_ALL") or self._system.get_env_var("LANG") or ""
        if "utf-8" not in locale.lower().replace("utf8", "utf-8"):
            result.add_warning(
                "CocoaPods requires your terminal to be using UTF-8 encoding",
                "Consider adding the following to your shell profile:",
                "export LC_ALL=en_US.UTF-8",
            )
        return result.build()
