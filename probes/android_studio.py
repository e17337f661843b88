"""Diagnostics routines for Android Studio installations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import json
from pathlib import PurePath

from core.logging import logger as LOGGER
from core.system import System
from diagnostics.base import Diagnostic
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind, Version

ANDROID_STUDIO_DOWNLOAD_URL = "https://developer.android.com/studio"

# Relative to a search path; product-info.json ships with every JetBrains-based IDE.
_PRODUCT_INFO_PATTERNS = (
    "Android Studio*.app/Contents/Resources/product-info.json",
    "android-studio*/product-info.json",
    "*/*/Android Studio*.app/Contents/Resources/product-info.json",
    "*/*/product-info.json",
)


@dataclass(frozen=True)
class AndroidStudioInstallation:
    """One Android Studio found on disk."""

    location: str
    version: Version
    build: str
    kotlin_plugin: Version | None = None

    @property
    def environment(self) -> list[EnvironmentPiece]:
        pieces = [EnvironmentPiece.of(PieceKind.ANDROID_STUDIO, self.version)]
        if self.kotlin_plugin is not None:
            pieces.append(EnvironmentPiece.of(PieceKind.KOTLIN_PLUGIN, self.kotlin_plugin))
        return pieces


class AndroidStudioDiagnostic(Diagnostic):
    """Finds Android Studio installations and their bundled Kotlin plugin."""

    title = "Android Studio"

    def __init__(self, system: System, search_paths: Sequence[str] = ()) -> None:
        self._system = system
        self._search_paths = list(search_paths)

    def find_installations(self) -> list[AndroidStudioInstallation]:
        installations: list[AndroidStudioInstallation] = []
        seen: set[str] = set()
        for search_path in self._search_paths:
            for pattern in _PRODUCT_INFO_PATTERNS:
                for product_info in self._system.list_dir(search_path, pattern):
                    if product_info in seen:
                        continue
                    seen.add(product_info)
                    installation = self._read_installation(product_info)
                    if installation is not None:
                        installations.append(installation)
        return installations

    def _read_installation(self, product_info: str) -> AndroidStudioInstallation | None:
        text = self._system.read_text(product_info)
        if text is None:
            return None
        try:
            info = json.loads(text)
        except ValueError:
            LOGGER.debug("[AndroidStudio] Unreadable product info at %s", product_info)
            return None
        if not isinstance(info, dict):
            return None
        if info.get("productCode") != "AI" and not str(info.get("name", "")).startswith("Android Studio"):
            return None

        version = Version.parse(str(info.get("version", "")))
        if version is None:
            return None

        info_dir = PurePath(product_info).parent
        # macOS bundles keep product-info.json under Contents/Resources.
        root = info_dir.parent if info_dir.name == "Resources" else info_dir
        build_txt = root / "plugins" / "Kotlin" / "kotlinc" / "build.txt"
        kotlin_plugin = Version.parse(self._system.read_text(str(build_txt)))

        location = root.parent if root.name == "Contents" else root
        return AndroidStudioInstallation(
            location=str(location),
            version=version,
            build=str(info.get("buildNumber", "")),
            kotlin_plugin=kotlin_plugin,
        )

    def diagnose(self) -> Diagnosis:
        result = Diagnosis.Builder(self.title)
        installations = self.find_installations()
        if not installations:
            result.add_failure(
                "No Android Studio installation found",
                f"Get Android Studio from {ANDROID_STUDIO_DOWNLOAD_URL}",
            )
            return result.build()

        for installation in installations:
            details = [f"Location: {installation.location}"]
            if installation.build:
                details.append(f"Bundled build: {installation.build}")
            if installation.kotlin_plugin is not None:
                details.append(f"Kotlin Plugin: {installation.kotlin_plugin}")
            result.add_success(f"Android Studio ({installation.version})", *details)
            if installation.kotlin_plugin is None:
                result.add_warning(
                    f"Kotlin plugin not found in {installation.location}",
                    "Install or enable the Kotlin plugin under Settings -> Plugins",
                )
            result.add_environment(installation.environment)

        if len(installations) > 1:
            result.add_info(
                "Multiple Android Studio installations found",
                "Compatibility is checked against each of them",
            )

        android_home = self._system.get_env_var("ANDROID_HOME") or self._system.get_env_var("ANDROID_SDK_ROOT")
        if not android_home:
            result.add_info(
                "ANDROID_HOME is not set",
                "Command line Gradle builds need ANDROID_HOME or a local.properties sdk.dir entry",
            )
        elif not self._system.file_exists(android_home):
            result.add_warning("ANDROID_HOME points to a missing directory", f"ANDROID_HOME: {android_home}")
        return result.build()
