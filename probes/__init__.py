"""Probes for the components of a mobile development toolchain."""

from __future__ import annotations

from typing import Any, Mapping

from core.system import System
from diagnostics.base import Diagnostic
from probes.android_studio import AndroidStudioDiagnostic
from probes.cocoapods import CocoapodsDiagnostic
from probes.java import JavaDiagnostic
from probes.system import SystemDiagnostic
from probes.xcode import XcodeDiagnostic

__all__ = [
    "AndroidStudioDiagnostic",
    "CocoapodsDiagnostic",
    "JavaDiagnostic",
    "SystemDiagnostic",
    "XcodeDiagnostic",
    "default_diagnostics",
]


def default_diagnostics(system: System, config: Mapping[str, Any]) -> list[Diagnostic]:
    """Return the probes in report order."""

    studio_cfg = (config.get("probes") or {}).get("android_studio") or {}
    return [
        SystemDiagnostic(system),
        JavaDiagnostic(system),
        AndroidStudioDiagnostic(system, search_paths=studio_cfg.get("search_paths") or []),
        XcodeDiagnostic(system),
        CocoapodsDiagnostic(system),
    ]
