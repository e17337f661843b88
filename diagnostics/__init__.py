"""Diagnosis model, probe contract and runner."""

from diagnostics.base import Diagnostic
from diagnostics.combinations import all_combinations
from diagnostics.models import Conclusion, Diagnosis, EnvironmentPiece, Message, PieceKind, Version
from diagnostics.runner import format_diagnosis, make_diagnostics_report, run_diagnostics

__all__ = [
    "Conclusion",
    "Diagnosis",
    "Diagnostic",
    "EnvironmentPiece",
    "Message",
    "PieceKind",
    "Version",
    "all_combinations",
    "format_diagnosis",
    "make_diagnostics_report",
    "run_diagnostics",
]
