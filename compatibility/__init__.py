"""Compatibility matrix loading and analysis."""

from compatibility.analyzer import CompatibilityAnalyzer
from compatibility.download import download, load_file, make_loader
from compatibility.models import (
    Compatibility,
    CompatibilityEntry,
    CompatibilityFormatError,
    EntryStatus,
    VersionRange,
)

__all__ = [
    "Compatibility",
    "CompatibilityAnalyzer",
    "CompatibilityEntry",
    "CompatibilityFormatError",
    "EntryStatus",
    "VersionRange",
    "download",
    "load_file",
    "make_loader",
]
