"""Loading of the compatibility matrix from a URL or a local file."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import functools
from http.client import HTTPException
from pathlib import Path
from typing import Any

from compatibility.models import Compatibility
from config.controller import BUNDLED_COMPATIBILITY_FILE
from core.logging import logger as LOGGER
from core.system import System


def download(system: System, url: str, timeout_s: float = 10.0) -> Compatibility | None:
    """Fetch and parse the compatibility matrix.

    Returns None when the data cannot be fetched or parsed; the run then
    proceeds without a compatibility section.
    """

    try:
        text = system.fetch_text(url, timeout_s)
        compatibility = Compatibility.from_json(text)
    except (OSError, HTTPException, ValueError) as exc:
        LOGGER.warning("[Compatibility] Unable to load compatibility data from %s: %s", url, exc)
        return None
    LOGGER.debug("[Compatibility] Loaded %s entries from %s", len(compatibility.entries), url)
    return compatibility


def load_file(path: Path) -> Compatibility | None:
    """Read the compatibility matrix from a local JSON file."""

    try:
        compatibility = Compatibility.from_json(path.expanduser().read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.warning("[Compatibility] Unable to read compatibility file %s: %s", path, exc)
        return None
    LOGGER.debug("[Compatibility] Loaded %s entries from %s", len(compatibility.entries), path)
    return compatibility


def make_loader(
    system: System,
    settings: Mapping[str, Any],
    *,
    offline: bool = False,
    file_override: Path | None = None,
) -> Callable[[], Compatibility | None] | None:
    """Pick the compatibility source from configuration.

    An explicit file wins over everything. Nothing is loaded when offline or
    disabled; without a configured url or file the bundled matrix is used.
    """

    if file_override is not None:
        return functools.partial(load_file, file_override)
    if offline or not settings.get("enabled", True):
        return None
    if settings.get("file"):
        return functools.partial(load_file, Path(settings["file"]))
    url = settings.get("url")
    if not url:
        LOGGER.info("[Compatibility] No compatibility URL configured, using bundled data")
        return functools.partial(load_file, BUNDLED_COMPATIBILITY_FILE)
    return functools.partial(download, system, str(url), float(settings.get("timeout_s", 10.0)))
