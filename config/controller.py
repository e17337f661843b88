"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR_ENV = "TOOLCHAIN_DOCTOR_CONFIG_DIR"
COMPATIBILITY_URL_ENV = "TOOLCHAIN_DOCTOR_COMPATIBILITY_URL"
BUNDLED_COMPATIBILITY_FILE = Path(__file__).with_name("compatibility.json")


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    default_file: Path
    override_file: Path


class ConfigController:
    """Singleton controller for loading configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_dir: Path | None = None) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        if config_dir is None:
            config_dir = Path(os.getenv(CONFIG_DIR_ENV, "config"))
        self.paths = ConfigPaths(
            default_file=Path(__file__).with_name("default.yaml"),
            override_file=config_dir / "override.yaml",
        )
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from the packaged defaults and override YAML file."""

        with self.paths.default_file.open("r", encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}

        if self.paths.override_file.exists():
            with self.paths.override_file.open("r", encoding="utf-8") as file:
                override_config = yaml.safe_load(file) or {}
            if override_config:
                config = self._deep_merge(config, override_config)

        self.config = self._normalize_config(config)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge dictionaries, overriding base values with override values."""

        merged = dict(base)
        for key, value in override.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _normalize_config(self, config: dict[str, Any]) -> dict[str, Any]:
        """Coerce types and apply environment overrides."""

        normalized = dict(config)
        normalized["logging_level"] = str(normalized.get("logging_level", "WARNING")).upper()

        compatibility_cfg = dict(normalized.get("compatibility") or {})
        compatibility_cfg["enabled"] = bool(compatibility_cfg.get("enabled", True))
        url = os.getenv(COMPATIBILITY_URL_ENV) or compatibility_cfg.get("url")
        compatibility_cfg["url"] = str(url) if url else None
        file_path = compatibility_cfg.get("file")
        compatibility_cfg["file"] = str(file_path) if file_path else None
        compatibility_cfg["timeout_s"] = max(1.0, float(compatibility_cfg.get("timeout_s", 10.0)))
        normalized["compatibility"] = compatibility_cfg

        system_cfg = dict(normalized.get("system") or {})
        system_cfg["command_timeout_s"] = max(1.0, float(system_cfg.get("command_timeout_s", 30.0)))
        normalized["system"] = system_cfg

        probes_cfg = dict(normalized.get("probes") or {})
        studio_cfg = dict(probes_cfg.get("android_studio") or {})
        studio_cfg["search_paths"] = [str(path) for path in studio_cfg.get("search_paths") or []]
        probes_cfg["android_studio"] = studio_cfg
        normalized["probes"] = probes_cfg
        return normalized
