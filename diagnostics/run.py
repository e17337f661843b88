"""Command-line entry point for diagnosing the development environment."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from rich.console import Console

from compatibility.download import make_loader
from config import ConfigController
from core.logging import enable_file_logging, set_level
from core.painter import strip_markup
from core.system import System
from diagnostics.doctor import Doctor
from probes import default_diagnostics


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(
        prog="toolchain-doctor",
        description="Diagnose the mobile development toolchain and check version compatibility.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every check, including informational notes and compatible combinations.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip downloading compatibility data.",
    )
    parser.add_argument(
        "--compatibility-file",
        type=Path,
        default=None,
        help="Read compatibility data from a local JSON file.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Print the report without colors.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides configuration).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    return parser.parse_args(argv)


def build_doctor(config: dict, *, offline: bool = False, compatibility_file: Path | None = None) -> Doctor:
    """Wire the probes and compatibility source described by configuration."""

    system = System(command_timeout_s=config["system"]["command_timeout_s"])
    loader = make_loader(
        system,
        config["compatibility"],
        offline=offline,
        file_override=compatibility_file,
    )
    return Doctor(default_diagnostics(system, config), compatibility_loader=loader)


def main(argv: list[str] | None = None) -> int:
    """Run diagnostics and return an exit code."""

    args = parse_args(argv)
    config = ConfigController.get_instance().get_config()
    set_level(args.log_level or config["logging_level"])
    if args.log_file is not None:
        enable_file_logging(args.log_file)

    doctor = build_doctor(
        config,
        offline=args.offline,
        compatibility_file=args.compatibility_file,
    )
    report = asyncio.run(doctor.examine(verbose=args.verbose))

    if args.no_color:
        print(strip_markup(report.text), end="")
    else:
        Console(highlight=False, soft_wrap=True).print(report.text, end="")

    return 1 if report.has_failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
