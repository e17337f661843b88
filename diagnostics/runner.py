"""Diagnostics runner utilities."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from core.logging import logger as LOGGER
from core.painter import paint, plain
from diagnostics.base import Diagnostic
from diagnostics.models import Conclusion, Diagnosis, Message


def _format_message(message: Message) -> list[str]:
    symbol = paint(message.conclusion.symbol, message.conclusion.style)
    title_lines = message.title.splitlines() or [""]
    lines = [f"  {symbol} {plain(title_lines[0])}"]
    lines.extend(f"    {plain(line)}" for line in title_lines[1:])
    for detail in message.details:
        lines.extend(f"    {plain(line)}" for line in detail.splitlines())
    return lines


def format_diagnosis(diagnosis: Diagnosis, verbose: bool) -> str:
    """Render one diagnosis as a header line followed by its messages.

    Without ``verbose`` only Warning and Failure messages are kept; the header
    line is always present.
    """

    conclusion = diagnosis.conclusion
    lines = [f"[{paint(conclusion.symbol, conclusion.style)}] {plain(diagnosis.title)}"]
    for message in diagnosis.messages:
        if not verbose and message.conclusion.severity < Conclusion.WARNING.severity:
            continue
        lines.extend(_format_message(message))
    return "\n".join(line.rstrip() for line in lines).rstrip()


def make_diagnostics_report(diagnoses: Iterable[Diagnosis], verbose: bool) -> str:
    """Return the probe section of the report, in input order."""

    sections = [format_diagnosis(diagnosis, verbose) for diagnosis in diagnoses]
    separator = "\n\n" if verbose else "\n"
    return separator.join(section for section in sections if section.strip()).strip()


def _diagnostic_name(diagnostic: Diagnostic) -> str:
    return getattr(diagnostic, "title", None) or type(diagnostic).__name__


def _failed_diagnosis(diagnostic: Diagnostic, exc: Exception) -> Diagnosis:
    title = _diagnostic_name(diagnostic)
    return (
        Diagnosis.Builder(title)
        .add_failure(f"{title} check failed unexpectedly", f"{type(exc).__name__}: {exc}")
        .build()
    )


async def diagnose_async(diagnostic: Diagnostic) -> Diagnosis:
    """Run a blocking probe on a worker thread."""

    try:
        return await asyncio.to_thread(diagnostic.diagnose)
    except Exception as exc:  # noqa: BLE001 - diagnostics must keep running
        LOGGER.exception("[Doctor] Probe failed: %s", _diagnostic_name(diagnostic))
        return _failed_diagnosis(diagnostic, exc)


async def run_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnosis]:
    """Run all probes concurrently and return their diagnoses in input order."""

    return list(await asyncio.gather(*(diagnose_async(diagnostic) for diagnostic in diagnostics)))
