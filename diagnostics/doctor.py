"""Top-level orchestration of probes and compatibility analysis."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from compatibility.analyzer import CompatibilityAnalyzer
from compatibility.models import Compatibility
from core.logging import logger as LOGGER
from core.painter import paint
from diagnostics.base import Diagnostic
from diagnostics.combinations import all_combinations
from diagnostics.models import Conclusion, Diagnosis
from diagnostics.runner import make_diagnostics_report, run_diagnostics

CompatibilityLoader = Callable[[], "Compatibility | None"]

FAILURE_CONCLUSION = (
    "One or more problems were diagnosed in your environment. "
    "Check the output above for descriptions and possible solutions."
)
SUCCESS_CONCLUSION = "Your system is ready for Kotlin Multiplatform Mobile development!"


@dataclass(frozen=True)
class DoctorReport:
    """Rendered report plus the verdict it concludes with."""

    text: str
    has_failures: bool
    diagnoses: tuple[Diagnosis, ...] = ()


def conclusion_line(has_failures: bool) -> str:
    conclusion = Conclusion.FAILURE if has_failures else Conclusion.SUCCESS
    message = FAILURE_CONCLUSION if has_failures else SUCCESS_CONCLUSION
    return f"  {paint(conclusion.symbol, conclusion.style)} {message}"


class Doctor:
    """Runs every probe, then checks what they found against the compatibility matrix."""

    def __init__(
        self,
        diagnostics: Sequence[Diagnostic],
        compatibility_loader: CompatibilityLoader | None = None,
    ) -> None:
        self._diagnostics = list(diagnostics)
        self._compatibility_loader = compatibility_loader

    async def run_diagnostics(self, diagnostics: Sequence[Diagnostic] | None = None) -> list[Diagnosis]:
        return await run_diagnostics(self._diagnostics if diagnostics is None else diagnostics)

    async def _load_compatibility(self) -> Compatibility | None:
        if self._compatibility_loader is None:
            LOGGER.info("[Doctor] Compatibility check disabled")
            return None
        try:
            return await asyncio.to_thread(self._compatibility_loader)
        except Exception:  # noqa: BLE001 - the report must survive missing compatibility data
            LOGGER.exception("[Doctor] Compatibility data could not be loaded")
            return None

    async def examine(self, verbose: bool = False) -> DoctorReport:
        """Diagnose the environment and return the report with its verdict."""

        compatibility_task = asyncio.create_task(self._load_compatibility())

        diagnoses = await self.run_diagnostics()
        diagnostics_report = make_diagnostics_report(diagnoses, verbose)

        environments = all_combinations([diagnosis.checked_environments for diagnosis in diagnoses])
        LOGGER.debug("[Doctor] %s candidate environments", len(environments))

        compatibility = await compatibility_task
        compatibility_report = ""
        if compatibility is not None:
            compatibility_report = CompatibilityAnalyzer(compatibility).check(environments, verbose).strip()

        # Compatibility findings are advisory and never change the verdict.
        has_failures = any(diagnosis.conclusion is Conclusion.FAILURE for diagnosis in diagnoses)

        sections = [
            section
            for section in (diagnostics_report, compatibility_report)
            if section.strip()
        ]
        sections.append("Conclusion:\n" + conclusion_line(has_failures))
        return DoctorReport(
            text="\n\n".join(sections) + "\n",
            has_failures=has_failures,
            diagnoses=tuple(diagnoses),
        )

    async def diagnose_environment(self, verbose: bool = False) -> str:
        report = await self.examine(verbose)
        return report.text
