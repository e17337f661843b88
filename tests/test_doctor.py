"""Tests for the top-level doctor orchestration."""

from __future__ import annotations

import asyncio
from http.client import BadStatusLine
import threading

from compatibility.download import make_loader
from compatibility.models import Compatibility
from core.painter import strip_markup
from diagnostics.base import Diagnostic
from diagnostics.doctor import FAILURE_CONCLUSION, SUCCESS_CONCLUSION, Doctor
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind

MATRIX = {
    "entries": [
        {
            "status": "incompatible",
            "text": "JDK 17 is not supported by Android Studio 2023.1",
            "environment": [
                {"name": "Jdk", "version": "17"},
                {"name": "AndroidStudio", "version": "2023.1"},
            ],
        },
        {
            "status": "compatible",
            "environment": [
                {"name": "Jdk", "version": "11"},
                {"name": "AndroidStudio", "version": "2023.1"},
            ],
        },
    ]
}


class _StaticDiagnostic(Diagnostic):
    def __init__(self, diagnosis: Diagnosis) -> None:
        self.title = diagnosis.title
        self._diagnosis = diagnosis

    def diagnose(self) -> Diagnosis:
        return self._diagnosis


class _BarrierDiagnostic(Diagnostic):
    title = "Java"

    def __init__(self, barrier: threading.Barrier) -> None:
        self._barrier = barrier

    def diagnose(self) -> Diagnosis:
        self._barrier.wait()
        return Diagnosis.Builder(self.title).add_success("Java (17)").build()


def _java(*versions: str, failed: bool = False) -> _StaticDiagnostic:
    builder = Diagnosis.Builder("Java")
    if failed:
        builder.add_failure("Java not found", "Get a JDK")
    for version in versions:
        builder.add_success(f"Java ({version})")
        builder.add_environment([EnvironmentPiece.of(PieceKind.JDK, version)])
    return _StaticDiagnostic(builder.build())


def _studio(version: str) -> _StaticDiagnostic:
    return _StaticDiagnostic(
        Diagnosis.Builder("Android Studio")
        .add_success(f"Android Studio ({version})")
        .add_environment([EnvironmentPiece.of(PieceKind.ANDROID_STUDIO, version)])
        .build()
    )


def _matrix() -> Compatibility:
    return Compatibility.from_dict(MATRIX)


def _conclusion_lines(text: str) -> list[str]:
    lines = text.rstrip("\n").splitlines()
    return lines[lines.index("Conclusion:") + 1 :]


def test_report_sections_in_order() -> None:
    doctor = Doctor([_java("17"), _studio("2023.1")], compatibility_loader=_matrix)

    text = strip_markup(asyncio.run(doctor.diagnose_environment(verbose=False)))

    assert text.split("\n\n") == [
        "[✓] Java\n[✓] Android Studio",
        "[!] Compatibility\n"
        "  ! JDK 17 is not supported by Android Studio 2023.1\n"
        "    Affected environment: JDK 17, Android Studio 2023.1",
        f"Conclusion:\n  ✓ {SUCCESS_CONCLUSION}\n",
    ]


def test_compatibility_findings_never_flip_the_verdict() -> None:
    doctor = Doctor([_java("17"), _studio("2023.1")], compatibility_loader=_matrix)

    report = asyncio.run(doctor.examine(verbose=False))

    assert report.has_failures is False
    assert _conclusion_lines(strip_markup(report.text)) == [f"  ✓ {SUCCESS_CONCLUSION}"]


def test_failed_probe_produces_failure_verdict() -> None:
    doctor = Doctor([_java(failed=True), _studio("2023.1")], compatibility_loader=_matrix)

    report = asyncio.run(doctor.examine(verbose=False))
    text = strip_markup(report.text)

    assert report.has_failures is True
    assert _conclusion_lines(text) == [f"  ✖ {FAILURE_CONCLUSION}"]
    assert "✖ Java not found" in text


def test_ambiguous_probe_is_checked_in_every_combination() -> None:
    doctor = Doctor([_java("11", "17"), _studio("2023.1")], compatibility_loader=_matrix)

    text = strip_markup(asyncio.run(doctor.diagnose_environment(verbose=True)))

    assert "! JDK 17 is not supported by Android Studio 2023.1" in text
    assert "✓ Known compatible: JDK 11, Android Studio 2023.1" in text


def test_missing_compatibility_data_omits_section() -> None:
    doctor = Doctor([_java("17"), _studio("2023.1")], compatibility_loader=lambda: None)

    text = strip_markup(asyncio.run(doctor.diagnose_environment(verbose=False)))

    assert "Compatibility" not in text
    assert text.split("\n\n") == [
        "[✓] Java\n[✓] Android Studio",
        f"Conclusion:\n  ✓ {SUCCESS_CONCLUSION}\n",
    ]


def test_disabled_compatibility_loader() -> None:
    doctor = Doctor([_java("17")])

    report = asyncio.run(doctor.examine(verbose=True))

    assert "Compatibility" not in strip_markup(report.text)
    assert report.has_failures is False


def test_no_probes_still_concludes() -> None:
    doctor = Doctor([], compatibility_loader=_matrix)

    text = strip_markup(asyncio.run(doctor.diagnose_environment(verbose=False)))

    assert text == f"Conclusion:\n  ✓ {SUCCESS_CONCLUSION}\n"


def test_download_runs_alongside_probes() -> None:
    barrier = threading.Barrier(2, timeout=5)

    def loader() -> Compatibility:
        barrier.wait()
        return _matrix()

    doctor = Doctor([_BarrierDiagnostic(barrier)], compatibility_loader=loader)

    report = asyncio.run(doctor.examine(verbose=False))

    assert report.has_failures is False
    assert [diagnosis.title for diagnosis in report.diagnoses] == ["Java"]


def test_run_diagnostics_keeps_input_order() -> None:
    probes = [_studio("2023.1"), _java("17")]
    doctor = Doctor(probes)

    results = asyncio.run(doctor.run_diagnostics())

    assert [result.title for result in results] == ["Android Studio", "Java"]


class _BadStatusSystem:
    def fetch_text(self, url: str, timeout_s: float) -> str:
        raise BadStatusLine("GARBAGE")


def test_malformed_http_response_still_produces_report() -> None:
    settings = {"enabled": True, "url": "http://127.0.0.1:8080/c.json", "file": None, "timeout_s": 1.0}
    loader = make_loader(_BadStatusSystem(), settings)
    doctor = Doctor([_java("17"), _studio("2023.1")], compatibility_loader=loader)

    text = strip_markup(asyncio.run(doctor.diagnose_environment(verbose=False)))

    assert "Compatibility" not in text
    assert text.split("\n\n") == [
        "[✓] Java\n[✓] Android Studio",
        f"Conclusion:\n  ✓ {SUCCESS_CONCLUSION}\n",
    ]


def test_loader_crash_omits_compatibility_section() -> None:
    def loader() -> Compatibility:
        raise RecursionError("maximum recursion depth exceeded while decoding a JSON array")

    doctor = Doctor([_java(failed=True)], compatibility_loader=loader)

    report = asyncio.run(doctor.examine(verbose=False))
    text = strip_markup(report.text)

    assert report.has_failures is True
    assert "Compatibility" not in text
    assert _conclusion_lines(text) == [f"  ✖ {FAILURE_CONCLUSION}"]
