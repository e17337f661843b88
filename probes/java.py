"""Diagnostics routines for the Java toolchain."""

from __future__ import annotations

from core.system import ProcessResult, System
from diagnostics.base import Diagnostic
from diagnostics.models import Diagnosis, EnvironmentPiece, PieceKind, Version

JDK_DOWNLOAD_URL = "https://www.oracle.com/java/technologies/javase-downloads.html"


def _output(result: ProcessResult) -> str | None:
    if not result.ok or not result.output:
        return None
    return result.output


def _first_line(text: str | None) -> str | None:
    if not text:
        return None
    lines = text.strip().splitlines()
    return lines[0].strip() if lines else None


class JavaDiagnostic(Diagnostic):
    """Locates the JDK on PATH and validates JAVA_HOME."""

    title = "Java"

    def __init__(self, system: System) -> None:
        self._system = system

    def diagnose(self) -> Diagnosis:
        result = Diagnosis.Builder(self.title)

        java_location = _output(self._system.execute("which", "java"))
        version_line = _first_line(self._system.execute("java", "-version").output)
        system_java_home = None
        if self._system.is_macos:
            system_java_home = _output(self._system.execute("/usr/libexec/java_home"))
        java_home = self._system.get_env_var("JAVA_HOME")

        # /usr/bin/java on macOS is a stub that delegates to the selected JDK.
        if java_location == "/usr/bin/java":
            if java_home and java_home.strip():
                java_location = java_home.rstrip("/") + "/bin/java"
            elif system_java_home:
                java_location = system_java_home.rstrip("/") + "/bin/java"

        version = Version.parse(version_line)
        if not java_location or version is None:
            result.add_failure("Java not found", f"Get JDK from {JDK_DOWNLOAD_URL}")
            return result.build()

        result.add_success(f"Java ({version_line})\nLocation: {java_location}")
        result.add_environment([EnvironmentPiece.of(PieceKind.JDK, version)])

        if not java_home or not java_home.strip():
            result.add_info("JAVA_HOME is not set", self._java_home_hint(java_location))
        else:
            self._check_java_home(result, java_home, java_location, version)

        if self._system.is_macos:
            self._check_xcode_java_home(result, java_home, system_java_home)

        result.add_info(
            "Note that, by default, Android Studio uses bundled JDK for Gradle tasks execution.",
            "Gradle JDK can be configured in Android Studio Preferences under "
            "Build, Execution, Deployment -> Build Tools -> Gradle section",
        )
        return result.build()

    def _check_java_home(
        self,
        result: Diagnosis.Builder,
        java_home: str,
        java_location: str,
        version: Version,
    ) -> None:
        canonical = java_home.rstrip("/")
        java_commands = [canonical, f"{canonical}/bin/java", f"{canonical}/bin/jre/sh/java"]
        if not any(self._system.file_exists(path) for path in java_commands):
            result.add_failure(
                "JAVA_HOME is set to an invalid directory",
                f"JAVA_HOME: {java_home}",
                self._java_home_hint(java_location),
            )
            return

        result.add_success(f"JAVA_HOME: {java_home}")
        if java_location in java_commands:
            return

        result.add_info(
            "JAVA_HOME does not match Java binary location",
            f"Java binary location found in PATH: {java_location}",
            "Note that, by default, Gradle will use Java environment provided by JAVA_HOME",
        )
        # Builds may run with either JDK, so both are plausible.
        home_version = Version.parse(
            _first_line(self._system.execute(f"{canonical}/bin/java", "-version").output)
        )
        if home_version is not None and home_version != version:
            result.add_environment([EnvironmentPiece.of(PieceKind.JDK, home_version)])

    def _check_xcode_java_home(
        self,
        result: Diagnosis.Builder,
        java_home: str | None,
        system_java_home: str | None,
    ) -> None:
        settings = _output(
            self._system.execute(
                "defaults", "read", "com.apple.dt.Xcode", "IDEApplicationwideBuildSettings"
            )
        )
        xcode_java_home = system_java_home
        if settings:
            java_home_lines = [line for line in settings.splitlines() if '"JAVA_HOME"' in line]
            if java_home_lines:
                xcode_java_home = java_home_lines[-1].split("=")[-1].strip(' ";')

        if xcode_java_home == java_home:
            return

        details = [f"Xcode JAVA_HOME: {xcode_java_home}"]
        if java_home is not None:
            details.append(f"System JAVA_HOME: {java_home}")
        details.append("Set JAVA_HOME in Xcode -> Preferences -> Locations -> Custom Paths")
        result.add_info("Xcode JAVA_HOME does not match the environment variable", *details)

    def _java_home_hint(self, java_location: str | None) -> str:
        shell = self._system.shell
        profile = shell.profile if shell is not None else "your shell profile"
        home = java_location.removesuffix("/bin/java") if java_location else "<path to java>"
        return (
            f"Consider adding the following to {profile} for setting JAVA_HOME\n"
            f"export JAVA_HOME={home}"
        )
