"""Access to the host system: processes, environment, files and HTTP."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import platform
import subprocess
from urllib import request

from core.logging import logger as LOGGER


@dataclass(frozen=True)
class ProcessResult:
    """Output of an executed command.

    ``output`` is ``None`` when the command could not run at all.
    """

    output: str | None
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.output is not None and self.exit_code == 0


@dataclass(frozen=True)
class Shell:
    """Login shell and the profile file it reads."""

    name: str
    profile: str


_SHELL_PROFILES = {
    "zsh": "~/.zprofile",
    "bash": "~/.bash_profile",
    "fish": "~/.config/fish/config.fish",
}


class System:
    """Host system collaborator used by probes.

    Every query returns absence instead of raising for missing commands or
    files. ``fetch_text`` is the exception: network failures surface as
    ``OSError`` or ``http.client.HTTPException`` so the caller can decide how
    to degrade.
    """

    def __init__(self, command_timeout_s: float = 30.0) -> None:
        self._command_timeout_s = command_timeout_s

    @property
    def os_name(self) -> str:
        return platform.system()

    @property
    def is_macos(self) -> bool:
        return self.os_name == "Darwin"

    def execute(self, command: str, *args: str) -> ProcessResult:
        argv = [command, *args]
        LOGGER.debug("[System] exec %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                timeout=self._command_timeout_s,
                check=False,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
            LOGGER.debug("[System] %s unavailable: %s", command, exc)
            return ProcessResult(output=None, exit_code=127)
        except subprocess.TimeoutExpired:
            LOGGER.warning("[System] %s timed out after %.1fs", command, self._command_timeout_s)
            return ProcessResult(output=None, exit_code=-1)

        output = completed.stdout.strip()
        if completed.returncode != 0:
            LOGGER.debug("[System] %s exited with %s", command, completed.returncode)
        return ProcessResult(output=output, exit_code=completed.returncode)

    def get_env_var(self, name: str) -> str | None:
        return os.environ.get(name)

    def file_exists(self, path: str) -> bool:
        return Path(path).expanduser().exists()

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def list_dir(self, path: str, pattern: str = "*") -> list[str]:
        directory = Path(path).expanduser()
        if not directory.is_dir():
            return []
        return sorted(str(child) for child in directory.glob(pattern))

    @property
    def shell(self) -> Shell | None:
        shell_path = self.get_env_var("SHELL")
        if not shell_path:
            return None
        name = Path(shell_path).name
        profile = _SHELL_PROFILES.get(name)
        if profile is None:
            return None
        return Shell(name=name, profile=profile)

    def fetch_text(self, url: str, timeout_s: float) -> str:
        req = request.Request(url, headers={"Accept": "application/json"})
        with request.urlopen(req, timeout=timeout_s) as response:
            return response.read().decode("utf-8")
