"""External command execution with a normalized result shape."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Run external commands inside an explicit environment and directory.

    Missing executables and timeouts never raise; they come back as exit
    statuses 127 and 124 so every step interprets one shape.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        capture: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        cmd = [str(arg) for arg in args]
        logger.debug("Running: %s", shlex.join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                capture_output=capture,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except FileNotFoundError:
            return CommandResult(
                returncode=EXIT_NOT_FOUND,
                stderr=f"{cmd[0]} executable not found",
            )
        except PermissionError:
            return CommandResult(
                returncode=EXIT_NOT_EXECUTABLE,
                stderr=f"{cmd[0]} is not executable",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                returncode=EXIT_TIMEOUT,
                stderr=f"command timed out: {shlex.join(cmd)}",
            )
        logger.debug("Exit status %d: %s", completed.returncode, cmd[0])
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


__all__ = ["CommandResult", "CommandRunner", "EXIT_NOT_EXECUTABLE", "EXIT_NOT_FOUND", "EXIT_TIMEOUT", "first_line"]
