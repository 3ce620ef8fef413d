"""Explicit context threaded through every provisioning step.

Steps never read ``os.environ`` or change the process working directory.
They see a private copy of the environment and an explicit ``cwd`` here, so
a run can be driven entirely from tests.
"""

from __future__ import annotations

import os
import platform
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from seasnake_setup.config import SetupConfig
from seasnake_setup.prompt import confirm
from seasnake_setup.reporter import StatusPrinter
from seasnake_setup.runner import CommandResult, CommandRunner
from seasnake_setup.state import RunState


@dataclass
class SetupContext:
    config: SetupConfig = field(default_factory=SetupConfig)
    env: dict[str, str] = field(default_factory=lambda: dict(os.environ))
    cwd: Path = field(default_factory=Path.cwd)
    runner: CommandRunner = field(default_factory=CommandRunner)
    printer: StatusPrinter = field(default_factory=StatusPrinter)
    read: Callable[[str], str] | None = None
    os_family: str = sys.platform
    machine: str = field(default_factory=platform.machine)
    state: RunState = field(default_factory=RunState)

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        return self.runner.run(
            args,
            env=self.env,
            cwd=cwd or self.cwd,
            capture=capture,
            timeout=timeout,
        )

    def confirm(self, question: str) -> bool:
        return confirm(question, console=self.printer.console, read=self.read)

    def which(self, name: str) -> str | None:
        return shutil.which(name, path=self.env.get("PATH"))


__all__ = ["SetupContext"]
