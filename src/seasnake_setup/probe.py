"""Executable discovery with best-effort version capture."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from typing import TYPE_CHECKING

from seasnake_setup.runner import CommandRunner, first_line

if TYPE_CHECKING:
    from seasnake_setup.context import SetupContext

VERSION_TIMEOUT = 15


@dataclass(frozen=True)
class EnvironmentProbe:
    """Whether an executable is reachable, and what it says about its version."""

    name: str
    present: bool
    version: str = ""
    path: str | None = None


def probe(name: str, ctx: SetupContext | None = None) -> EnvironmentProbe:
    """Look *name* up on the search path and try ``<name> --version``.

    Uses the context's ``PATH`` and runner when given. A version that cannot
    be read leaves ``version`` empty; it never makes the tool absent.
    """
    search_path = ctx.env.get("PATH") if ctx is not None else os.environ.get("PATH")
    resolved = shutil.which(name, path=search_path)
    if resolved is None:
        return EnvironmentProbe(name=name, present=False)

    runner = ctx.runner if ctx is not None else CommandRunner()
    env = ctx.env if ctx is not None else None
    result = runner.run([resolved, "--version"], env=env, timeout=VERSION_TIMEOUT)
    version = ""
    if result.ok:
        version = first_line(result.stdout) or first_line(result.stderr)
    return EnvironmentProbe(name=name, present=True, version=version, path=resolved)


__all__ = ["EnvironmentProbe", "probe"]
