"""Git availability."""

from __future__ import annotations

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.probe import probe
from seasnake_setup.state import Failed, StepResult, Succeeded

GIT_DOWNLOAD_URL = "https://git-scm.com/download/mac"
HOMEBREW_INSTALL = (
    '/bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)


def git_present(ctx: SetupContext) -> bool:
    return probe("git", ctx).present


def git_version(ctx: SetupContext) -> str:
    found = probe("git", ctx)
    return f"already installed: {found.version}" if found.version else "already installed"


def install_git(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Git not found. Checking for Homebrew...")
    brew = ctx.which("brew")
    if brew is None:
        ctx.printer.warning(f"Homebrew not found. Please install Git manually from {GIT_DOWNLOAD_URL}")
        ctx.printer.warning(f"Or install Homebrew first: {HOMEBREW_INSTALL}")
        return Failed("Git is required and no package manager is available to install it")

    ctx.printer.info("Installing Git via Homebrew...")
    result = ctx.run([brew, "install", "git"], capture=False)
    if not result.ok:
        return Failed(f"brew install git exited with status {result.returncode}")
    return Succeeded("installed via Homebrew")


def git_steps() -> list[Step]:
    return [
        Step(
            name="git",
            label="Git",
            precondition=git_present,
            action=install_git,
            severity=Severity.CRITICAL,
            skip_detail=git_version,
        ),
    ]
