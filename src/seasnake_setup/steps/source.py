"""SEAsnake source checkout."""

from __future__ import annotations

import shutil

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.state import Failed, StepResult, Succeeded


def keep_existing_checkout(ctx: SetupContext) -> bool:
    """True when a checkout exists and the user wants to keep it."""
    clone_dir = ctx.config.clone_dir
    if not clone_dir.is_dir():
        return False
    ctx.printer.warning(f"SEAsnake directory already exists at {clone_dir}")
    return not ctx.confirm("Do you want to remove it and start fresh?")


def clone_source(ctx: SetupContext) -> StepResult:
    clone_dir = ctx.config.clone_dir
    if clone_dir.exists():
        shutil.rmtree(clone_dir)
        ctx.printer.success("Removed existing directory")

    clone_dir.mkdir(parents=True, exist_ok=True)
    ctx.printer.info("Cloning SEAsnake repository...")
    git = ctx.which("git") or "git"
    result = ctx.run([git, "clone", ctx.config.repo_url, str(clone_dir)], capture=False)
    if not result.ok:
        return Failed(f"git clone exited with status {result.returncode}")
    if not (clone_dir / ".git").is_dir():
        return Failed(f"git clone reported success but no checkout is in {clone_dir}")
    return Succeeded(f"cloned to {clone_dir}")


def source_steps() -> list[Step]:
    return [
        Step(
            name="source",
            label="SEAsnake source",
            precondition=keep_existing_checkout,
            action=clone_source,
            severity=Severity.CRITICAL,
            skip_detail="Using existing directory",
        ),
    ]
