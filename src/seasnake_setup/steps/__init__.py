"""The SEAsnake provisioning pipeline, in execution order."""

from __future__ import annotations

import os

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Step
from seasnake_setup.steps.conda import conda_steps
from seasnake_setup.steps.environment import environment_steps
from seasnake_setup.steps.finish import finish_steps
from seasnake_setup.steps.git import git_steps
from seasnake_setup.steps.host import host_steps
from seasnake_setup.steps.source import source_steps


def _expose_miniforge(ctx: SetupContext) -> None:
    bin_dir = str(ctx.config.miniforge_dir / "bin")
    entries = [p for p in ctx.env.get("PATH", "").split(os.pathsep) if p]
    if bin_dir not in entries:
        ctx.env["PATH"] = os.pathsep.join([bin_dir, *entries])


def build_pipeline(ctx: SetupContext) -> list[Step]:
    """Return every provisioning step for *ctx*.

    Also puts the Miniforge ``bin`` directory first on the context's
    ``PATH`` so tools installed there resolve once they exist.
    """
    _expose_miniforge(ctx)
    return [
        *host_steps(),
        *git_steps(),
        *source_steps(),
        *conda_steps(),
        *environment_steps(ctx),
        *finish_steps(),
    ]


__all__ = ["build_pipeline"]
