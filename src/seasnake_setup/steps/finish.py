"""Post-install verification and the activation helper script."""

from __future__ import annotations

import os
import stat

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.runner import first_line
from seasnake_setup.state import StepOutcome, StepResult, Succeeded, Warned
from seasnake_setup.steps.environment import environment_exists

VERIFY_TIMEOUT = 120


def nothing_changed(ctx: SetupContext) -> bool:
    """True when this run did no work and left no warning on an existing environment."""
    if ctx.state.changed:
        return False
    return not (environment_exists(ctx) and ctx.state.count(StepOutcome.WARNED))


def verify_environment(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Verifying installation...")
    config = ctx.config
    result = ctx.run(
        [str(config.conda_bin), "run", "-n", config.env_name, config.verify_tool, "--version"],
        timeout=VERIFY_TIMEOUT,
    )
    if not result.ok:
        return Warned(f"{config.verify_tool} verification failed")
    version = first_line(result.stdout) or first_line(result.stderr)
    return Succeeded(f"{config.verify_tool} installed successfully: {version}")


def activation_script(ctx: SetupContext) -> str:
    config = ctx.config
    conda = str(config.conda_bin)
    home = str(ctx.env.get("HOME", ""))
    if home and conda.startswith(home + os.sep):
        conda = "~" + conda[len(home):]
    return (
        "#!/bin/zsh\n"
        "# SEAsnake Environment Activation Script\n"
        "\n"
        "# Activate conda\n"
        f'eval "$({conda} shell.zsh hook)"\n'
        "\n"
        "# Activate SEAsnake environment\n"
        f"conda activate {config.env_name}\n"
        "\n"
        'echo "SEAsnake environment activated!"\n'
        f'echo "Your prompt should now show ({config.env_name})"\n'
        'echo ""\n'
        'echo "To deactivate when done, run: conda deactivate"\n'
    )


def activation_script_current(ctx: SetupContext) -> bool:
    path = ctx.config.activation_script
    if not path.is_file():
        return False
    if not os.access(path, os.X_OK):
        return False
    return path.read_text(encoding="utf-8") == activation_script(ctx)


def write_activation_script(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Creating activation script...")
    path = ctx.config.activation_script
    try:
        path.write_text(activation_script(ctx), encoding="utf-8")
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        return Warned(f"Could not write {path}: {exc}")
    return Succeeded(f"written to {path}")


def finish_steps() -> list[Step]:
    return [
        Step(
            name="verify",
            label="Verification",
            precondition=nothing_changed,
            action=verify_environment,
            severity=Severity.WARNING,
            skip_detail="nothing installed in this run",
        ),
        Step(
            name="activation-script",
            label="Activation script",
            precondition=activation_script_current,
            action=write_activation_script,
            severity=Severity.WARNING,
            skip_detail=lambda ctx: f"{ctx.config.activation_script} is up to date",
        ),
    ]
