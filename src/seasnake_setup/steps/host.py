"""Host platform checks."""

from __future__ import annotations

from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.state import Failed, StepResult, VoluntaryExit, Warned


def os_matches(ctx: SetupContext) -> bool:
    return ctx.os_family.startswith(ctx.config.expected_os)


def arch_matches(ctx: SetupContext) -> bool:
    return ctx.machine == ctx.config.expected_arch


def reject_os(ctx: SetupContext) -> StepResult:
    return Failed(f"This setup is designed for macOS only (detected {ctx.os_family}).")


def confirm_arch(ctx: SetupContext) -> StepResult:
    ctx.printer.warning("This setup is optimized for Apple Silicon (M-series) Macs.")
    ctx.printer.warning("You may encounter compatibility issues on Intel Macs.")
    if ctx.confirm("Do you want to continue anyway?"):
        return Warned(f"Continuing on {ctx.machine}")
    return VoluntaryExit(f"Stopped on {ctx.machine} at user request")


def host_steps() -> list[Step]:
    return [
        Step(
            name="platform-os",
            label="Operating system",
            precondition=os_matches,
            action=reject_os,
            severity=Severity.CRITICAL,
            skip_detail=lambda ctx: f"{ctx.os_family} supported",
        ),
        Step(
            name="platform-arch",
            label="CPU architecture",
            precondition=arch_matches,
            action=confirm_arch,
            severity=Severity.CRITICAL,
            skip_detail=lambda ctx: f"{ctx.machine} supported",
        ),
    ]
