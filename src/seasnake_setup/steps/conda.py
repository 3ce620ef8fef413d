"""Miniforge and mamba bootstrap."""

from __future__ import annotations

import tempfile
from pathlib import Path

from seasnake_setup.context import SetupContext
from seasnake_setup.download import InstallerDownloadError, download_installer, installer_name
from seasnake_setup.orchestrator import Severity, Step
from seasnake_setup.state import Failed, StepResult, Succeeded

INSTALLER_GUIDANCE = (
    "During installation:",
    "- Press ENTER to review license, SPACE to scroll, type 'yes' to accept",
    "- Press ENTER to accept default installation location",
    "- Type 'no' when asked about shell initialization (recommended for research)",
)


def miniforge_installed(ctx: SetupContext) -> bool:
    return ctx.config.conda_bin.is_file()


def install_miniforge(ctx: SetupContext) -> StepResult:
    config = ctx.config
    try:
        name = installer_name(ctx.os_family, ctx.machine)
    except InstallerDownloadError as exc:
        return Failed(str(exc))

    with tempfile.TemporaryDirectory(prefix="seasnake-setup-") as tmp:
        installer = Path(tmp) / name
        ctx.printer.info(f"Downloading {name}...")
        try:
            download_installer(
                f"{config.installer_base_url}/{name}",
                installer,
                console=ctx.printer.console,
            )
        except InstallerDownloadError as exc:
            return Failed(str(exc))

        ctx.printer.info("Installing Miniforge...")
        for line in INSTALLER_GUIDANCE:
            ctx.printer.warning(line)
        result = ctx.run(["bash", str(installer)], cwd=Path(tmp), capture=False)

    if not result.ok:
        return Failed(f"Miniforge installer exited with status {result.returncode}")
    if not config.conda_bin.is_file():
        return Failed(f"Miniforge installation not found at expected location {config.miniforge_dir}")
    return Succeeded(f"installed at {config.miniforge_dir}")


def mamba_installed(ctx: SetupContext) -> bool:
    return ctx.config.mamba_bin.is_file()


def install_mamba(ctx: SetupContext) -> StepResult:
    ctx.printer.info("Installing mamba...")
    result = ctx.run(
        [str(ctx.config.conda_bin), "install", "-n", "base", "-c", "conda-forge", "mamba", "-y"],
        capture=False,
    )
    if not result.ok:
        return Failed(f"conda install mamba exited with status {result.returncode}")
    return Succeeded("installed into base")


def conda_steps() -> list[Step]:
    return [
        Step(
            name="miniforge",
            label="Miniforge",
            precondition=miniforge_installed,
            action=install_miniforge,
            severity=Severity.CRITICAL,
            skip_detail=lambda ctx: f"already installed at {ctx.config.miniforge_dir}",
        ),
        Step(
            name="mamba",
            label="mamba",
            precondition=mamba_installed,
            action=install_mamba,
            severity=Severity.CRITICAL,
            skip_detail="already installed",
        ),
    ]
