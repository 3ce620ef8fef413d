"""Command-line entry point: ``seasnake-setup``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from seasnake_setup import __version__
from seasnake_setup.config import SetupConfig, SetupConfigError, load_config
from seasnake_setup.context import SetupContext
from seasnake_setup.orchestrator import run_pipeline
from seasnake_setup.reporter import StatusPrinter, render_tree, report
from seasnake_setup.state import RunState, RunStatus
from seasnake_setup.steps import build_pipeline

console = Console()

app = typer.Typer(
    name="seasnake-setup",
    help="Install the SEAsnake pipeline and its conda environment on an M-series Mac",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_usage(printer: StatusPrinter, config: SetupConfig) -> None:
    printer.echo()
    printer.info("To use SEAsnake:")
    printer.echo(f"1. Run: source {config.activation_script}")
    printer.echo(
        f'2. Or manually activate with: eval "$({config.conda_bin} shell.zsh hook)"'
        f" && conda activate {config.env_name}"
    )
    printer.echo()
    printer.info(f"SEAsnake directory: {config.clone_dir}")
    printer.info(f"Activation script: {config.activation_script}")
    printer.echo()
    printer.warning("Remember: Always activate the SEAsnake environment before running bioinformatics tools!")


def _summarize(ctx: SetupContext, state: RunState) -> None:
    ctx.printer.console.print()
    ctx.printer.console.print(render_tree(state))
    ctx.printer.console.print()
    ctx.printer.console.print(report(state, color=True).splitlines()[-1])
    if state.status == RunStatus.COMPLETED:
        _print_usage(ctx.printer, ctx.config)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"seasnake-setup {__version__}")
        raise typer.Exit()


@app.command()
def setup(
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="YAML file overriding the default install locations and packages"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Run the full SEAsnake setup."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
    except SetupConfigError as exc:
        console.print(Panel(str(exc), title="[red]Configuration Error[/red]", border_style="red"))
        raise typer.Exit(1) from exc

    ctx = SetupContext(config=config, printer=StatusPrinter(console))
    ctx.printer.info("Starting SEAsnake setup for M-series Mac...")

    try:
        state = run_pipeline(build_pipeline(ctx), ctx)
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Setup cancelled[/yellow]")
        raise typer.Exit(1)

    _summarize(ctx, state)
    raise typer.Exit(state.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
