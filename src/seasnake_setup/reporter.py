"""Status reporting for provisioning runs.

``report`` is a pure rendering of a ``RunState``; ``StatusPrinter`` narrates
progress live while the run is in flight.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from seasnake_setup.state import RunState, RunStatus, StepOutcome, StepRecord

logger = logging.getLogger(__name__)

LABEL_STYLES: dict[str, str] = {
    "INFO": "blue",
    "SUCCESS": "green",
    "WARNING": "yellow",
    "ERROR": "red",
}

OUTCOME_LABELS: dict[StepOutcome, str] = {
    StepOutcome.PENDING: "INFO",
    StepOutcome.SKIPPED: "INFO",
    StepOutcome.SUCCEEDED: "SUCCESS",
    StepOutcome.WARNED: "WARNING",
    StepOutcome.FAILED: "ERROR",
}

_TREE_SYMBOLS: dict[StepOutcome, str] = {
    StepOutcome.PENDING: "[green dim]○[/green dim]",
    StepOutcome.SKIPPED: "[yellow]○[/yellow]",
    StepOutcome.SUCCEEDED: "[green]●[/green]",
    StepOutcome.WARNED: "[yellow]●[/yellow]",
    StepOutcome.FAILED: "[red]●[/red]",
}


def tag(label: str, color: bool = True) -> str:
    """Return the ``[LABEL]`` prefix, wrapped in its colour when *color* is set."""
    text = f"[{label}]"
    if not color:
        return text
    style = LABEL_STYLES[label]
    return f"[{style}]{escape(text)}[/{style}]"


def _line(label: str, message: str, color: bool) -> str:
    return f"{tag(label, color)} {escape(message) if color else message}"


def _step_message(rec: StepRecord) -> str:
    if rec.outcome == StepOutcome.PENDING:
        return f"{rec.label}: not run"
    if rec.detail:
        return f"{rec.label}: {rec.detail}"
    return f"{rec.label}: {rec.outcome.value}"


def _closing(state: RunState) -> tuple[str, str]:
    if state.status == RunStatus.COMPLETED:
        warned = state.count(StepOutcome.WARNED)
        if warned:
            return "SUCCESS", f"Setup completed with {warned} warning(s)"
        return "SUCCESS", "Setup completed successfully!"
    if state.status == RunStatus.ABORTED:
        failed = next((r for r in state.records if r.outcome == StepOutcome.FAILED), None)
        where = f" at {failed.label}" if failed else ""
        return "ERROR", f"Setup aborted{where}"
    if state.status == RunStatus.VOLUNTARY_EXIT:
        return "INFO", "Setup stopped at user request"
    if state.status == RunStatus.RUNNING:
        return "INFO", "Setup in progress"
    return "INFO", "Setup not started"


def report(state: RunState, color: bool = False) -> str:
    """Render *state* as one tagged line per step plus a closing status line.

    With ``color=True`` each tag is wrapped in Rich markup for its colour;
    the output is otherwise identical.
    """
    lines = [_line(OUTCOME_LABELS[rec.outcome], _step_message(rec), color) for rec in state.records]
    lines.append(_line(*_closing(state), color))
    return "\n".join(lines)


def render_tree(state: RunState, title: str = "SEAsnake setup") -> Tree:
    """Render the run as a Rich tree, one node per step."""
    tree = Tree(f"[cyan]{escape(title)}[/cyan]", guide_style="grey50")
    for rec in state.records:
        symbol = _TREE_SYMBOLS[rec.outcome]
        label = escape(rec.label)
        detail = escape(rec.detail.strip()) if rec.detail else ""
        if rec.outcome == StepOutcome.PENDING:
            tree.add(f"{symbol} [bright_black]{label}[/bright_black]")
        elif detail:
            tree.add(f"{symbol} [white]{label}[/white] [bright_black]({detail})[/bright_black]")
        else:
            tree.add(f"{symbol} [white]{label}[/white]")
    return tree


class StatusPrinter:
    """Print tagged progress messages and mirror them to the log."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def _emit(self, label: str, message: str) -> None:
        self.console.print(_line(label, message, color=True))

    def info(self, message: str) -> None:
        logger.info(message)
        self._emit("INFO", message)

    def success(self, message: str) -> None:
        logger.info(message)
        self._emit("SUCCESS", message)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._emit("WARNING", message)

    def error(self, message: str) -> None:
        logger.error(message)
        self._emit("ERROR", message)

    def echo(self, message: str = "") -> None:
        self.console.print(escape(message))


__all__ = [
    "LABEL_STYLES",
    "OUTCOME_LABELS",
    "StatusPrinter",
    "render_tree",
    "report",
    "tag",
]
