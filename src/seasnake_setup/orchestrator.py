"""Sequential, fail-tolerant provisioning orchestrator.

Runs an ordered list of ``Step`` objects. Each step's precondition decides
whether its action is needed; a failed action either warns and continues
or aborts the run, depending on the step's severity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Sequence

from seasnake_setup.state import (
    Failed,
    RunState,
    RunStatus,
    Skipped,
    StepOutcome,
    StepRecord,
    StepResult,
    Succeeded,
    VoluntaryExit,
    Warned,
)

if TYPE_CHECKING:
    from seasnake_setup.context import SetupContext

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"


Precondition = Callable[["SetupContext"], bool]
Action = Callable[["SetupContext"], "int | StepResult"]


@dataclass(frozen=True)
class Step:
    """One installation step.

    Attributes:
        name: Stable identifier, unique within a pipeline.
        precondition: Returns True when the step's work is already done.
        action: Does the work; returns an exit status or a tagged result.
        severity: Whether a failure aborts the run or only warns.
        label: Human-readable name for reporting (defaults to ``name``).
        skip_detail: Message recorded when the precondition holds.
    """

    name: str
    precondition: Precondition
    action: Action
    severity: Severity = Severity.WARNING
    label: str = ""
    skip_detail: str | Callable[["SetupContext"], str] = "already done"

    @property
    def display(self) -> str:
        return self.label or self.name


def _normalize(result: int | StepResult) -> StepResult:
    if isinstance(result, bool):
        raise TypeError("step action returned bool; return an exit status or a StepResult")
    if isinstance(result, int):
        if result == 0:
            return Succeeded()
        return Failed(f"exit status {result}")
    return result


def _apply(step: Step, rec: StepRecord, result: StepResult, state: RunState) -> bool:
    """Record *result* for *step*; return False when the run must stop."""
    if isinstance(result, Succeeded):
        rec.outcome = StepOutcome.SUCCEEDED
        rec.detail = result.detail
        return True
    if isinstance(result, Skipped):
        rec.outcome = StepOutcome.SKIPPED
        rec.detail = result.detail
        return True
    if isinstance(result, Warned):
        rec.outcome = StepOutcome.WARNED
        rec.detail = result.reason
        return True
    if isinstance(result, VoluntaryExit):
        rec.outcome = StepOutcome.SKIPPED
        rec.detail = result.reason
        state.status = RunStatus.VOLUNTARY_EXIT
        return False
    # Failed
    if step.severity == Severity.CRITICAL:
        rec.outcome = StepOutcome.FAILED
        rec.detail = result.reason
        state.abort = True
        state.status = RunStatus.ABORTED
        return False
    rec.outcome = StepOutcome.WARNED
    rec.detail = result.reason
    return True


def _narrate(ctx: SetupContext, rec: StepRecord) -> None:
    message = f"{rec.label}: {rec.detail}" if rec.detail else rec.label
    if rec.outcome == StepOutcome.SUCCEEDED:
        ctx.printer.success(message)
    elif rec.outcome == StepOutcome.WARNED:
        ctx.printer.warning(message)
    elif rec.outcome == StepOutcome.FAILED:
        ctx.printer.error(message)
    else:
        ctx.printer.info(message)


def run_pipeline(steps: Sequence[Step], ctx: SetupContext) -> RunState:
    """Execute *steps* strictly in order and return the accumulated state.

    The state is also attached to ``ctx.state`` so preconditions can look
    at what earlier steps did. Steps after an abort or a voluntary exit stay
    ``pending``.
    """
    names = [step.name for step in steps]
    if len(set(names)) != len(names):
        raise ValueError("step names must be unique")

    state = RunState(records=[StepRecord(name=s.name, label=s.display) for s in steps])
    ctx.state = state
    state.status = RunStatus.RUNNING

    for index, step in enumerate(steps):
        state.current = index
        rec = state.records[index]
        logger.info("Step %d/%d: %s", index + 1, len(steps), step.name)
        try:
            if step.precondition(ctx):
                rec.outcome = StepOutcome.SKIPPED
                rec.detail = step.skip_detail(ctx) if callable(step.skip_detail) else step.skip_detail
                _narrate(ctx, rec)
                continue
            result = _normalize(step.action(ctx))
        except EOFError:
            raise
        except Exception as exc:
            logger.exception("Step %s raised", step.name)
            result = Failed(f"{type(exc).__name__}: {exc}")

        keep_going = _apply(step, rec, result, state)
        _narrate(ctx, rec)
        if not keep_going:
            logger.info("Run stopped at %s (%s)", step.name, state.status.value)
            return state

    state.status = RunStatus.COMPLETED
    return state


__all__ = ["Action", "Precondition", "Severity", "Step", "run_pipeline"]
