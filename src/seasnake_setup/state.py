"""Run state and tagged step results for a provisioning run.

Nothing here is persisted: a ``RunState`` lives exactly as long as the
process that built it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StepOutcome(str, Enum):
    """Recorded outcome of a single step."""

    PENDING = "pending"
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    WARNED = "warned"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Overall status of a run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    ABORTED = "aborted"
    COMPLETED = "completed"
    VOLUNTARY_EXIT = "voluntary_exit"


# Tagged results returned by step actions.


@dataclass(frozen=True)
class Succeeded:
    detail: str = ""


@dataclass(frozen=True)
class Skipped:
    detail: str = ""


@dataclass(frozen=True)
class Warned:
    reason: str = ""


@dataclass(frozen=True)
class Failed:
    reason: str = ""


@dataclass(frozen=True)
class VoluntaryExit:
    """The user chose to stop; this is not a failure."""

    reason: str = ""


StepResult = Succeeded | Skipped | Warned | Failed | VoluntaryExit


@dataclass
class StepRecord:
    """Outcome of one step within a run."""

    name: str
    label: str
    outcome: StepOutcome = StepOutcome.PENDING
    detail: str = ""


@dataclass
class RunState:
    """Ordered step records plus the run's position and terminal status."""

    records: list[StepRecord] = field(default_factory=list)
    current: int = -1
    abort: bool = False
    status: RunStatus = RunStatus.NOT_STARTED

    @property
    def exit_code(self) -> int:
        """Process exit code: non-zero iff a critical step failed."""
        return 1 if self.abort else 0

    def record(self, name: str) -> StepRecord:
        for rec in self.records:
            if rec.name == name:
                return rec
        raise KeyError(name)

    def outcomes(self) -> list[StepOutcome]:
        return [rec.outcome for rec in self.records]

    def count(self, outcome: StepOutcome) -> int:
        return sum(1 for rec in self.records if rec.outcome == outcome)

    @property
    def changed(self) -> bool:
        """True when any step has succeeded in doing work during this run."""
        return any(rec.outcome == StepOutcome.SUCCEEDED for rec in self.records)


__all__ = [
    "Failed",
    "RunState",
    "RunStatus",
    "Skipped",
    "StepOutcome",
    "StepRecord",
    "StepResult",
    "Succeeded",
    "VoluntaryExit",
    "Warned",
]
