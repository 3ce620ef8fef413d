"""SEAsnake setup - provision the SEAsnake pipeline's conda stack on Apple Silicon."""

__version__ = "0.1.0"

from seasnake_setup.orchestrator import Severity, Step, run_pipeline
from seasnake_setup.state import RunState, RunStatus, StepOutcome

__all__ = [
    "RunState",
    "RunStatus",
    "Severity",
    "Step",
    "StepOutcome",
    "__version__",
    "run_pipeline",
]
