"""Interactive sync workflow: pipeline of steps plus its console UI."""

from syncgit.sync.orchestrator import (
    MSG_NO_INTERNET_PUSH,
    MSG_RUN_PUSH_MANUALLY,
    Outcome,
    Step,
    StepPolicy,
    StepResult,
    SyncOrchestrator,
    SyncReport,
)
from syncgit.sync.ui import SyncUI

__all__ = [
    "MSG_NO_INTERNET_PUSH",
    "MSG_RUN_PUSH_MANUALLY",
    "Outcome",
    "Step",
    "StepPolicy",
    "StepResult",
    "SyncOrchestrator",
    "SyncReport",
    "SyncUI",
]
