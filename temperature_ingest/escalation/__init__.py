from .scheduler import (
    ACTION_DELAYS,
    EscalationScheduler,
    build_breach_actions,
    compute_due_times,
)

__all__ = [
    "ACTION_DELAYS",
    "EscalationScheduler",
    "build_breach_actions",
    "compute_due_times",
]
