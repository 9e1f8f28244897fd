"""Retry action sequencing.

Ordered, retryable, side-effecting steps with continue-on-failure behaviour
and success callbacks, returning a structured SequenceResult.
"""

from funcauth.actions.sequencer import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    Action,
    ActionOutcome,
    ActionResult,
    ActionRunner,
    ActionSequence,
    SequenceResult,
    SequenceStatus,
    run_actions,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionOutcome",
    "ActionSequence",
    "ActionRunner",
    "SequenceResult",
    "SequenceStatus",
    "run_actions",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_DELAY_SECONDS",
]
