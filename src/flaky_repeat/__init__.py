"""flaky-repeat: conditional repetition controller for flaky operations."""

from flaky_repeat.models import AttemptContext, AttemptOutcome, RunReport, RunVerdict
from flaky_repeat.repetition import (
    AttemptAborted,
    AttemptsExhausted,
    ExecutionHistory,
    PreconditionViolation,
    ProtocolViolation,
    RepeatDecisionEngine,
    RepetitionError,
    RepetitionPolicy,
)
from flaky_repeat.runner import RepetitionRunner, repeat_if_exceptions

__version__ = "0.1.0"

__all__ = [
    "AttemptAborted",
    "AttemptContext",
    "AttemptOutcome",
    "AttemptsExhausted",
    "ExecutionHistory",
    "PreconditionViolation",
    "ProtocolViolation",
    "RepeatDecisionEngine",
    "RepetitionError",
    "RepetitionPolicy",
    "RepetitionRunner",
    "RunReport",
    "RunVerdict",
    "repeat_if_exceptions",
]
