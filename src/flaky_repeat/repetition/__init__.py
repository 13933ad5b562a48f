"""
Conditional repetition of fallible operations.

Runs an operation a bounded number of times, tolerating a whitelist of
failure kinds, and decides pass/fail from how many attempts succeeded
versus a required minimum.

Main Components:
    - RepeatDecisionEngine: Pull-based state machine producing attempts
    - RepetitionPolicy: Immutable configuration of one run
    - ExecutionHistory: Thread-safe append-only log of outcomes
    - classify: Tolerable/fatal decision for a failure
    - DisplayNameFormatter: Per-attempt labels

Usage:
    >>> from flaky_repeat.repetition import RepeatDecisionEngine, RepetitionPolicy
    >>> engine = RepeatDecisionEngine(RepetitionPolicy(total_attempts=3))
    >>> context = engine.next_attempt()
"""

from flaky_repeat.repetition.classifier import classify
from flaky_repeat.repetition.display_name import (
    LONG_DISPLAY_NAME,
    SHORT_DISPLAY_NAME,
    DisplayNameFormatter,
    format_display_name,
)
from flaky_repeat.repetition.engine import RepeatDecisionEngine
from flaky_repeat.repetition.exceptions import (
    AttemptAborted,
    AttemptsExhausted,
    PreconditionViolation,
    ProtocolViolation,
    RepetitionError,
)
from flaky_repeat.repetition.history import ExecutionHistory
from flaky_repeat.repetition.policy import RepetitionPolicy

__all__ = [
    "RepeatDecisionEngine",
    "RepetitionPolicy",
    "ExecutionHistory",
    "classify",
    "DisplayNameFormatter",
    "format_display_name",
    "SHORT_DISPLAY_NAME",
    "LONG_DISPLAY_NAME",
    "RepetitionError",
    "PreconditionViolation",
    "ProtocolViolation",
    "AttemptsExhausted",
    "AttemptAborted",
]
