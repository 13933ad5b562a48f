"""
Enumerations for repetition data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class AttemptOutcome(str, Enum):
    """
    Recorded outcome of a completed attempt.

    A fatal failure never becomes an outcome: it ends the run and is not
    recorded in the execution history.
    """

    SUCCESS = "success"
    TOLERABLE_FAILURE = "tolerable_failure"


class FailureVerdict(str, Enum):
    """Classification of a single failure against the whitelist."""

    TOLERABLE = "tolerable"
    FATAL = "fatal"


class RunVerdict(str, Enum):
    """Final verdict of a whole run, as seen by the host."""

    SUCCESS = "success"
    FATAL = "fatal"
