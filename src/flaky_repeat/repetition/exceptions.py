"""
Repetition engine exceptions.

This module defines the errors raised by the repetition layer itself. They
are kept apart from the failures raised by the operation under repetition:

- RepetitionError and its subclasses signal configuration or protocol
  problems. They are never tolerable, whatever the whitelist says.
- AttemptAborted is the engine's own "abort this attempt, try again" signal.
  It is always tolerable and carries the original failure as ``__cause__``.

Fatal failures of the operation are never wrapped in any of these; the
engine re-raises the original exception object.
"""


class RepetitionError(Exception):
    """
    Base exception for all repetition layer errors.

    Catching RepetitionError catches every error raised by the layer itself,
    but never a failure raised by the operation under repetition.
    """


class PreconditionViolation(RepetitionError, ValueError):
    """
    Raised when a repetition policy is misconfigured.

    Examples:
    - total attempts is zero or negative
    - minimum successes is below 1

    Raised before any attempt is produced and never retried.
    """


class ProtocolViolation(RepetitionError):
    """
    Raised when the host misuses the pull/report protocol.

    Examples:
    - reporting an outcome while no attempt is in flight
    - reporting an outcome to a run that already terminated fatally
    """


class AttemptsExhausted(ProtocolViolation, LookupError):
    """
    Raised when an attempt is pulled after the sequence is exhausted.

    Subclasses LookupError so callers can treat it like any other
    "no more elements" condition.
    """


class AttemptAborted(Exception):
    """
    Signal that the current attempt failed tolerably and the run continues.

    Raised by the engine ``from`` the original failure so the host can still
    inspect it through ``__cause__``. Hosts that drive attempts themselves
    should catch it and pull the next attempt.

    Attributes:
        attempt_index: 1-based index of the aborted attempt
        total_attempts: Attempt budget of the run
    """

    def __init__(self, message: str, attempt_index: int, total_attempts: int) -> None:
        super().__init__(message)
        self.attempt_index = attempt_index
        self.total_attempts = total_attempts
