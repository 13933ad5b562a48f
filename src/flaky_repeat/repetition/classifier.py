"""
Failure classification against a whitelist of tolerable failure kinds.

Failure kinds are exception classes and matching follows the exception
hierarchy: a whitelist entry tolerates the class itself and every subclass.
The engine's own AttemptAborted signal is always tolerable. Errors raised by
the repetition layer (RepetitionError) are never tolerable.
"""

from typing import Iterable

from flaky_repeat.models.enums import FailureVerdict
from flaky_repeat.repetition.exceptions import AttemptAborted, RepetitionError

FailureKind = type[BaseException]


def with_abort_marker(whitelist: Iterable[FailureKind]) -> tuple[FailureKind, ...]:
    """Return the whitelist with AttemptAborted appended (once)."""
    kinds = tuple(whitelist)
    if AttemptAborted in kinds:
        return kinds
    return kinds + (AttemptAborted,)


def matches_whitelist(failure: BaseException, whitelist: Iterable[FailureKind]) -> bool:
    """Whether the failure's class is any whitelisted kind or a subclass of one."""
    return any(isinstance(failure, kind) for kind in whitelist)


def classify(failure: BaseException, whitelist: Iterable[FailureKind]) -> FailureVerdict:
    """
    Classify a failure as tolerable or fatal.

    Args:
        failure: Exception raised by the attempt
        whitelist: Tolerable failure kinds (AttemptAborted is implied)

    Returns:
        FailureVerdict.TOLERABLE if the failure may be retried,
        FailureVerdict.FATAL otherwise
    """
    if isinstance(failure, RepetitionError):
        return FailureVerdict.FATAL

    if matches_whitelist(failure, with_abort_marker(whitelist)):
        return FailureVerdict.TOLERABLE

    return FailureVerdict.FATAL
