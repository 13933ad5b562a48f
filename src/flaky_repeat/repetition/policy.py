"""
Repetition policy.

This module defines the RepetitionPolicy dataclass: the immutable
configuration of one run, built once before the first attempt.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from flaky_repeat.repetition.classifier import FailureKind, with_abort_marker
from flaky_repeat.repetition.display_name import SHORT_DISPLAY_NAME
from flaky_repeat.repetition.exceptions import PreconditionViolation


def _is_count(value: object) -> bool:
    """Plain integers only; bool is an int subclass but not a count."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class RepetitionPolicy:
    """
    Immutable configuration of a single run.

    ``min_successes <= total_attempts`` is not enforced here. A policy that
    asks for more successes than attempts simply becomes unreachable on the
    first tolerable failure.

    Attributes:
        total_attempts: Hard upper bound on attempts (> 0)
        min_successes: Successes required for an overall pass (>= 1)
        tolerable_failure_kinds: Exception classes that permit a retry;
            AttemptAborted is always appended
        name_pattern: Display-name pattern (see display_name module)
    """

    total_attempts: int
    min_successes: int = 1
    tolerable_failure_kinds: tuple[FailureKind, ...] = (Exception,)
    name_pattern: Optional[str] = SHORT_DISPLAY_NAME

    def __post_init__(self) -> None:
        """Validate policy preconditions."""
        if not _is_count(self.total_attempts) or self.total_attempts <= 0:
            raise PreconditionViolation(
                f"Total attempts must be higher than 0, got {self.total_attempts!r}"
            )

        if not _is_count(self.min_successes) or self.min_successes < 1:
            raise PreconditionViolation(
                f"Minimum successes must be higher or equal to 1, got {self.min_successes!r}"
            )

        kinds = tuple(self.tolerable_failure_kinds)
        for kind in kinds:
            if not (isinstance(kind, type) and issubclass(kind, BaseException)):
                raise PreconditionViolation(
                    f"Tolerable failure kinds must be exception classes, got {kind!r}"
                )
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "tolerable_failure_kinds", with_abort_marker(kinds))

    @classmethod
    def build(
        cls,
        repeats: int,
        min_success: int = 1,
        exceptions: Iterable[FailureKind] = (Exception,),
        name: Optional[str] = SHORT_DISPLAY_NAME,
    ) -> "RepetitionPolicy":
        """Build a policy from decorator-style arguments."""
        return cls(
            total_attempts=repeats,
            min_successes=min_success,
            tolerable_failure_kinds=tuple(exceptions),
            name_pattern=name,
        )
