"""
Append-only, thread-safe log of attempt outcomes.
"""

import threading
from typing import Iterator

from flaky_repeat.models.enums import AttemptOutcome


class ExecutionHistory:
    """
    Ordered log of recorded attempt outcomes for a single run.

    Appends and reads are guarded by one lock. Readers work on an immutable
    snapshot, so a count never observes a partially applied append.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: list[AttemptOutcome] = []

    def append(self, outcome: AttemptOutcome) -> None:
        """Record the outcome of one completed attempt."""
        if not isinstance(outcome, AttemptOutcome):
            raise TypeError(f"Expected AttemptOutcome, got {type(outcome).__name__}")
        with self._lock:
            self._outcomes.append(outcome)

    def snapshot(self) -> tuple[AttemptOutcome, ...]:
        """Consistent prefix of the log at the time of the call."""
        with self._lock:
            return tuple(self._outcomes)

    def count_successes(self) -> int:
        return sum(1 for outcome in self.snapshot() if outcome is AttemptOutcome.SUCCESS)

    def count_failures(self) -> int:
        return sum(
            1 for outcome in self.snapshot() if outcome is AttemptOutcome.TOLERABLE_FAILURE
        )

    def any_failure_recorded(self) -> bool:
        return AttemptOutcome.TOLERABLE_FAILURE in self.snapshot()

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self) -> Iterator[AttemptOutcome]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"ExecutionHistory({[outcome.value for outcome in self.snapshot()]})"
