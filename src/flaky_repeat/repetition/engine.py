"""
Repeat decision engine.

This module implements the state machine that decides, attempt by attempt,
whether a fallible operation is run again and whether a failure ends the run.

Production rule:
    1. Attempt 1 is always produced.
    2. Attempt i > 1 is produced only if a tolerable failure has ever been
       recorded and i <= total_attempts. Once a failure appeared the full
       budget is spent, even after min_successes has been reached.

Failure rule (after an attempt failed):
    1. Non-whitelisted failure: re-raised unchanged, run ends.
    2. Successes already >= min_successes: failure recorded and absorbed.
    3. Target still reachable (failures < total - min): failure recorded,
       AttemptAborted raised from it, run continues.
    4. Otherwise: re-raised unchanged, run ends.

Usage:
    engine = RepeatDecisionEngine(policy, display_name="test_checkout")
    for context in engine:
        try:
            operation()
        except AttemptAborted:
            continue
        ...
"""

import threading
from typing import Optional

import structlog

from flaky_repeat.models.context import AttemptContext
from flaky_repeat.models.enums import AttemptOutcome, FailureVerdict, RunVerdict
from flaky_repeat.repetition.classifier import classify
from flaky_repeat.repetition.display_name import DisplayNameFormatter
from flaky_repeat.repetition.exceptions import (
    AttemptAborted,
    AttemptsExhausted,
    ProtocolViolation,
)
from flaky_repeat.repetition.history import ExecutionHistory
from flaky_repeat.repetition.policy import RepetitionPolicy

logger = structlog.get_logger(__name__)


class RepeatDecisionEngine:
    """
    Pull-based producer of attempts for one run.

    The host pulls an AttemptContext, executes the operation, then reports
    the outcome with ``report_success`` or ``report_failure`` before pulling
    again. The engine is single-use: it cannot be restarted.

    Attributes:
        policy: Immutable run configuration
        history: Recorded outcomes, shared with whichever thread reports
        formatter: Display-name formatter bound to the run
        current_index: Number of attempts produced so far
    """

    def __init__(
        self,
        policy: RepetitionPolicy,
        display_name: str = "",
        history: Optional[ExecutionHistory] = None,
    ):
        """
        Initialize the engine for a fresh run.

        Args:
            policy: Validated repetition policy
            display_name: Base display name of the operation
            history: Execution history to record into (a new one by default)
        """
        self.policy = policy
        self.history = history if history is not None else ExecutionHistory()
        self.formatter = DisplayNameFormatter(policy.name_pattern, display_name)
        self.current_index = 0

        self._lock = threading.RLock()
        self._awaiting_outcome = False
        self._fatal = False

        logger.debug(
            "RepeatDecisionEngine initialized",
            total_attempts=policy.total_attempts,
            min_successes=policy.min_successes,
            tolerable_failure_kinds=[kind.__name__ for kind in policy.tolerable_failure_kinds],
            display_name=display_name,
        )

    # ------------------------------------------------------------------
    # Production
    # ------------------------------------------------------------------

    def has_next(self) -> bool:
        """Whether another attempt should be produced."""
        with self._lock:
            if self._fatal:
                return False
            if self.current_index == 0:
                return True
            return (
                self.history.any_failure_recorded()
                and self.current_index < self.policy.total_attempts
            )

    def next_attempt(self) -> AttemptContext:
        """
        Produce the next attempt.

        Raises:
            AttemptsExhausted: The sequence is exhausted
            ProtocolViolation: The previous attempt has no reported outcome
        """
        with self._lock:
            if self._awaiting_outcome:
                raise ProtocolViolation(
                    f"Attempt {self.current_index} has no reported outcome yet"
                )
            if not self.has_next():
                raise AttemptsExhausted(
                    f"No attempt left after {self.current_index} of "
                    f"{self.policy.total_attempts}"
                )

            successes = self.history.count_successes()
            failure_appeared = self.history.any_failure_recorded()
            self.current_index += 1
            self._awaiting_outcome = True

            context = AttemptContext(
                index=self.current_index,
                total_attempts=self.policy.total_attempts,
                successes_so_far=successes,
                min_successes=self.policy.min_successes,
                failure_appeared=failure_appeared,
                display_name=self.formatter.format(
                    self.current_index, self.policy.total_attempts
                ),
            )

        logger.debug(
            "Attempt produced",
            attempt=context.index,
            total_attempts=context.total_attempts,
            successes_so_far=context.successes_so_far,
            display_name=context.display_name,
        )
        return context

    def try_produce_next(self) -> Optional[AttemptContext]:
        """Produce the next attempt, or None once the sequence is exhausted."""
        with self._lock:
            if not self.has_next():
                return None
            return self.next_attempt()

    def __iter__(self) -> "RepeatDecisionEngine":
        return self

    def __next__(self) -> AttemptContext:
        context = self.try_produce_next()
        if context is None:
            raise StopIteration
        return context

    # ------------------------------------------------------------------
    # Outcome handling
    # ------------------------------------------------------------------

    def report_success(self) -> None:
        """Record that the in-flight attempt succeeded."""
        with self._lock:
            self._require_in_flight()
            self.history.append(AttemptOutcome.SUCCESS)
            self._awaiting_outcome = False

        logger.debug("Attempt succeeded", attempt=self.current_index)

    def report_failure(self, failure: BaseException) -> None:
        """
        Decide what a failure of the in-flight attempt means for the run.

        Returns normally when the failure is absorbed because the minimum
        was already met.

        Raises:
            AttemptAborted: Tolerable failure, the run continues
            BaseException: The original ``failure``, unchanged, when fatal
        """
        with self._lock:
            self._require_in_flight()
            index = self.current_index
            total = self.policy.total_attempts
            min_successes = self.policy.min_successes

            if classify(failure, self.policy.tolerable_failure_kinds) is FailureVerdict.FATAL:
                self._terminate()
                logger.error(
                    "Failure kind does not allow repetitions",
                    attempt=index,
                    total_attempts=total,
                    error_type=type(failure).__name__,
                )
                raise failure

            successes = self.history.count_successes()
            if successes >= min_successes:
                self._record_tolerable_failure()
                logger.info(
                    "Tolerable failure after minimum successes reached",
                    attempt=index,
                    total_attempts=total,
                    successes=successes,
                    error_type=type(failure).__name__,
                )
                return

            failures = self.history.count_failures()
            if failures < total - min_successes:
                self._record_tolerable_failure()
                logger.info(
                    "Tolerable failure, repeating",
                    attempt=index,
                    total_attempts=total,
                    successes=successes,
                    failures=failures + 1,
                    error_type=type(failure).__name__,
                )
                raise AttemptAborted(
                    "Do not fail completely but repeat the attempt", index, total
                ) from failure

            self._terminate()
            logger.warning(
                "Minimum successes no longer reachable",
                attempt=index,
                total_attempts=total,
                min_successes=min_successes,
                successes=successes,
                failures=failures,
                error_type=type(failure).__name__,
            )
            raise failure

    def _record_tolerable_failure(self) -> None:
        self.history.append(AttemptOutcome.TOLERABLE_FAILURE)
        self._awaiting_outcome = False

    def _terminate(self) -> None:
        self._fatal = True
        self._awaiting_outcome = False

    def _require_in_flight(self) -> None:
        if self._fatal:
            raise ProtocolViolation("Run already terminated with a fatal failure")
        if not self._awaiting_outcome:
            raise ProtocolViolation("No attempt in flight to report an outcome for")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def verdict(self) -> Optional[RunVerdict]:
        """Final verdict, or None while the run is still in progress."""
        with self._lock:
            if self._fatal:
                return RunVerdict.FATAL
            if self._awaiting_outcome or self.has_next():
                return None
            return RunVerdict.SUCCESS

    @property
    def successes(self) -> int:
        return self.history.count_successes()

    @property
    def failures(self) -> int:
        return self.history.count_failures()
