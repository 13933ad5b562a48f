"""
Reference host for the repeat decision engine.

RepetitionRunner drives an engine to completion against a zero-argument
callable. ``repeat_if_exceptions`` wraps a function (typically a flaky test)
so every call goes through a fresh run.

Usage:
    @repeat_if_exceptions(repeats=3, exceptions=(ConnectionError,))
    def test_checkout():
        ...
"""

import functools
import inspect
import time
from typing import Any, Callable, Iterable, Optional, TypeVar

import structlog

from flaky_repeat.config import Settings, settings as default_settings
from flaky_repeat.logging_config import ensure_logging_configured
from flaky_repeat.models.context import RunReport
from flaky_repeat.models.enums import AttemptOutcome, RunVerdict
from flaky_repeat.monitoring import metrics
from flaky_repeat.repetition.classifier import FailureKind
from flaky_repeat.repetition.engine import RepeatDecisionEngine
from flaky_repeat.repetition.exceptions import AttemptAborted, PreconditionViolation
from flaky_repeat.repetition.policy import RepetitionPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RepetitionRunner:
    """
    Runs an operation under a repetition policy.

    Only the engine's AttemptAborted signal is swallowed. Fatal failures
    propagate as the original exception object.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def run(
        self,
        operation: Callable[[], T],
        policy: RepetitionPolicy,
        display_name: Optional[str] = None,
    ) -> RunReport:
        """
        Execute ``operation`` until the engine stops producing attempts.

        Args:
            operation: Zero-argument callable, one call per attempt
            policy: Repetition policy for this run
            display_name: Base display name (defaults to the callable's name)

        Returns:
            RunReport for a successful run

        Raises:
            Exception: The original failure when the run ends fatally
            PreconditionViolation: ``operation`` is a coroutine function
        """
        if inspect.iscoroutinefunction(operation):
            raise PreconditionViolation(
                f"Cannot repeat coroutine function {operation!r}; attempts run synchronously"
            )
        if display_name is None:
            display_name = getattr(operation, "__qualname__", None) or repr(operation)

        ensure_logging_configured(self.settings)
        with structlog.contextvars.bound_contextvars(
            display_name=display_name,
            total_attempts=policy.total_attempts,
            min_successes=policy.min_successes,
        ):
            return self._run(operation, policy, display_name)

    def _run(
        self,
        operation: Callable[[], T],
        policy: RepetitionPolicy,
        display_name: str,
    ) -> RunReport:
        start_time_ms = int(time.time() * 1000)
        engine = RepeatDecisionEngine(policy, display_name=display_name)
        display_names: list[str] = []
        last_result: Any = None

        logger.info("Starting repeated run")

        for context in engine:
            display_names.append(context.display_name)
            try:
                result = operation()
            except Exception as e:
                self._handle_failure(engine, e)
                continue
            self._reject_awaitable(result)

            engine.report_success()
            last_result = result
            self._count_attempt(AttemptOutcome.SUCCESS.value)

        outcomes = engine.history.snapshot()
        report = RunReport(
            total_attempts=engine.current_index,
            successes=engine.successes,
            failures=engine.failures,
            outcomes=outcomes,
            display_names=tuple(display_names),
            total_latency_ms=max(int(time.time() * 1000) - start_time_ms, 0),
            last_result=last_result,
        )
        self._count_run(RunVerdict.SUCCESS.value)

        logger.info(
            "Repeated run succeeded",
            total_attempts=report.total_attempts,
            successes=report.successes,
            failures=report.failures,
            total_latency_ms=report.total_latency_ms,
        )
        return report

    @staticmethod
    def _reject_awaitable(result: Any) -> None:
        if not inspect.isawaitable(result):
            return
        if inspect.iscoroutine(result):
            result.close()
        raise PreconditionViolation(
            "Operation returned an awaitable; async operations cannot be repeated synchronously"
        )

    def _handle_failure(self, engine: RepeatDecisionEngine, failure: Exception) -> None:
        try:
            engine.report_failure(failure)
        except AttemptAborted:
            self._count_attempt(AttemptOutcome.TOLERABLE_FAILURE.value)
            return
        except Exception:
            self._count_attempt("fatal")
            self._count_run(RunVerdict.FATAL.value)
            raise
        # Absorbed: minimum already met
        self._count_attempt(AttemptOutcome.TOLERABLE_FAILURE.value)

    def _count_attempt(self, outcome: str) -> None:
        if self.settings.METRICS_ENABLED:
            metrics.attempts_total.labels(outcome=outcome).inc()

    def _count_run(self, verdict: str) -> None:
        if self.settings.METRICS_ENABLED:
            metrics.runs_total.labels(verdict=verdict).inc()


def repeat_if_exceptions(
    repeats: Optional[int] = None,
    min_success: Optional[int] = None,
    exceptions: Iterable[FailureKind] = (Exception,),
    name: Optional[str] = None,
    runner: Optional[RepetitionRunner] = None,
) -> Callable[[Callable[..., T]], Callable[..., Optional[T]]]:
    """
    Decorator that repeats a callable while it fails with a whitelisted kind.

    Omitted ``repeats``, ``min_success`` and ``name`` come from settings.
    The policy is validated when the decorator is applied, so a bad
    configuration fails at import time rather than on first call.

    Coroutine functions are rejected with PreconditionViolation: their
    attempts would never be awaited.

    The wrapper returns the result of the last successful attempt and keeps
    the report of the latest run in ``wrapper.last_report``.
    """
    active_runner = runner or RepetitionRunner()
    cfg = active_runner.settings
    policy = RepetitionPolicy.build(
        repeats=cfg.DEFAULT_REPEATS if repeats is None else repeats,
        min_success=cfg.DEFAULT_MIN_SUCCESS if min_success is None else min_success,
        exceptions=exceptions,
        name=cfg.DEFAULT_NAME_PATTERN if name is None else name,
    )

    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        if inspect.iscoroutinefunction(func):
            raise PreconditionViolation(
                f"{func.__qualname__} is a coroutine function; repeat_if_exceptions only wraps "
                "synchronous callables"
            )

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            report = active_runner.run(
                lambda: func(*args, **kwargs),
                policy,
                display_name=func.__qualname__,
            )
            wrapper.last_report = report  # type: ignore[attr-defined]
            return report.last_result

        wrapper.last_report = None  # type: ignore[attr-defined]
        wrapper.policy = policy  # type: ignore[attr-defined]
        return wrapper

    return decorator
