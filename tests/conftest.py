"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any, Callable

import pytest

from flaky_repeat.config import Settings
from flaky_repeat.runner import RepetitionRunner


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.DEFAULT_REPEATS = 5
    """
    return Settings(
        APP_NAME="flaky-repeat (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        DEFAULT_REPEATS=1,
        DEFAULT_MIN_SUCCESS=1,
        CONFIGURE_LOGGING=False,  # Leave logging to the host in tests
        METRICS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def runner(test_settings: Settings) -> RepetitionRunner:
    """Runner bound to test settings."""
    return RepetitionRunner(test_settings)


@pytest.fixture
def scripted_operation() -> Callable[[list[Any]], Callable[[], Any]]:
    """Factory fixture building an operation that follows a script.

    Each call consumes the next script entry: exception instances are
    raised, anything else is returned. ``operation.calls`` counts calls.

    Usage:
        def test_something(scripted_operation):
            op = scripted_operation([Flaky("1"), "ok"])
    """

    def _create(script: list[Any]) -> Callable[[], Any]:
        steps = iter(script)

        def operation() -> Any:
            operation.calls += 1  # type: ignore[attr-defined]
            step = next(steps)
            if isinstance(step, BaseException):
                raise step
            return step

        operation.calls = 0  # type: ignore[attr-defined]
        return operation

    return _create
