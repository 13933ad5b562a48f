"""Unit tests for ExecutionHistory."""

import threading

import pytest

from flaky_repeat.models.enums import AttemptOutcome
from flaky_repeat.repetition.history import ExecutionHistory

S = AttemptOutcome.SUCCESS
F = AttemptOutcome.TOLERABLE_FAILURE


def test_empty_history():
    history = ExecutionHistory()
    assert len(history) == 0
    assert history.count_successes() == 0
    assert history.count_failures() == 0
    assert history.any_failure_recorded() is False


def test_counts_follow_appends():
    history = ExecutionHistory()
    for outcome in (F, S, F, S, S):
        history.append(outcome)

    assert history.count_successes() == 3
    assert history.count_failures() == 2
    assert history.any_failure_recorded() is True
    assert list(history) == [F, S, F, S, S]


def test_success_only_history_has_no_failure():
    history = ExecutionHistory()
    history.append(S)
    history.append(S)
    assert history.any_failure_recorded() is False


def test_snapshot_is_immutable_copy():
    history = ExecutionHistory()
    history.append(S)
    snapshot = history.snapshot()
    history.append(F)

    assert snapshot == (S,)
    assert history.snapshot() == (S, F)


def test_rejects_non_outcome_values():
    history = ExecutionHistory()
    with pytest.raises(TypeError):
        history.append("success")  # type: ignore[arg-type]
    assert len(history) == 0


def test_concurrent_appends_are_all_recorded():
    """Appends from several threads never get lost or torn."""
    history = ExecutionHistory()
    per_thread = 500
    barrier = threading.Barrier(4)

    def writer(outcome: AttemptOutcome) -> None:
        barrier.wait()
        for _ in range(per_thread):
            history.append(outcome)

    observed_lengths: list[int] = []

    def reader() -> None:
        barrier.wait()
        for _ in range(per_thread):
            observed_lengths.append(len(history.snapshot()))

    threads = [
        threading.Thread(target=writer, args=(S,)),
        threading.Thread(target=writer, args=(F,)),
        threading.Thread(target=writer, args=(S,)),
        threading.Thread(target=reader),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(history) == 3 * per_thread
    assert history.count_successes() == 2 * per_thread
    assert history.count_failures() == per_thread
    # Readers only ever see a growing prefix
    assert observed_lengths == sorted(observed_lengths)
