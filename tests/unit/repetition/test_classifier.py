"""Unit tests for failure classification."""

from flaky_repeat.models.enums import FailureVerdict
from flaky_repeat.repetition.classifier import classify, matches_whitelist, with_abort_marker
from flaky_repeat.repetition.exceptions import (
    AttemptAborted,
    AttemptsExhausted,
    PreconditionViolation,
    ProtocolViolation,
)


class Flaky(Exception):
    pass


class FlakyTimeout(Flaky):
    pass


class Broken(Exception):
    pass


class TestClassify:
    """Tolerable/fatal decision."""

    def test_exact_kind_is_tolerable(self):
        assert classify(Flaky("boom"), [Flaky]) is FailureVerdict.TOLERABLE

    def test_subclass_is_tolerable(self):
        assert classify(FlakyTimeout("slow"), [Flaky]) is FailureVerdict.TOLERABLE

    def test_superclass_is_not_tolerable(self):
        """Whitelisting a subclass does not tolerate its parent."""
        assert classify(Flaky("boom"), [FlakyTimeout]) is FailureVerdict.FATAL

    def test_unlisted_kind_is_fatal(self):
        assert classify(Broken("nope"), [Flaky]) is FailureVerdict.FATAL

    def test_empty_whitelist_is_fatal(self):
        assert classify(Flaky("boom"), []) is FailureVerdict.FATAL

    def test_any_matching_entry_is_enough(self):
        assert classify(Broken("x"), [KeyError, Broken]) is FailureVerdict.TOLERABLE

    def test_abort_signal_is_always_tolerable(self):
        assert classify(AttemptAborted("retry", 1, 3), []) is FailureVerdict.TOLERABLE

    def test_repetition_errors_are_never_tolerable(self):
        """Internal errors stay fatal even when Exception is whitelisted."""
        for error in (
            PreconditionViolation("bad"),
            ProtocolViolation("misuse"),
            AttemptsExhausted("done"),
        ):
            assert classify(error, [Exception]) is FailureVerdict.FATAL

    def test_builtin_hierarchy_is_respected(self):
        assert classify(ConnectionResetError(), [OSError]) is FailureVerdict.TOLERABLE
        assert classify(ValueError(), [OSError]) is FailureVerdict.FATAL


class TestWhitelistHelpers:
    """Whitelist helpers."""

    def test_abort_marker_appended_once(self):
        kinds = with_abort_marker([Flaky])
        assert kinds == (Flaky, AttemptAborted)
        assert with_abort_marker(kinds) == kinds

    def test_matches_whitelist(self):
        assert matches_whitelist(FlakyTimeout(), (Flaky,))
        assert not matches_whitelist(Broken(), (Flaky,))
