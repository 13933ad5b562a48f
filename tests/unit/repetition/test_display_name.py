"""Unit tests for display-name formatting."""

import pytest

from flaky_repeat.repetition.display_name import (
    LONG_DISPLAY_NAME,
    SHORT_DISPLAY_NAME,
    DisplayNameFormatter,
    format_display_name,
)


class TestFormatDisplayName:
    """Placeholder substitution and fallbacks."""

    def test_substitutes_current_and_total(self):
        result = format_display_name(SHORT_DISPLAY_NAME, "test_login", 2, 5)
        assert result == "Repetition if test failed 2/5"

    def test_long_pattern_includes_base_name(self):
        result = format_display_name(LONG_DISPLAY_NAME, "test_login", 2, 5)
        assert result == "test_login :: Repetition if test failed 2/5"

    @pytest.mark.parametrize("pattern", [None, "", "   ", "\t\n"])
    def test_blank_pattern_falls_back_to_base_name(self, pattern):
        assert format_display_name(pattern, "test_login", 3, 4) == "test_login"

    def test_unrecognized_placeholders_pass_through(self):
        result = format_display_name("{unknown} #{current_repetition} {}", "n", 1, 2)
        assert result == "{unknown} #1 {}"

    def test_pattern_without_placeholders_is_literal(self):
        assert format_display_name("static label", "n", 1, 2) == "static label"

    def test_pattern_is_stripped(self):
        assert format_display_name("  run {current_repetition}  ", "n", 1, 2) == "run 1"

    def test_base_name_is_not_reinterpreted(self):
        """Placeholder-looking text inside the base name stays literal."""
        result = format_display_name("{display_name}", "name {total_repetitions}", 1, 9)
        assert result == "name {total_repetitions}"


def test_formatter_binds_pattern_and_name():
    formatter = DisplayNameFormatter("{display_name} [{current_repetition} of {total_repetitions}]", "op")
    assert formatter.format(1, 3) == "op [1 of 3]"
    assert formatter.format(3, 3) == "op [3 of 3]"
