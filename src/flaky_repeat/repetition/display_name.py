"""
Per-attempt display names.

Patterns use literal placeholder tokens. Substitution is plain text
replacement, so braces that are not one of the tokens below pass through
unchanged.

Placeholders:
    {display_name}: base display name of the operation
    {current_repetition}: 1-based attempt index
    {total_repetitions}: attempt budget
"""

from typing import Optional

DISPLAY_NAME_PLACEHOLDER = "{display_name}"
CURRENT_REPETITION_PLACEHOLDER = "{current_repetition}"
TOTAL_REPETITIONS_PLACEHOLDER = "{total_repetitions}"

SHORT_DISPLAY_NAME = (
    f"Repetition if test failed {CURRENT_REPETITION_PLACEHOLDER}/{TOTAL_REPETITIONS_PLACEHOLDER}"
)
LONG_DISPLAY_NAME = f"{DISPLAY_NAME_PLACEHOLDER} :: {SHORT_DISPLAY_NAME}"


def format_display_name(
    pattern: Optional[str],
    display_name: str,
    current_repetition: int,
    total_repetitions: int,
) -> str:
    """
    Render a display name for one attempt.

    A missing or blank pattern falls back to ``display_name`` unchanged.
    """
    if pattern is None or not pattern.strip():
        return display_name

    return (
        pattern.strip()
        .replace(CURRENT_REPETITION_PLACEHOLDER, str(current_repetition))
        .replace(TOTAL_REPETITIONS_PLACEHOLDER, str(total_repetitions))
        .replace(DISPLAY_NAME_PLACEHOLDER, display_name)
    )


class DisplayNameFormatter:
    """Binds a pattern and base display name for the duration of a run."""

    def __init__(self, pattern: Optional[str], display_name: str):
        self.pattern = pattern
        self.display_name = display_name

    def format(self, current_repetition: int, total_repetitions: int) -> str:
        return format_display_name(
            self.pattern, self.display_name, current_repetition, total_repetitions
        )
