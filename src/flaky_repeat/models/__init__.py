"""
Data models for flaky-repeat.

Includes:
- Enums (AttemptOutcome, FailureVerdict, RunVerdict)
- AttemptContext (frozen pydantic model handed to the host per attempt)
- RunReport (frozen dataclass summarising a finished run)
"""

from flaky_repeat.models.enums import AttemptOutcome, FailureVerdict, RunVerdict
from flaky_repeat.models.context import AttemptContext, RunReport

__all__ = [
    # Enums
    "AttemptOutcome",
    "FailureVerdict",
    "RunVerdict",
    # Records
    "AttemptContext",
    "RunReport",
]
