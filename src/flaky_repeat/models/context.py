"""
Per-attempt and per-run data models.

AttemptContext is handed to the host for every produced attempt. RunReport
summarises a finished run driven by the reference runner.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from flaky_repeat.models.enums import AttemptOutcome


class AttemptContext(BaseModel):
    """
    Everything the host needs to execute one attempt.

    Snapshot taken when the attempt is produced; later history changes are
    not reflected in an already produced context.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, description="1-based attempt index")
    total_attempts: int = Field(..., ge=1, description="Attempt budget of the run")
    successes_so_far: int = Field(..., ge=0, description="Successful attempts recorded before this one")
    min_successes: int = Field(..., ge=1, description="Successes required for an overall pass")
    failure_appeared: bool = Field(
        ...,
        description="Whether a tolerable failure was recorded before this attempt"
    )
    display_name: str = Field(..., description="Formatted per-attempt label")

    @property
    def is_first(self) -> bool:
        return self.index == 1

    @property
    def is_last(self) -> bool:
        return self.index == self.total_attempts


@dataclass(frozen=True)
class RunReport:
    """
    Summary of a run that finished without a fatal failure.

    Attributes:
        total_attempts: Number of attempts actually executed
        successes: Number of successful attempts
        failures: Number of tolerable failures absorbed
        outcomes: Recorded outcome per attempt, in order
        display_names: Display name used per attempt, in order
        total_latency_ms: Wall time from first attempt to end of run (ms)
        last_result: Return value of the last successful attempt
    """

    total_attempts: int
    successes: int
    failures: int
    outcomes: tuple[AttemptOutcome, ...] = field(default_factory=tuple)
    display_names: tuple[str, ...] = field(default_factory=tuple)
    total_latency_ms: int = 0
    last_result: Optional[Any] = None

    def __post_init__(self) -> None:
        """Validate report invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.successes + self.failures != self.total_attempts:
            raise ValueError("successes + failures must equal total_attempts")

        if len(self.outcomes) != self.total_attempts:
            raise ValueError("outcomes must hold one entry per attempt")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")
