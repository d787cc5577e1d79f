"""Optional per-round deadline with a fallback action."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autoduel.config import DEFAULT_FALLBACK_ACTION, DEFAULT_ROUND_TIMEOUT
from autoduel.models.actions import CombatAction


class RoundDeadline(BaseModel):
    """How long a declared action waits for the opponent before a fallback is filled in."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(gt=0, description="Seconds a round may wait for the missing action")
    fallback_action: CombatAction = Field(
        default=CombatAction(DEFAULT_FALLBACK_ACTION),
        description="Action declared on behalf of the participant who did not answer",
    )

    @classmethod
    def from_config(cls) -> Optional["RoundDeadline"]:
        """Deadline from environment defaults; None when disabled."""
        if DEFAULT_ROUND_TIMEOUT <= 0:
            return None
        return cls(timeout_seconds=DEFAULT_ROUND_TIMEOUT)

    def is_overdue(self, started_at: float, now: float) -> bool:
        return now - started_at >= self.timeout_seconds
