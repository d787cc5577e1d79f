"""Result values returned by the battle manager."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autoduel.models.battle import BattleStatus, RoundReport


class ErrorKind(str, Enum):
    """Error family of a rejected operation."""

    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    NOT_FOUND = "not_found"


class ResultKind(str, Enum):
    """What a manager operation did."""

    STARTED = "started"
    WAITING = "waiting"
    RESOLVED = "resolved"
    FINISHED = "finished"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    """Specific reason an operation was rejected."""

    INVALID_ACTION = "invalid_action"
    NOT_PARTICIPANT = "not_participant"
    SELF_BATTLE = "self_battle"
    BATTLE_FINISHED = "battle_finished"
    ALREADY_IN_PROGRESS = "already_in_progress"
    ALREADY_IN_OTHER_BATTLE = "already_in_other_battle"
    NOT_IN_BATTLE = "not_in_battle"
    UNKNOWN_CHARACTER = "unknown_character"

    def describe(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    RejectReason.INVALID_ACTION: "invalid action",
    RejectReason.NOT_PARTICIPANT: "not a participant",
    RejectReason.SELF_BATTLE: "cannot battle yourself",
    RejectReason.BATTLE_FINISHED: "battle already finished",
    RejectReason.ALREADY_IN_PROGRESS: "battle already in progress",
    RejectReason.ALREADY_IN_OTHER_BATTLE: "a participant is already in another battle",
    RejectReason.NOT_IN_BATTLE: "not in a battle",
    RejectReason.UNKNOWN_CHARACTER: "unknown character",
}

WAITING_MESSAGE = "waiting for opponent"
STARTED_MESSAGE = "battle started"
RESOLVED_MESSAGE = "round resolved"
FINISHED_MESSAGE = "battle finished"


class BattleResult(BaseModel):
    """Outcome of a manager operation; pure data, no formatting."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    kind: ResultKind
    message: str
    finished: bool = False
    winner_id: Optional[str] = None
    error: Optional[ErrorKind] = None
    reason: Optional[RejectReason] = None
    battle_key: Optional[str] = None
    status: Optional[BattleStatus] = Field(default=None, description="Battle state after the operation")
    report: Optional[RoundReport] = Field(default=None, description="Set when the operation resolved a round")

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        reason: RejectReason,
        message: Optional[str] = None,
        battle_key: Optional[str] = None,
    ) -> "BattleResult":
        """Build a rejection result."""
        return cls(
            ok=False,
            kind=ResultKind.REJECTED,
            message=message or reason.describe(),
            error=error,
            reason=reason,
            battle_key=battle_key,
        )
