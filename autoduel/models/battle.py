"""Battle outcome, round report and status snapshot models."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from autoduel.models.actions import CombatAction


class InProgress(BaseModel):
    """Battle is still being fought."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["in_progress"] = "in_progress"

    @property
    def finished(self) -> bool:
        return False


class Draw(BaseModel):
    """Both combatants fell in the same round."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["draw"] = "draw"

    @property
    def finished(self) -> bool:
        return True


class Decided(BaseModel):
    """Exactly one combatant is left standing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["decided"] = "decided"
    winner_id: str

    @property
    def finished(self) -> bool:
        return True


BattleOutcome = Annotated[Union[InProgress, Draw, Decided], Field(discriminator="kind")]


class EventKind(str, Enum):
    """What happened when one side's declared action was processed."""

    PREPARE_DEFEND = "prepare_defend"
    PREPARE_EVADE = "prepare_evade"
    EVADED = "evaded"
    EVADE_FAILED = "evade_failed"
    MISSED = "missed"
    HIT = "hit"
    IDLE = "idle"


class RoundEvent(BaseModel):
    """Single line of a round's resolution log."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    actor_id: str = Field(description="Side whose action produced the event")
    target_id: Optional[str] = Field(default=None, description="Opposing side, for attack events")
    damage: int = Field(default=0, ge=0)
    crit: bool = False
    defended: Optional[bool] = Field(
        default=None, description="Defend roll result; None when the target did not defend or a crit bypassed it"
    )


class CombatantStatus(BaseModel):
    """Read-only view of one combatant."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    ready: bool = Field(default=False, description="Whether an action is pending for the current round")


class RoundReport(BaseModel):
    """Result of resolving one round."""

    model_config = ConfigDict(frozen=True)

    round: int = Field(ge=1, description="Round that was resolved")
    actions: dict[str, CombatAction] = Field(description="Declared action per participant")
    events: list[RoundEvent] = Field(default_factory=list)
    combatants: list[CombatantStatus] = Field(description="State after the round (A first)")
    outcome: BattleOutcome
    timed_out: list[str] = Field(
        default_factory=list, description="Participants whose action was filled in by the round deadline"
    )


class BattleStatus(BaseModel):
    """Snapshot of a battle between rounds."""

    model_config = ConfigDict(frozen=True)

    key: str
    round: int = Field(ge=1)
    turn_order: tuple[str, str]
    combatants: list[CombatantStatus]
    outcome: BattleOutcome

    @property
    def finished(self) -> bool:
        return self.outcome.finished

    def combatant(self, combatant_id: str) -> Optional[CombatantStatus]:
        return next((c for c in self.combatants if c.id == combatant_id), None)
