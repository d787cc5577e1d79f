"""Combat action and command intent models."""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CombatAction(str, Enum):
    """Actions a participant can declare for a round."""

    ATTACK = "attack"
    DEFEND = "defend"
    EVADE = "evade"

    @classmethod
    def parse(cls, value: Any) -> Optional["CombatAction"]:
        """Coerce an enum member or a case-insensitive name/value; None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for action in cls:
            if action.value == key:
                return action
        return None


class StartIntent(BaseModel):
    """Request to start a battle between two mentioned accounts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["start"] = "start"
    actor_id: str = Field(description="Account that issued the command")
    opponent_ids: list[str] = Field(default_factory=list, description="Mentioned accounts, bot excluded")


class ActionIntent(BaseModel):
    """Declaration of a combat action by the issuing account."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["action"] = "action"
    actor_id: str = Field(description="Account that issued the command")
    action: CombatAction = Field(description="Declared action")


class UnknownIntent(BaseModel):
    """Anything that is not a recognized command."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"
    actor_id: Optional[str] = None


Intent = Annotated[Union[StartIntent, ActionIntent, UnknownIntent], Field(discriminator="kind")]
