"""Character template and in-battle combatant models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CharacterStats(BaseModel):
    """Static character template as registered in the catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)  # Immutable model

    id: str = Field(min_length=1, description="Unique identity (account handle)")
    base_name: str = Field(description="Display name used when no other name is known")
    max_hp: int = Field(ge=1, description="Maximum health points")
    atk: int = Field(ge=0, description="Attack power")
    defense: int = Field(ge=0, alias="def", description="Defense (damage reduction on a successful defend)")
    agi: int = Field(ge=0, description="Agility (hit, evade)")
    speed: int = Field(ge=0, description="Speed (turn order)")
    crit: float = Field(default=0.0, ge=0.0, le=1.0, description="Critical hit probability")


class Combatant(BaseModel):
    """Live, mutable stat snapshot of one participant in a battle."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(description="Participant identity")
    name: str = Field(description="Display name for this battle")
    max_hp: int = Field(ge=1)
    hp: int = Field(ge=0)
    atk: int = Field(ge=0)
    defense: int = Field(ge=0)
    agi: int = Field(ge=0)
    speed: int = Field(ge=0)
    crit: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def hp_within_max(self) -> "Combatant":
        """Current hp can never exceed maximum hp."""
        if self.hp > self.max_hp:
            raise ValueError(f"hp {self.hp} exceeds max_hp {self.max_hp}")
        return self

    @classmethod
    def from_stats(cls, stats: CharacterStats) -> "Combatant":
        """Snapshot a template at full health."""
        return cls(
            id=stats.id,
            name=stats.base_name,
            max_hp=stats.max_hp,
            hp=stats.max_hp,
            atk=stats.atk,
            defense=stats.defense,
            agi=stats.agi,
            speed=stats.speed,
            crit=stats.crit,
        )

    @property
    def is_down(self) -> bool:
        return self.hp <= 0

    def take_damage(self, amount: int) -> int:
        """
        Subtract damage from current hp, clamping at zero.

        Returns:
            Damage actually applied (never negative)
        """
        amount = max(0, int(amount))
        self.hp = max(0, self.hp - amount)
        return amount
