"""Hit, evade, defend and damage calculations."""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autoduel.engine.dice import DiceRoller
from autoduel.models.actions import CombatAction
from autoduel.models.stats import Combatant

BASE_HIT_CHANCE = 0.80
HIT_PER_AGI_DIFF = 0.005
MIN_HIT_CHANCE = 0.10
MAX_HIT_CHANCE = 0.95

MIN_EVADE_CHANCE = 0.05
MAX_EVADE_CHANCE = 0.60

MIN_DEFEND_CHANCE = 0.05
MAX_DEFEND_CHANCE = 0.60

CRIT_MULTIPLIER = 1.5


def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


class DamageRoll(BaseModel):
    """Damage dealt by one landed attack."""

    model_config = ConfigDict(frozen=True)

    damage: int = Field(ge=0)
    crit: bool = False
    defended: Optional[bool] = None


class CombatMath:
    """Pure combat formulas; all randomness goes through the given DiceRoller."""

    @staticmethod
    def hit_chance(attacker: Combatant, defender: Combatant) -> float:
        """Chance that an attack connects, from the agility difference."""
        return clamp(
            MIN_HIT_CHANCE,
            MAX_HIT_CHANCE,
            BASE_HIT_CHANCE + HIT_PER_AGI_DIFF * (attacker.agi - defender.agi),
        )

    @staticmethod
    def evade_chance(defender: Combatant) -> float:
        return clamp(MIN_EVADE_CHANCE, MAX_EVADE_CHANCE, defender.agi / 100)

    @staticmethod
    def defend_chance(defender: Combatant) -> float:
        return clamp(MIN_DEFEND_CHANCE, MAX_DEFEND_CHANCE, defender.defense / 100)

    @staticmethod
    def roll_hit(attacker: Combatant, defender: Combatant, dice: DiceRoller) -> bool:
        return dice.chance(CombatMath.hit_chance(attacker, defender))

    @staticmethod
    def roll_evade(defender: Combatant, dice: DiceRoller) -> bool:
        return dice.chance(CombatMath.evade_chance(defender))

    @staticmethod
    def roll_defend(defender: Combatant, dice: DiceRoller) -> bool:
        return dice.chance(CombatMath.defend_chance(defender))

    @staticmethod
    def calc_damage(
        attacker: Combatant,
        defender: Combatant,
        defender_action: Optional[CombatAction],
        dice: DiceRoller,
    ) -> DamageRoll:
        """
        Compute damage for an attack that already hit.

        Priority is fixed: a crit returns immediately and ignores defend,
        then a successful defend reduces by defense, otherwise full attack.

        Args:
            attacker: Attacking combatant
            defender: Defending combatant
            defender_action: What the defender declared this round
            dice: Source of the crit and defend draws

        Returns:
            DamageRoll with non-negative damage
        """
        if dice.chance(attacker.crit):
            return DamageRoll(damage=max(0, math.floor(attacker.atk * CRIT_MULTIPLIER)), crit=True)

        if defender_action == CombatAction.DEFEND:
            if CombatMath.roll_defend(defender, dice):
                return DamageRoll(damage=max(0, attacker.atk - defender.defense), defended=True)
            return DamageRoll(damage=max(0, attacker.atk), defended=False)

        return DamageRoll(damage=max(0, attacker.atk))
