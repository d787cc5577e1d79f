"""Battle engine package."""

from autoduel.engine.battle import Battle, make_battle_key
from autoduel.engine.battle_manager import BattleManager
from autoduel.engine.combat_math import CombatMath, DamageRoll
from autoduel.engine.deadline import RoundDeadline
from autoduel.engine.dice import DiceRoller, RandomSource

__all__ = [
    "Battle",
    "BattleManager",
    "CombatMath",
    "DamageRoll",
    "DiceRoller",
    "RandomSource",
    "RoundDeadline",
    "make_battle_key",
]
