"""Data models module for AutoDuel."""

# Stats
from autoduel.models.stats import CharacterStats, Combatant

# Actions and Intents
from autoduel.models.actions import (
    ActionIntent,
    CombatAction,
    Intent,
    StartIntent,
    UnknownIntent,
)

# Battle
from autoduel.models.battle import (
    BattleOutcome,
    BattleStatus,
    CombatantStatus,
    Decided,
    Draw,
    EventKind,
    InProgress,
    RoundEvent,
    RoundReport,
)

# Results
from autoduel.models.results import BattleResult, ErrorKind, RejectReason, ResultKind

__all__ = [
    # Stats
    "CharacterStats",
    "Combatant",
    # Actions and Intents
    "CombatAction",
    "Intent",
    "StartIntent",
    "ActionIntent",
    "UnknownIntent",
    # Battle
    "BattleOutcome",
    "InProgress",
    "Draw",
    "Decided",
    "EventKind",
    "RoundEvent",
    "RoundReport",
    "CombatantStatus",
    "BattleStatus",
    # Results
    "BattleResult",
    "ErrorKind",
    "RejectReason",
    "ResultKind",
]
