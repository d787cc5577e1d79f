"""Integration layer: catalog, command parsing, reply formatting, orchestration."""

from autoduel.integration.catalog import CharacterCatalog, normalize_acct
from autoduel.integration.commands import CommandParser
from autoduel.integration.formatter import ReplyFormatter, hp_bar
from autoduel.integration.orchestrator import BattleOrchestrator, OrchestratorConfig

__all__ = [
    "BattleOrchestrator",
    "CharacterCatalog",
    "CommandParser",
    "OrchestratorConfig",
    "ReplyFormatter",
    "hp_bar",
    "normalize_acct",
]
