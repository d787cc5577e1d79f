"""Orchestrator connecting incoming statuses to the battle manager."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from autoduel.config import DEFAULT_BOT_ACCT, DEFAULT_HP_BAR_WIDTH, DEFAULT_MAX_INPUT_LENGTH
from autoduel.engine.battle_manager import BattleManager
from autoduel.errors import NotFoundError
from autoduel.integration.catalog import CharacterCatalog, normalize_acct
from autoduel.integration.commands import CommandParser
from autoduel.integration.formatter import ReplyFormatter
from autoduel.models.actions import ActionIntent, StartIntent
from autoduel.models.results import BattleResult

logger = logging.getLogger(__name__.split(".")[-1])


class OrchestratorConfig(BaseModel):
    """Integration layer configuration."""

    bot_acct: str = Field(default=DEFAULT_BOT_ACCT, description="The bot's own account handle")
    max_input_length: int = Field(default=DEFAULT_MAX_INPUT_LENGTH, ge=1, description="Maximum status text length")
    hp_bar_width: int = Field(default=DEFAULT_HP_BAR_WIDTH, ge=1, le=50, description="Characters in an hp bar")


class BattleOrchestrator:
    """Handles one status at a time and produces the reply text, if any."""

    def __init__(
        self,
        manager: BattleManager,
        catalog: CharacterCatalog,
        config: Optional[OrchestratorConfig] = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            manager: Battle registry to drive
            catalog: Registered characters
            config: Optional integration settings
        """
        self._config = config or OrchestratorConfig()
        self._manager = manager
        self._catalog = catalog
        self._parser = CommandParser(bot_acct=self._config.bot_acct, max_length=self._config.max_input_length)
        self._formatter = ReplyFormatter(bar_width=self._config.hp_bar_width)

    @property
    def manager(self) -> BattleManager:
        return self._manager

    @property
    def formatter(self) -> ReplyFormatter:
        return self._formatter

    def handle_incoming_status(self, status: dict[str, Any]) -> Optional[str]:
        """
        Process a status that mentions the bot.

        Args:
            status: Status dict with ``account``, ``content``/``text`` and ``mentions``

        Returns:
            Reply text, or None when nothing should be posted
        """
        account = (status or {}).get("account") or {}
        actor_acct = normalize_acct(account.get("acct"))
        if not actor_acct or actor_acct == self._parser.bot_acct:
            return None

        intent = self._parser.parse(status)
        logger.debug(f"Intent from {actor_acct}: {intent.kind}")

        if isinstance(intent, StartIntent):
            return self._handle_start(intent)
        if isinstance(intent, ActionIntent):
            return self._handle_action(intent)
        return None

    def _handle_start(self, intent: StartIntent) -> str:
        if len(intent.opponent_ids) < 2:
            return 'To start a battle, mention two participants: "@bot battle @A @B".'

        acct_a, acct_b = intent.opponent_ids[:2]
        if acct_a == acct_b:
            return "You can't battle yourself."

        try:
            self._catalog.require(acct_a, acct_b)
        except NotFoundError as e:
            return f"Unregistered participants: {', '.join(e.identities)}\n(Only registered characters can battle.)"

        # Mentions carry no display name; the template name is shown
        stats_a = self._catalog.build_combatant_stats(acct_a)
        stats_b = self._catalog.build_combatant_stats(acct_b)
        result = self._manager.start_battle(stats_a, stats_b)
        return self._reply(result)

    def _handle_action(self, intent: ActionIntent) -> str:
        if intent.actor_id not in self._catalog:
            logger.warning(f"Action from unregistered account {intent.actor_id}")
            return "You are not registered for battles. (Only registered characters can battle.)"
        result = self._manager.submit_action(intent.actor_id, intent.action)
        return self._reply(result)

    def _reply(self, result: BattleResult) -> str:
        return self._formatter.format_result(result)
