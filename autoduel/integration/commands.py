"""Command parsing for incoming statuses."""

import html
import re
import unicodedata
from typing import Any, Optional, Union

from autoduel.config import DEFAULT_BOT_ACCT, DEFAULT_MAX_INPUT_LENGTH
from autoduel.integration.catalog import normalize_acct
from autoduel.models.actions import ActionIntent, CombatAction, Intent, StartIntent, UnknownIntent


class CommandParser:
    """Turns a status (HTML content + mentions) into a battle intent."""

    START_KEYWORDS = ["전투"]
    START_PATTERN = re.compile(r"\bbattle\b", re.IGNORECASE)

    # Checked in order; first match wins
    ACTION_KEYWORDS = [
        ("공격", CombatAction.ATTACK),
        ("방어", CombatAction.DEFEND),
        ("회피", CombatAction.EVADE),
    ]
    ACTION_PATTERNS = [
        (re.compile(rf"\b{action.value}\b", re.IGNORECASE), action) for action in CombatAction
    ]

    MENTION_PATTERN = re.compile(r"@\S+")

    def __init__(self, bot_acct: str = DEFAULT_BOT_ACCT, max_length: int = DEFAULT_MAX_INPUT_LENGTH) -> None:
        """Initialize parser with the bot's own account and an input length limit."""
        self.bot_acct = normalize_acct(bot_acct)
        self.max_length = max_length

    def normalize_text(self, html_or_text: Optional[str]) -> str:
        """
        Reduce status HTML to plain text:
        1. Line breaks and paragraph ends become newlines
        2. Remaining tags are dropped and entities decoded
        3. Unicode normalized, control characters removed
        4. Truncated to max length and stripped
        """
        if not html_or_text:
            return ""
        text = str(html_or_text)
        text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
        text = re.sub(r"</p>", "\n", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", "", text)
        text = html.unescape(text).replace("\xa0", " ")
        text = unicodedata.normalize("NFKC", text)
        text = re.sub(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]", "", text)
        if len(text) > self.max_length:
            text = text[: self.max_length]
        return text.strip()

    def extract_mentioned_accts(self, status: dict[str, Any]) -> list[str]:
        """Mentioned account handles in order, without leading '@'."""
        mentions = (status or {}).get("mentions") or []
        accts = [normalize_acct(str(m.get("acct") or "")) for m in mentions if isinstance(m, dict)]
        return [acct for acct in accts if acct]

    def parse_text(self, text: str) -> Optional[Union[CombatAction, str]]:
        """
        Classify already-normalized text.

        Returns:
            "start", a CombatAction, or None
        """
        # Handles may contain keywords ("attacker@...")
        text = self.MENTION_PATTERN.sub(" ", text)
        if not text.strip():
            return None
        if any(keyword in text for keyword in self.START_KEYWORDS) or self.START_PATTERN.search(text):
            return "start"
        for keyword, action in self.ACTION_KEYWORDS:
            if keyword in text:
                return action
        for pattern, action in self.ACTION_PATTERNS:
            if pattern.search(text):
                return action
        return None

    def parse(self, status: dict[str, Any]) -> Intent:
        """Parse a status dict into a Start, Action or Unknown intent."""
        status = status or {}
        account = status.get("account") or {}
        actor_id = normalize_acct(account.get("acct"))
        content = status.get("content") or status.get("text") or ""
        kind = self.parse_text(self.normalize_text(content))

        if not actor_id or kind is None:
            return UnknownIntent(actor_id=actor_id or None)
        if kind == "start":
            opponents = [acct for acct in self.extract_mentioned_accts(status) if acct != self.bot_acct]
            return StartIntent(actor_id=actor_id, opponent_ids=opponents)
        return ActionIntent(actor_id=actor_id, action=kind)
