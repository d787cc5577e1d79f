"""Character catalog: identity -> static battle stats."""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import TypeAdapter

from autoduel.errors import NotFoundError
from autoduel.models.stats import CharacterStats

logger = logging.getLogger(__name__.split(".")[-1])

DEFAULT_ROSTER = [
    CharacterStats(
        id="sawa_2@mastodon.social", base_name="사와", max_hp=100, atk=20, defense=10, agi=15, speed=18, crit=0.10
    ),
    CharacterStats(
        id="sawa_@mastodon.social", base_name="사와 2", max_hp=90, atk=22, defense=9, agi=28, speed=20, crit=0.12
    ),
]

_ROSTER_ADAPTER = TypeAdapter(list[CharacterStats])


def normalize_acct(acct: Optional[str]) -> str:
    """Strip whitespace and a leading '@' from an account handle."""
    acct = (acct or "").strip()
    return acct[1:] if acct.startswith("@") else acct


class CharacterCatalog:
    """Registered characters; only these accounts can battle."""

    def __init__(self, characters: Optional[Iterable[CharacterStats]] = None) -> None:
        """
        Initialize catalog.

        Args:
            characters: Templates to register; defaults to the built-in roster
        """
        roster = DEFAULT_ROSTER if characters is None else characters
        self._characters: dict[str, CharacterStats] = {c.id: c for c in roster}

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CharacterCatalog":
        """
        Load a catalog from a JSON list of character objects.

        Raises:
            OSError: File cannot be read
            pydantic.ValidationError: Malformed character data
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        characters = _ROSTER_ADAPTER.validate_python(data)
        logger.info(f"Loaded {len(characters)} characters from {path}")
        return cls(characters)

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, str) and normalize_acct(identity) in self._characters

    def __len__(self) -> int:
        return len(self._characters)

    def resolve(self, identity: str) -> Optional[CharacterStats]:
        """Template for the identity, or None if unregistered."""
        return self._characters.get(normalize_acct(identity))

    def require(self, *identities: str) -> list[CharacterStats]:
        """
        Resolve every identity.

        Raises:
            NotFoundError: Listing every identity that is not registered
        """
        missing = [identity for identity in identities if self.resolve(identity) is None]
        if missing:
            logger.warning(f"Unknown characters requested: {missing}")
            raise NotFoundError(missing)
        return [self.resolve(identity) for identity in identities]

    def build_combatant_stats(self, identity: str, display_name: Optional[str] = None) -> Optional[CharacterStats]:
        """
        Copy of the template named for this battle.

        Args:
            identity: Account handle
            display_name: Current display name; blank falls back to the template name

        Returns:
            CharacterStats copy, or None if unregistered
        """
        base = self.resolve(identity)
        if base is None:
            return None
        name = (display_name or "").strip()
        return base.model_copy(update={"base_name": name}) if name else base
