"""Random draws for combat mechanics."""

import logging
import random
from typing import Optional, Protocol

logger = logging.getLogger(__name__.split(".")[-1])


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1) (``random.Random`` does)."""

    def random(self) -> float: ...


class DiceRoller:
    """Handles every random draw a battle makes, from one injected source."""

    def __init__(self, source: Optional[RandomSource] = None, seed: Optional[int] = None) -> None:
        """
        Initialize dice roller.

        Args:
            source: Random source to draw from; takes precedence over seed
            seed: Seed for a fresh ``random.Random`` when no source is given
        """
        self._source = source if source is not None else random.Random(seed)

    def roll(self) -> float:
        """Draw a uniform float in [0, 1)."""
        value = self._source.random()
        logger.debug(f"roll -> {value:.4f}")
        return value

    def chance(self, probability: float) -> bool:
        """Succeed iff a fresh draw is below the probability."""
        return self.roll() < probability

    def coin_flip(self) -> bool:
        """Fair coin; True means heads."""
        return self.chance(0.5)
