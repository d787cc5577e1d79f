"""Pytest configuration and fixtures."""

import pytest

from autoduel.engine.battle import Battle
from autoduel.engine.battle_manager import BattleManager
from autoduel.engine.dice import DiceRoller
from autoduel.models.stats import CharacterStats


class ScriptedRandom:
    """Random source that replays a fixed sequence and fails when it runs out."""

    def __init__(self, values=()):
        self.values = list(values)
        self.draws = 0

    def push(self, *values):
        self.values.extend(values)

    def random(self):
        if not self.values:
            raise AssertionError(f"Unexpected random draw #{self.draws + 1}")
        self.draws += 1
        return self.values.pop(0)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def scripted():
    """Empty scripted random source; push draws per test."""
    return ScriptedRandom()


@pytest.fixture
def dice(scripted):
    """DiceRoller over the scripted source."""
    return DiceRoller(source=scripted)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sawa():
    """Slower character (speed 18)."""
    return CharacterStats(
        id="sawa_2@mastodon.social", base_name="Sawa", max_hp=100, atk=20, defense=10, agi=15, speed=18, crit=0.10
    )


@pytest.fixture
def sawa2():
    """Faster character (speed 20)."""
    return CharacterStats(
        id="sawa_@mastodon.social", base_name="Sawa 2", max_hp=90, atk=22, defense=9, agi=28, speed=20, crit=0.12
    )


@pytest.fixture
def third():
    """Bystander used for exclusivity checks."""
    return CharacterStats(id="mori@example.social", base_name="Mori", max_hp=80, atk=18, defense=12, agi=20, speed=15)


@pytest.fixture
def glass_a():
    """Fragile hard hitter, slow."""
    return CharacterStats(id="glass_a@x", base_name="Glass A", max_hp=10, atk=50, defense=0, agi=20, speed=5)


@pytest.fixture
def glass_b():
    """Fragile hard hitter, fast."""
    return CharacterStats(id="glass_b@x", base_name="Glass B", max_hp=10, atk=50, defense=0, agi=20, speed=10)


@pytest.fixture
def battle(sawa, sawa2, dice):
    """Battle with turn order [sawa2, sawa] and no draws consumed."""
    return Battle(sawa, sawa2, dice=dice)


@pytest.fixture
def manager(dice):
    return BattleManager(dice=dice)
