"""Registry of live battles with one-battle-per-participant exclusivity."""

import logging
import threading
import time
from typing import Any, Callable, Optional

from autoduel.engine.battle import Battle, make_battle_key
from autoduel.engine.deadline import RoundDeadline
from autoduel.engine.dice import DiceRoller
from autoduel.errors import BattleError, StateConflictError, ValidationError
from autoduel.models.battle import RoundReport
from autoduel.models.results import (
    FINISHED_MESSAGE,
    RESOLVED_MESSAGE,
    STARTED_MESSAGE,
    WAITING_MESSAGE,
    BattleResult,
    RejectReason,
    ResultKind,
)
from autoduel.models.stats import CharacterStats

logger = logging.getLogger(__name__.split(".")[-1])


class BattleManager:
    """
    Owns every live battle.

    The registry lock guards ``battles_by_key`` and ``active_battle_of``;
    rounds resolve under the individual battle's lock, never while the
    registry lock is held.
    """

    def __init__(
        self,
        dice: Optional[DiceRoller] = None,
        deadline: Optional[RoundDeadline] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize battle manager.

        Args:
            dice: Random draws shared by all battles created here
            deadline: Optional round deadline passed to every battle
            clock: Monotonic time source for deadlines
        """
        self._dice = dice or DiceRoller()
        self._deadline = deadline
        self._clock = clock
        self._registry_lock = threading.Lock()
        self.battles_by_key: dict[str, Battle] = {}
        self.active_battle_of: dict[str, str] = {}

    def find_battle(self, participant_id: str) -> Optional[Battle]:
        """Live battle the participant is engaged in, if any."""
        with self._registry_lock:
            key = self.active_battle_of.get(participant_id)
            return self.battles_by_key.get(key) if key else None

    def is_engaged(self, participant_id: str) -> bool:
        with self._registry_lock:
            return participant_id in self.active_battle_of

    def active_battles(self) -> list[Battle]:
        with self._registry_lock:
            return list(self.battles_by_key.values())

    def start_battle(self, stats_a: CharacterStats, stats_b: CharacterStats) -> BattleResult:
        """
        Start a battle between two resolved characters.

        Args:
            stats_a: First participant's template
            stats_b: Second participant's template

        Returns:
            BattleResult with the initial status, or the rejection
        """
        key = make_battle_key(stats_a.id, stats_b.id)
        try:
            with self._registry_lock:
                if stats_a.id == stats_b.id:
                    raise ValidationError(RejectReason.SELF_BATTLE)
                # Finished but not yet reclaimed by the resolving thread
                for participant_id in (stats_a.id, stats_b.id):
                    stale = self.battles_by_key.get(self.active_battle_of.get(participant_id, ""))
                    if stale is not None and stale.finished:
                        self._drop(stale)
                if key in self.battles_by_key:
                    raise StateConflictError(RejectReason.ALREADY_IN_PROGRESS)
                if stats_a.id in self.active_battle_of or stats_b.id in self.active_battle_of:
                    raise StateConflictError(RejectReason.ALREADY_IN_OTHER_BATTLE)

                battle = Battle(stats_a, stats_b, dice=self._dice, deadline=self._deadline, clock=self._clock)
                self.battles_by_key[key] = battle
                self.active_battle_of[stats_a.id] = key
                self.active_battle_of[stats_b.id] = key
        except BattleError as e:
            return self._reject(e, key)

        logger.info(f"Battle {key} started ({len(self.battles_by_key)} live)")
        return BattleResult(
            ok=True, kind=ResultKind.STARTED, message=STARTED_MESSAGE, battle_key=key, status=battle.status()
        )

    def submit_action(self, participant_id: str, action: Any) -> BattleResult:
        """
        Route a declared action to the participant's battle.

        Args:
            participant_id: Declaring identity
            action: CombatAction or its string value

        Returns:
            BattleResult: waiting, resolved round, finished battle, or rejection
        """
        battle = self.find_battle(participant_id)
        if battle is None:
            return self._reject(StateConflictError(RejectReason.NOT_IN_BATTLE))

        try:
            report = battle.submit_action(participant_id, action)
        except BattleError as e:
            return self._reject(e, battle.key)

        return self._build_result(battle, report)

    def expire_overdue(self, now: Optional[float] = None) -> list[BattleResult]:
        """
        Apply the round deadline to every live battle.

        Returns:
            Results for battles whose round was resolved by the deadline
        """
        if self._deadline is None:
            return []
        results = []
        for battle in self.active_battles():
            report = battle.apply_deadline(now)
            if report is not None:
                results.append(self._build_result(battle, report))
        return results

    def _build_result(self, battle: Battle, report: Optional[RoundReport]) -> BattleResult:
        if report is None:
            return BattleResult(
                ok=True, kind=ResultKind.WAITING, message=WAITING_MESSAGE, battle_key=battle.key, status=battle.status()
            )

        if battle.finished:
            self._reclaim(battle)
            kind, message = ResultKind.FINISHED, FINISHED_MESSAGE
        else:
            kind, message = ResultKind.RESOLVED, RESOLVED_MESSAGE
        return BattleResult(
            ok=True,
            kind=kind,
            message=message,
            finished=battle.finished,
            winner_id=battle.winner_id,
            battle_key=battle.key,
            status=battle.status(),
            report=report,
        )

    def _reclaim(self, battle: Battle) -> None:
        with self._registry_lock:
            self._drop(battle)

    def _drop(self, battle: Battle) -> None:
        """Remove a finished battle; caller holds the registry lock."""
        if self.battles_by_key.get(battle.key) is not battle:
            return
        del self.battles_by_key[battle.key]
        for participant_id in battle.participants:
            if self.active_battle_of.get(participant_id) == battle.key:
                del self.active_battle_of[participant_id]
        logger.info(f"Battle {battle.key} reclaimed ({len(self.battles_by_key)} live)")

    @staticmethod
    def _reject(error: BattleError, battle_key: Optional[str] = None) -> BattleResult:
        logger.info(f"Rejected: {error.message} [kind={error.kind.value}, battle={battle_key}]")
        return BattleResult.failure(error.kind, error.reason, error.message, battle_key)
