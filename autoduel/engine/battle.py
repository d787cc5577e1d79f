"""Per-pair battle state machine with simultaneous action declaration."""

import logging
import threading
import time
from typing import Any, Callable, Optional, Union

from autoduel.engine.combat_math import CombatMath
from autoduel.engine.deadline import RoundDeadline
from autoduel.engine.dice import DiceRoller
from autoduel.errors import StateConflictError, ValidationError
from autoduel.models.actions import CombatAction
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
from autoduel.models.results import RejectReason
from autoduel.models.stats import CharacterStats, Combatant

logger = logging.getLogger(__name__.split(".")[-1])

KEY_SEPARATOR = "__"


def make_battle_key(id_a: str, id_b: str) -> str:
    """Canonical key for an unordered pair of identities."""
    return KEY_SEPARATOR.join(sorted((id_a, id_b)))


class Battle:
    """
    One battle between two combatants.

    Each round both sides declare an action; once both are in, the round is
    resolved in the turn order fixed at creation. All state changes happen
    under the battle's own lock.
    """

    def __init__(
        self,
        stats_a: CharacterStats,
        stats_b: CharacterStats,
        dice: Optional[DiceRoller] = None,
        deadline: Optional[RoundDeadline] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize battle.

        Args:
            stats_a: Template of the first participant (copied, never mutated)
            stats_b: Template of the second participant
            dice: Random draws for turn order and combat rolls
            deadline: Optional round deadline; None waits forever
            clock: Monotonic time source used with the deadline
        """
        if stats_a.id == stats_b.id:
            raise ValidationError(RejectReason.SELF_BATTLE)

        self.a = Combatant.from_stats(stats_a)
        self.b = Combatant.from_stats(stats_b)
        self.key = make_battle_key(self.a.id, self.b.id)
        self._combatants = {self.a.id: self.a, self.b.id: self.b}
        self._dice = dice or DiceRoller()
        self._deadline = deadline
        self._clock = clock
        self._lock = threading.RLock()

        self.turn_order: tuple[str, str] = self._decide_order()
        self.round = 1
        self.outcome: BattleOutcome = InProgress()
        self._actions: dict[str, Optional[CombatAction]] = {self.a.id: None, self.b.id: None}
        self._waiting_since: Optional[float] = None

        logger.info(f"Battle {self.key} created, turn order {self.turn_order[0]} -> {self.turn_order[1]}")

    def _decide_order(self) -> tuple[str, str]:
        a, b = self.a, self.b
        if a.speed > b.speed:
            return a.id, b.id
        if b.speed > a.speed:
            return b.id, a.id
        return (a.id, b.id) if self._dice.coin_flip() else (b.id, a.id)

    @property
    def finished(self) -> bool:
        return self.outcome.finished

    @property
    def winner_id(self) -> Optional[str]:
        return self.outcome.winner_id if isinstance(self.outcome, Decided) else None

    @property
    def participants(self) -> tuple[str, str]:
        return self.a.id, self.b.id

    def pending_action(self, combatant_id: str) -> Optional[CombatAction]:
        with self._lock:
            return self._actions.get(combatant_id)

    def submit_action(
        self, participant_id: str, action: Union[CombatAction, str, Any]
    ) -> Optional[RoundReport]:
        """
        Declare an action for the current round.

        Args:
            participant_id: Identity of the declaring side
            action: CombatAction or its string value

        Returns:
            RoundReport if this declaration completed the round, None while
            waiting for the opponent

        Raises:
            StateConflictError: Battle already finished
            ValidationError: Not a participant, or unrecognized action
        """
        with self._lock:
            if self.finished:
                raise StateConflictError(RejectReason.BATTLE_FINISHED)
            if participant_id not in self._actions:
                raise ValidationError(RejectReason.NOT_PARTICIPANT)
            parsed = CombatAction.parse(action)
            if parsed is None:
                raise ValidationError(RejectReason.INVALID_ACTION)

            # Deadline runs from the round's first declaration; overwrites keep it
            if self._waiting_since is None:
                self._waiting_since = self._clock()
            self._actions[participant_id] = parsed
            logger.debug(f"Battle {self.key} round {self.round}: {participant_id} declared {parsed.value}")

            if not self._is_ready():
                return None
            return self._resolve_round()

    def apply_deadline(self, now: Optional[float] = None) -> Optional[RoundReport]:
        """
        Fill the missing action with the fallback once the round is overdue.

        Only applies when exactly one side has declared; a round nobody has
        answered keeps waiting.

        Returns:
            RoundReport if the deadline resolved the round, None otherwise
        """
        with self._lock:
            if self._deadline is None or self.finished:
                return None
            missing = [pid for pid, action in self._actions.items() if action is None]
            if len(missing) != 1 or self._waiting_since is None:
                return None
            now = self._clock() if now is None else now
            if not self._deadline.is_overdue(self._waiting_since, now):
                return None

            self._actions[missing[0]] = self._deadline.fallback_action
            logger.info(
                f"Battle {self.key} round {self.round}: deadline passed, "
                f"{missing[0]} defaults to {self._deadline.fallback_action.value}"
            )
            return self._resolve_round(timed_out=missing)

    def status(self) -> BattleStatus:
        """Immutable snapshot of the current state."""
        with self._lock:
            return BattleStatus(
                key=self.key,
                round=self.round,
                turn_order=self.turn_order,
                combatants=self._combatant_statuses(),
                outcome=self.outcome,
            )

    def _is_ready(self) -> bool:
        return all(action is not None for action in self._actions.values())

    def _reset_actions(self) -> None:
        for participant_id in self._actions:
            self._actions[participant_id] = None
        self._waiting_since = None

    def _combatant_statuses(self) -> list[CombatantStatus]:
        return [
            CombatantStatus(
                id=c.id,
                name=c.name,
                hp=c.hp,
                max_hp=c.max_hp,
                ready=not self.finished and self._actions[c.id] is not None,
            )
            for c in (self.a, self.b)
        ]

    def _check_end(self) -> BattleOutcome:
        if self.a.is_down and self.b.is_down:
            return Draw()
        if self.a.is_down:
            return Decided(winner_id=self.b.id)
        if self.b.is_down:
            return Decided(winner_id=self.a.id)
        return InProgress()

    def _resolve_round(self, timed_out: Optional[list[str]] = None) -> RoundReport:
        first = self._combatants[self.turn_order[0]]
        second = self._combatants[self.turn_order[1]]
        actions = {pid: action for pid, action in self._actions.items() if action is not None}
        resolved_round = self.round

        events = self._process_single_action(first, second)
        self.outcome = self._check_end()
        if not self.finished:
            events.extend(self._process_single_action(second, first))
            self.outcome = self._check_end()

        if self.finished:
            logger.info(f"Battle {self.key} finished in round {resolved_round}: {self.outcome.kind}")
        else:
            self.round += 1
            self._reset_actions()
            logger.info(
                f"Battle {self.key} round {resolved_round} resolved: "
                f"{self.a.id}={self.a.hp}/{self.a.max_hp} {self.b.id}={self.b.hp}/{self.b.max_hp}"
            )

        return RoundReport(
            round=resolved_round,
            actions=actions,
            events=events,
            combatants=self._combatant_statuses(),
            outcome=self.outcome,
            timed_out=timed_out or [],
        )

    def _process_single_action(self, attacker: Combatant, defender: Combatant) -> list[RoundEvent]:
        attacker_action = self._actions[attacker.id]
        defender_action = self._actions[defender.id]

        # Defend and evade only take effect when the other side's attack is processed
        if attacker_action == CombatAction.DEFEND:
            return [RoundEvent(kind=EventKind.PREPARE_DEFEND, actor_id=attacker.id)]
        if attacker_action == CombatAction.EVADE:
            return [RoundEvent(kind=EventKind.PREPARE_EVADE, actor_id=attacker.id)]
        if attacker_action != CombatAction.ATTACK:
            return [RoundEvent(kind=EventKind.IDLE, actor_id=attacker.id)]

        events: list[RoundEvent] = []
        if defender_action == CombatAction.EVADE:
            if CombatMath.roll_evade(defender, self._dice):
                return [RoundEvent(kind=EventKind.EVADED, actor_id=attacker.id, target_id=defender.id)]
            events.append(RoundEvent(kind=EventKind.EVADE_FAILED, actor_id=attacker.id, target_id=defender.id))

        if not CombatMath.roll_hit(attacker, defender, self._dice):
            events.append(RoundEvent(kind=EventKind.MISSED, actor_id=attacker.id, target_id=defender.id))
            return events

        roll = CombatMath.calc_damage(attacker, defender, defender_action, self._dice)
        dealt = defender.take_damage(roll.damage)
        logger.debug(
            f"Battle {self.key}: {attacker.id} hits {defender.id} for {dealt}"
            f"{' (crit)' if roll.crit else ''}, hp now {defender.hp}"
        )
        events.append(
            RoundEvent(
                kind=EventKind.HIT,
                actor_id=attacker.id,
                target_id=defender.id,
                damage=dealt,
                crit=roll.crit,
                defended=roll.defended,
            )
        )
        return events
