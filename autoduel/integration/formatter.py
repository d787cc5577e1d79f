"""Renders battle results as reply text."""

from typing import Optional

from autoduel.config import DEFAULT_HP_BAR_WIDTH
from autoduel.models.actions import CombatAction
from autoduel.models.battle import BattleStatus, CombatantStatus, Decided, EventKind, RoundEvent, RoundReport
from autoduel.models.results import BattleResult, RejectReason, ResultKind

ACTION_PROMPT = "Choose your action: attack / defend / evade"


def hp_bar(hp: int, max_hp: int, width: int = DEFAULT_HP_BAR_WIDTH) -> str:
    """Fixed-width bar of filled and empty blocks."""
    ratio = max(0.0, min(1.0, hp / max_hp)) if max_hp > 0 else 0.0
    filled = int(ratio * width + 0.5)
    return "█" * filled + "░" * (width - filled)


class ReplyFormatter:
    """Turns BattleResult values into user-facing text."""

    def __init__(self, bar_width: int = DEFAULT_HP_BAR_WIDTH) -> None:
        self.bar_width = bar_width

    def status_line(self, combatant: CombatantStatus) -> str:
        return (
            f"❤️ {combatant.name} {combatant.hp}/{combatant.max_hp} "
            f"{hp_bar(combatant.hp, combatant.max_hp, self.bar_width)}"
        )

    def status_lines(self, combatants: list[CombatantStatus]) -> str:
        return "\n".join(self.status_line(c) for c in combatants)

    def format_start(self, result: BattleResult) -> str:
        status = result.status
        a, b = status.combatants
        first = status.combatant(status.turn_order[0])
        return (
            f"⚔️ Battle start!\n"
            f"{a.name} vs {b.name}\n"
            f"Acts first: {first.name}\n\n"
            f"{self.status_lines(status.combatants)}\n\n"
            f"Both sides: {ACTION_PROMPT.lower()}"
        )

    def format_event(self, event: RoundEvent, status: BattleStatus) -> str:
        actor = self._name(status, event.actor_id)
        target = self._name(status, event.target_id)
        if event.kind == EventKind.PREPARE_DEFEND:
            return f"🛡️ {actor} braces to defend!"
        if event.kind == EventKind.PREPARE_EVADE:
            return f"💨 {actor} gets ready to evade!"
        if event.kind == EventKind.EVADED:
            return f"💨 {target} evaded! ({actor}'s attack had no effect)"
        if event.kind == EventKind.EVADE_FAILED:
            return f"💥 {target} failed to evade!"
        if event.kind == EventKind.MISSED:
            return f"❌ {actor}'s attack missed!"
        if event.kind == EventKind.HIT:
            tail = ""
            if event.crit:
                tail += " (critical!)"
            if event.defended is True:
                tail += " (defended)"
            elif event.defended is False:
                tail += " (defense failed)"
            return f"⚔️ {actor} attacks! {event.damage} damage to {target}{tail}"
        return f"{actor} did nothing..."

    def format_round(self, report: RoundReport, status: BattleStatus) -> str:
        lines = [f"🏁 Round {report.round}"]
        declared = " / ".join(
            f"{c.name}: {self._action_label(report.actions.get(c.id))}" for c in status.combatants
        )
        lines.append(f"- {declared}")
        for participant_id in report.timed_out:
            lines.append(f"⏰ {self._name(status, participant_id)} ran out of time")
        lines.append("")
        lines.extend(self.format_event(event, status) for event in report.events)
        lines.append("")
        if report.outcome.finished:
            lines.append(self.finish_message(report))
        else:
            lines.append(self.status_lines(report.combatants))
            lines.append(f"Next round: {ACTION_PROMPT.lower()}")
        return "\n".join(lines)

    def finish_message(self, report: RoundReport) -> str:
        status = self.status_lines(report.combatants)
        if isinstance(report.outcome, Decided):
            winner = next(c for c in report.combatants if c.id == report.outcome.winner_id)
            loser = next(c for c in report.combatants if c.id != report.outcome.winner_id)
            return f"🏆 {winner.name} wins! ({loser.name} is defeated)\n\n{status}"
        return f"🤝 Draw!\n\n{status}"

    def format_result(self, result: BattleResult) -> str:
        """Reply text for any manager result."""
        if not result.ok:
            return self.format_rejection(result)
        if result.report is not None:
            return self.format_round(result.report, result.status)
        if result.kind == ResultKind.STARTED:
            return self.format_start(result)
        return "Action chosen. Waiting for your opponent..."

    def format_rejection(self, result: BattleResult) -> str:
        if result.reason == RejectReason.INVALID_ACTION:
            return f"Invalid action. {ACTION_PROMPT}"
        if result.reason == RejectReason.NOT_IN_BATTLE:
            return 'You are not in a battle. Start one with "@bot battle @A @B".'
        if result.reason == RejectReason.ALREADY_IN_PROGRESS:
            return "That battle is already in progress."
        if result.reason == RejectReason.ALREADY_IN_OTHER_BATTLE:
            return "One of them is already in another battle."
        if result.reason == RejectReason.SELF_BATTLE:
            return "You can't battle yourself."
        if result.reason == RejectReason.BATTLE_FINISHED:
            return "That battle is already over."
        if result.reason == RejectReason.NOT_PARTICIPANT:
            return "You are not part of this battle."
        return result.message.capitalize()

    @staticmethod
    def _name(status: BattleStatus, combatant_id: Optional[str]) -> str:
        combatant = status.combatant(combatant_id) if combatant_id else None
        return combatant.name if combatant else (combatant_id or "?")

    @staticmethod
    def _action_label(action: Optional[CombatAction]) -> str:
        return action.value if action else "undecided"
