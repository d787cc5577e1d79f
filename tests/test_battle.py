"""Tests for the Battle state machine."""

import pytest

from autoduel.engine.battle import Battle, make_battle_key
from autoduel.engine.dice import DiceRoller
from autoduel.errors import StateConflictError, ValidationError
from autoduel.models.actions import CombatAction
from autoduel.models.battle import Decided, Draw, EventKind, InProgress
from autoduel.models.results import RejectReason


class TestCreation:
    """Snapshotting and turn order."""

    def test_snapshot_at_full_health(self, battle, sawa, sawa2):
        """Combatants start at max hp and keep template stats."""
        assert battle.a.hp == sawa.max_hp
        assert battle.b.hp == sawa2.max_hp
        assert battle.a.defense == sawa.defense
        assert battle.round == 1
        assert battle.outcome == InProgress()

    def test_faster_combatant_goes_first(self, battle, sawa, sawa2, scripted):
        """Speed 20 acts before speed 18 without any random draw."""
        assert battle.turn_order == (sawa2.id, sawa.id)
        assert scripted.draws == 0

    def test_speed_tie_heads_keeps_order(self, sawa, sawa2, scripted, dice):
        scripted.push(0.1)
        tied = sawa2.model_copy(update={"speed": sawa.speed})
        assert Battle(sawa, tied, dice=dice).turn_order == (sawa.id, tied.id)

    def test_speed_tie_tails_swaps_order(self, sawa, sawa2, scripted, dice):
        scripted.push(0.9)
        tied = sawa2.model_copy(update={"speed": sawa.speed})
        assert Battle(sawa, tied, dice=dice).turn_order == (tied.id, sawa.id)

    def test_self_battle_rejected(self, sawa, dice):
        with pytest.raises(ValidationError):
            Battle(sawa, sawa, dice=dice)

    def test_key_is_order_independent(self):
        assert make_battle_key("b@x", "a@x") == make_battle_key("a@x", "b@x") == "a@x__b@x"

    def test_template_not_mutated(self, sawa, sawa2, scripted, dice):
        """Combat damages the snapshot, never the template."""
        battle = Battle(sawa, sawa2, dice=dice)
        scripted.push(0.0, 0.0)
        battle.submit_action(sawa2.id, CombatAction.ATTACK)
        battle.submit_action(sawa.id, CombatAction.DEFEND)
        assert battle.a.hp < sawa.max_hp
        assert sawa.max_hp == 100


class TestSubmitAction:
    """Declaration, waiting and rejection."""

    def test_first_declaration_waits(self, battle, sawa):
        assert battle.submit_action(sawa.id, CombatAction.ATTACK) is None
        assert battle.pending_action(sawa.id) == CombatAction.ATTACK
        assert battle.round == 1

    def test_string_actions_are_accepted(self, battle, sawa):
        battle.submit_action(sawa.id, " Evade ")
        assert battle.pending_action(sawa.id) == CombatAction.EVADE

    def test_resubmission_overwrites(self, battle, sawa, sawa2, scripted):
        """A second declaration before the opponent answers replaces the first."""
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        assert battle.submit_action(sawa.id, CombatAction.DEFEND) is None
        assert battle.pending_action(sawa.id) == CombatAction.DEFEND

        report = battle.submit_action(sawa2.id, CombatAction.DEFEND)
        assert report.actions == {sawa.id: CombatAction.DEFEND, sawa2.id: CombatAction.DEFEND}
        assert scripted.draws == 0

    def test_non_participant_rejected_without_mutation(self, battle, sawa):
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        with pytest.raises(ValidationError) as excinfo:
            battle.submit_action("stranger@x", CombatAction.ATTACK)
        assert excinfo.value.reason == RejectReason.NOT_PARTICIPANT
        assert battle.pending_action(sawa.id) == CombatAction.ATTACK
        assert (battle.a.hp, battle.b.hp) == (100, 90)

    def test_invalid_action_rejected_without_mutation(self, battle, sawa):
        with pytest.raises(ValidationError) as excinfo:
            battle.submit_action(sawa.id, "dance")
        assert excinfo.value.reason == RejectReason.INVALID_ACTION
        assert battle.pending_action(sawa.id) is None

    def test_finished_battle_rejects(self, glass_a, glass_b, scripted, dice):
        battle = Battle(glass_a, glass_b, dice=dice)
        scripted.push(0.0, 0.99)
        battle.submit_action(glass_a.id, CombatAction.ATTACK)
        battle.submit_action(glass_b.id, CombatAction.ATTACK)
        assert battle.finished

        with pytest.raises(StateConflictError) as excinfo:
            battle.submit_action(glass_a.id, CombatAction.ATTACK)
        assert excinfo.value.reason == RejectReason.BATTLE_FINISHED
        assert battle.a.hp == 0


class TestRoundResolution:
    """Round algorithm and its events."""

    def test_defend_scenario(self, battle, sawa, sawa2, scripted):
        """Attack 20 into a successful defend with def 9 leaves 79 hp."""
        scripted.push(0.0, 0.99, 0.0)  # hit, no crit, defend succeeds
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.DEFEND)

        assert battle.b.hp == 79
        assert battle.a.hp == 100
        assert [e.kind for e in report.events] == [EventKind.PREPARE_DEFEND, EventKind.HIT]
        hit = report.events[1]
        assert (hit.actor_id, hit.target_id, hit.damage, hit.defended) == (sawa.id, sawa2.id, 11, True)
        assert scripted.draws == 3

    def test_round_advances_and_clears_slots(self, battle, sawa, sawa2, scripted):
        scripted.push(0.0, 0.99, 0.0)
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.DEFEND)
        assert report.round == 1
        assert battle.round == 2
        assert battle.pending_action(sawa.id) is None
        assert battle.pending_action(sawa2.id) is None
        assert report.outcome == InProgress()

    def test_successful_evade_skips_hit_roll(self, battle, sawa, sawa2, scripted):
        """Evade success negates the attack with a single draw."""
        scripted.push(0.0)
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.EVADE)
        assert battle.b.hp == 90
        assert [e.kind for e in report.events] == [EventKind.PREPARE_EVADE, EventKind.EVADED]
        assert scripted.draws == 1

    def test_failed_evade_falls_through_to_hit(self, battle, sawa, sawa2, scripted):
        scripted.push(0.5, 0.0, 0.99)  # evade fails, hit, no crit
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.EVADE)
        assert battle.b.hp == 70
        assert [e.kind for e in report.events] == [EventKind.PREPARE_EVADE, EventKind.EVADE_FAILED, EventKind.HIT]

    def test_miss_deals_no_damage(self, battle, sawa, sawa2, scripted):
        scripted.push(0.99)
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.DEFEND)
        assert battle.b.hp == 90
        assert report.events[-1].kind == EventKind.MISSED

    def test_crit_ignores_defend(self, battle, sawa, sawa2, scripted):
        scripted.push(0.0, 0.0)  # hit, crit
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.DEFEND)
        assert battle.b.hp == 60
        assert report.events[-1].crit is True
        assert scripted.draws == 2

    def test_both_attack_in_turn_order(self, battle, sawa, sawa2, scripted):
        """Faster side's attack is processed first."""
        scripted.push(0.0, 0.99, 0.0, 0.99)
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        report = battle.submit_action(sawa2.id, CombatAction.ATTACK)
        assert [e.actor_id for e in report.events] == [sawa2.id, sawa.id]
        assert battle.a.hp == 78
        assert battle.b.hp == 70

    def test_turn_order_fixed_across_rounds(self, battle, sawa, sawa2):
        order = battle.turn_order
        for _ in range(3):
            battle.submit_action(sawa.id, CombatAction.DEFEND)
            battle.submit_action(sawa2.id, CombatAction.EVADE)
            assert battle.turn_order == order
        assert battle.round == 4

    def test_first_strike_ends_battle(self, glass_a, glass_b, scripted, dice):
        """When the first action knocks out the opponent, the second is not processed."""
        battle = Battle(glass_a, glass_b, dice=dice)
        scripted.push(0.0, 0.99)
        battle.submit_action(glass_a.id, CombatAction.ATTACK)
        report = battle.submit_action(glass_b.id, CombatAction.ATTACK)

        assert report.outcome == Decided(winner_id=glass_b.id)
        assert battle.winner_id == glass_b.id
        assert battle.a.hp == 0
        assert battle.b.hp == 10
        assert len(report.events) == 1
        assert battle.round == 1

    def test_hp_clamped_at_zero(self, glass_a, glass_b, scripted, dice):
        battle = Battle(glass_a, glass_b, dice=dice)
        scripted.push(0.0, 0.99, 0.99)  # hit, no crit, defend fails
        battle.submit_action(glass_a.id, CombatAction.DEFEND)
        report = battle.submit_action(glass_b.id, CombatAction.ATTACK)
        assert battle.a.hp == 0
        assert report.events[-1].damage == 50

    def test_end_condition_variants(self, battle):
        battle.a.hp = 0
        battle.b.hp = 0
        assert battle._check_end() == Draw()
        battle.b.hp = 5
        assert battle._check_end() == Decided(winner_id=battle.b.id)
        battle.a.hp = 5
        assert battle._check_end() == InProgress()

    def test_status_snapshot(self, battle, sawa):
        battle.submit_action(sawa.id, CombatAction.ATTACK)
        status = battle.status()
        assert status.key == battle.key
        assert status.turn_order == battle.turn_order
        assert status.combatant(sawa.id).ready is True
        assert status.finished is False


class TestReproducibility:
    """Same seed, same battle."""

    def test_seeded_battles_match(self, sawa, sawa2):
        def play(seed):
            battle = Battle(sawa, sawa2, dice=DiceRoller(seed=seed))
            reports = []
            while not battle.finished and battle.round < 50:
                battle.submit_action(sawa.id, CombatAction.ATTACK)
                reports.append(battle.submit_action(sawa2.id, CombatAction.ATTACK).model_dump())
            return reports

        assert play(1234) == play(1234)
