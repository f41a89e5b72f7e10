"""伤害系统测试：体力写入口、伤害公式与禁疗"""

import pytest

from duel.buffs import BuffStore
from duel.damage_system import DamageSystem, change_hp
from duel.events import EventRecorder, EventType


@pytest.fixture
def system(make_state):
    def _make(player1=None, player2=None):
        state = make_state(player1, player2)
        return DamageSystem(state, BuffStore(state), EventRecorder())
    return _make


class TestChangeHp:
    def test_clamps_at_zero(self, make_state):
        state = make_state(player2={"hp": 15})
        assert change_hp(state, "player2", -20) == -15
        assert state.player("player2").hp == 0

    def test_clamps_at_max(self, make_state):
        state = make_state({"hp": 195})
        assert change_hp(state, "player1", 30) == 5
        assert state.player("player1").hp == 200

    def test_heal_block_suppresses_positive_delta(self, make_state):
        state = make_state({"hp": 100, "buffs": {"blockHealTurns": 1}})
        assert change_hp(state, "player1", 30) == 0
        assert state.player("player1").hp == 100

    def test_heal_block_does_not_stop_damage(self, make_state):
        state = make_state({"hp": 100, "buffs": {"blockHealTurns": 1}})
        assert change_hp(state, "player1", -30) == -30


class TestCalculateDamage:
    def test_plain(self, system, catalog):
        assert system().calculate_damage("player1", catalog.get("008"), 20) == 20

    def test_bonus_and_mult(self, system, catalog):
        ds = system({"buffs": {"nextAttackBonus": 5, "nextAttackMult": 2.0}})
        assert ds.calculate_damage("player1", catalog.get("008"), 20) == 45

    def test_mult_truncates(self, system, catalog):
        ds = system({"buffs": {"nextAttackMult": 1.5}})
        assert ds.calculate_damage("player1", catalog.get("045"), 15) == 22

    def test_one_shot_consumed_after_read(self, system, catalog):
        ds = system({"buffs": {"nextAttackBonus": 15}})
        knife = catalog.get("001")
        assert ds.calculate_damage("player1", knife, 15) == 30
        assert ds.calculate_damage("player1", knife, 15) == 15

    def test_tag_mismatch_still_consumes(self, system, catalog):
        ds = system({"buffs": {"nextAttackMult": 2.0, "attackRestrictTags": ["gun"]}})
        assert ds.calculate_damage("player1", catalog.get("008"), 20) == 20
        bag = ds.buffs.get("player1")
        assert bag.next_attack_mult == 1.0
        assert bag.attack_restrict_tags is None

    def test_tag_match_applies(self, system, catalog):
        ds = system({"buffs": {"nextAttackMult": 2.0, "attackRestrictTags": ["gun"]}})
        assert ds.calculate_damage("player1", catalog.get("003"), 25) == 50

    def test_gun_flat_bonus_is_persistent(self, system, catalog):
        ds = system({"buffs": {"gunFlatBonus": 5}})
        rifle = catalog.get("003")
        assert ds.calculate_damage("player1", rifle, 25) == 30
        assert ds.calculate_damage("player1", rifle, 25) == 30
        assert ds.calculate_damage("player1", catalog.get("008"), 20) == 20

    def test_never_negative(self, system, catalog):
        ds = system({"buffs": {"nextAttackBonus": -50}})
        assert ds.calculate_damage("player1", catalog.get("008"), 20) == 0

    def test_unknown_card(self, system):
        assert system().calculate_damage("player1", None, 10) == 10


class TestDamageFoe:
    def test_reports_actual_loss(self, system, catalog):
        ds = system(player2={"hp": 15})
        lost = ds.damage_foe("player1", "player2", catalog.get("002"), 20)
        assert lost == 15
        event = ds.recorder.events[-1]
        assert event.event_type is EventType.DAMAGE
        assert event.to_dict() == {
            "kind": "damage", "player": "player1", "target": "player2",
            "amount": 15, "cardId": "002", "hp": 0,
        }


class TestHeal:
    def test_heal_emits_event(self, system):
        ds = system({"hp": 150})
        assert ds.heal("player1", 20) == 20
        assert ds.recorder.kinds() == ["heal"]

    def test_blocked_heal_is_silent(self, system):
        ds = system({"hp": 150, "buffs": {"blockHealTurns": 2}})
        assert ds.heal("player1", 20) == 0
        assert ds.recorder.events == []

    def test_heal_at_max(self, system):
        ds = system()
        assert ds.heal("player1", 10) == 0
        assert ds.recorder.events[-1].amount == 0

    def test_zero_amount(self, system):
        ds = system({"hp": 100})
        assert ds.heal("player1", 0) == 0
        assert ds.recorder.events == []
