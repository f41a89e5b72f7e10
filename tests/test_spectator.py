"""
观战视图测试
使用 rich 的录制控制台捕获输出
"""

from io import StringIO

import pytest
from rich.console import Console

from duel.events import DuelEvent, EventType
from i18n import set_locale
from ui.spectator import SpectatorView, field_cues


def _console():
    return Console(file=StringIO(), width=120, color_system=None, highlight=False)


def _text(console):
    return console.file.getvalue()


@pytest.fixture
def snapshot(make_state):
    state = make_state(
        {"hp": 80, "hand": ["002", "013"], "field": ["003"],
         "deck": ["001", "001"], "buffs": {"blockHealTurns": 2}},
        {"hp": 40, "hand": ["011"], "field": [{"cardId": "016", "isFaceDown": True}]},
    )
    return state.to_dict(conceal_hand_of="player2")


class TestFieldCues:
    def test_attack_and_shield(self, catalog):
        snap = {"players": {"player1": {"field": ["003"]},
                            "player2": {"field": [{"cardId": "011"}]}}}
        assert field_cues(snap, catalog) == {"attack", "shield"}

    def test_empty_and_unknown(self, catalog):
        assert field_cues({}, catalog) == set()
        assert field_cues({"players": {"player1": {"field": ["999", "junk"]}}}, catalog) == set()


class TestSpectatorView:
    def test_viewer_sees_own_hand_only(self, catalog, snapshot):
        console = _console()
        SpectatorView(catalog, console, viewer="player1").show(snapshot)
        out = _text(console)
        assert "Pistol #002" in out
        assert "Medkit #013" in out
        assert "Riot Shield" not in out
        assert "[?]" in out

    def test_pure_spectator_conceals_both_hands(self, catalog, snapshot):
        console = _console()
        SpectatorView(catalog, console).show(snapshot)
        out = _text(console)
        assert "Pistol" not in out
        assert "Assault Rifle #003" in out

    def test_face_down_trap_hidden(self, catalog, snapshot):
        console = _console()
        SpectatorView(catalog, console, viewer="player1").show(snapshot)
        out = _text(console)
        assert "[face-down trap]" in out
        assert "Tripwire" not in out

    def test_banner_and_buffs(self, catalog, snapshot):
        console = _console()
        SpectatorView(catalog, console, viewer="player1").show(snapshot)
        out = _text(console)
        assert "Current Turn: player1" in out
        assert "blockHealTurns=2" in out
        assert "nextAttackMult" not in out

    def test_zone_labels_follow_locale(self, catalog, snapshot):
        console = _console()
        SpectatorView(catalog, console, viewer="player1").show(snapshot)
        out = _text(console)
        assert "Hand" in out
        assert "Discard pile" in out

        set_locale("zh_CN")
        console = _console()
        SpectatorView(catalog, console, viewer="player1").show(snapshot)
        assert "手牌" in _text(console)

    def test_winner_banner(self, catalog, snapshot):
        snapshot["winner"] = "player2"
        console = _console()
        SpectatorView(catalog, console).show(snapshot)
        assert "Winner: player2" in _text(console)

    def test_render_events(self, catalog, snapshot):
        console = _console()
        events = [
            DuelEvent(EventType.DAMAGE, {"player": "player1", "target": "player2", "amount": 25}),
            {"kind": "draw", "player": "player1", "cardId": "001"},
        ]
        SpectatorView(catalog, console).show(snapshot, events)
        out = _text(console)
        assert "Events" in out
        assert "amount=25" in out
        assert "cardId=001" in out

    def test_render_does_not_mutate(self, catalog, snapshot):
        before = repr(snapshot)
        event = {"kind": "heal", "player": "player1", "amount": 5}
        view = SpectatorView(catalog, _console())
        view.render(snapshot)
        view.render_events([event])
        assert repr(snapshot) == before
        assert event["kind"] == "heal"
