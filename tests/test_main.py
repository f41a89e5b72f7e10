"""命令行练习模式测试"""

import random
from io import StringIO
from unittest.mock import MagicMock

from rich.console import Console

from duel.card import CardType
from main import PracticeDuel, build_payload, parse_args
from ui.spectator import SpectatorView


def _practice(engine, catalog, commands):
    console = Console(file=StringIO(), width=120, color_system=None)
    console.input = MagicMock(side_effect=commands)
    view = SpectatorView(catalog, console, viewer="player1")
    return PracticeDuel(engine, view, console), console


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.seed is None
        assert args.first is None
        assert args.remote is False
        assert args.locale == "en_US"

    def test_options(self):
        args = parse_args(["--seed", "7", "--first", "player2", "--remote", "--debug"])
        assert (args.seed, args.first, args.remote, args.debug) == (7, "player2", True, True)


class TestBuildPayload:
    def test_decks_exclude_loot(self, catalog):
        payload = build_payload(catalog, random.Random(1), "player1")
        loot_ids = {c.card_id for c in catalog if c.card_type is CardType.LOOT}
        for key in ("player1", "player2"):
            deck = payload[key]["deck"]
            assert len(deck) == 20
            assert not loot_ids & set(deck)
        assert sorted(payload["lootPile"]) == sorted(list(loot_ids) * 2)
        assert payload["firstPlayer"] == "player1"

    def test_seeded(self, catalog):
        assert build_payload(catalog, random.Random(3), None) == \
            build_payload(catalog, random.Random(3), None)


class TestPracticeDuel:
    def test_winning_play_ends_loop(self, make_engine, catalog):
        engine = make_engine({"hand": ["002"]}, {"hp": 15})
        practice, console = _practice(engine, catalog, ["p 0"])
        practice.run()
        assert engine.winner == "player1"
        assert "player1" in console.file.getvalue()

    def test_quit(self, make_engine, catalog):
        engine = make_engine({"hand": ["002"]})
        practice, _ = _practice(engine, catalog, ["", "q"])
        practice.run()
        assert engine.winner is None
        assert len(engine.state.player("player1").hand) == 1

    def test_bad_index_reported(self, make_engine, catalog):
        engine = make_engine({"hand": ["002"]})
        practice, console = _practice(engine, catalog, ["p x", "d 3", "q"])
        practice.run()
        out = console.file.getvalue()
        assert "x" in out
        assert len(engine.state.player("player1").hand) == 1

    def test_dummy_opponent_ends_turn(self, make_engine, catalog):
        engine = make_engine(current="player2")
        practice, _ = _practice(engine, catalog, ["q"])
        practice.run()
        assert engine.current_player == "player1"
