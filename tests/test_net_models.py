"""Pydantic 载荷校验模型测试"""

import pytest
from pydantic import ValidationError

from net.models import ActionModel, BotMoveModel, DuelInitModel, PlayerInitModel, ServerReplyModel


class TestPlayerInitModel:
    def test_normalizes_deck(self):
        player = PlayerInitModel.model_validate({"playerId": 42, "deck": [1, "2", "003_X.png"]})
        assert player.player_id == "42"
        assert player.deck == ["001", "002", "003"]

    def test_missing_deck_is_empty(self):
        assert PlayerInitModel(player_id="p").deck == []

    def test_bad_card_id(self):
        with pytest.raises(ValidationError):
            PlayerInitModel.model_validate({"playerId": "p", "deck": ["abc"]})

    def test_deck_must_be_list(self):
        with pytest.raises(ValidationError):
            PlayerInitModel.model_validate({"playerId": "p", "deck": "001,002"})

    def test_empty_player_id(self):
        with pytest.raises(ValidationError):
            PlayerInitModel.model_validate({"playerId": "", "deck": []})


class TestDuelInitModel:
    def test_aliases(self):
        init = DuelInitModel.model_validate({
            "player1": {"playerId": "a"},
            "player2": {"playerId": "b"},
            "lootPile": [40],
            "firstPlayer": "player2",
            "duelId": "d-1",
            "extra": "ignored",
        })
        assert init.loot_pile == ["040"]
        assert init.first_player == "player2"
        assert init.duel_id == "d-1"
        assert init.shuffle is True

    def test_first_player_optional(self):
        init = DuelInitModel.model_validate({"player1": {"playerId": "a"},
                                             "player2": {"playerId": "b"}})
        assert init.first_player is None


class TestActionModel:
    def test_play_requires_index(self):
        with pytest.raises(ValidationError):
            ActionModel(action="play")

    def test_draw_without_index(self):
        assert ActionModel(action="draw").index is None

    def test_alias_and_range(self):
        assert ActionModel.model_validate({"action": "discard", "cardIndex": 3}).index == 3
        with pytest.raises(ValidationError):
            ActionModel.model_validate({"action": "discard", "cardIndex": 4})

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            ActionModel(action="attack", index=0)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            ActionModel.model_validate({"action": "draw", "foo": 1})


class TestBotMoveModel:
    def test_extra_fields_ignored(self):
        move = BotMoveModel.model_validate({"action": "play", "cardIndex": 0,
                                            "note": "aggro", "confidence": 0.9})
        assert (move.action, move.index, move.note) == ("play", 0, "aggro")

    def test_inherits_index_rule(self):
        with pytest.raises(ValidationError):
            BotMoveModel.model_validate({"action": "discard"})


class TestServerReplyModel:
    def test_ok(self):
        assert ServerReplyModel(status=204).ok
        assert not ServerReplyModel(status=503).ok

    def test_status_range(self):
        with pytest.raises(ValidationError):
            ServerReplyModel(status=42)

    def test_moves_parsed(self):
        reply = ServerReplyModel.model_validate(
            {"status": 200, "moves": [{"action": "end_turn"}]})
        assert isinstance(reply.moves[0], BotMoveModel)
