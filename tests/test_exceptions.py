"""Tests for duel.exceptions module: exception classes and helpers."""

import pytest

from duel.exceptions import (
    ActionValidationError,
    CapacityExceededError,
    CardLookupError,
    ConfigurationError,
    DataLoadError,
    DuelBusyError,
    DuelError,
    DuelFinishedError,
    HandLockedError,
    InvalidActionError,
    InvalidZoneError,
    NotPlayerTurnError,
    TransportError,
    ZoneCardNotFoundError,
    ZoneError,
    raise_if_finished,
)

# ==================== DuelError base ====================


class TestDuelError:
    def test_basic(self):
        e = DuelError("test")
        assert e.message == "test"
        assert e.details == {}
        assert str(e) == "test"

    def test_default_message(self):
        assert DuelError().message == "Duel error"

    def test_with_details(self):
        e = DuelError("err", details={"key": "val"})
        assert e.details == {"key": "val"}
        assert "Details:" in str(e)


# ==================== Action errors ====================


class TestActionErrors:
    @pytest.mark.parametrize("cls", [
        InvalidActionError, NotPlayerTurnError, HandLockedError, DuelFinishedError,
        DuelBusyError, CapacityExceededError, ZoneCardNotFoundError, InvalidZoneError,
    ])
    def test_hierarchy(self, cls):
        assert issubclass(cls, ActionValidationError)
        assert issubclass(cls, DuelError)

    def test_invalid_index_message(self):
        e = InvalidActionError(action_type="play_card", player_key="player1", index=7)
        assert "7" in e.message
        assert e.details == {"action_type": "play_card", "player_key": "player1", "index": 7}

    def test_invalid_action_defaults(self):
        e = InvalidActionError()
        assert e.message == "Invalid action"
        assert e.details == {}

    def test_not_player_turn(self):
        e = NotPlayerTurnError(player_key="player2", current_player="player1")
        assert e.details == {"player_key": "player2", "current_player": "player1"}

    def test_hand_locked(self):
        e = HandLockedError(player_key="player1", turns=2)
        assert e.turns == 2
        assert e.details["turns"] == 2

    def test_duel_finished(self):
        e = DuelFinishedError(winner="player2")
        assert e.winner == "player2"
        assert e.details == {"winner": "player2"}


# ==================== Zone errors ====================


class TestZoneErrors:
    def test_capacity(self):
        e = CapacityExceededError(zone="hand", limit=4)
        assert isinstance(e, ZoneError)
        assert "hand" in e.message and "4" in e.message
        assert e.details == {"zone": "hand", "limit": 4}

    def test_not_found_records_selector(self):
        e = ZoneCardNotFoundError(zone="deck", selector="first")
        assert e.details["selector"] == "'first'"


# ==================== Other errors ====================


class TestOtherErrors:
    def test_card_lookup_is_lookup_error(self):
        e = CardLookupError(card_id="099")
        assert isinstance(e, LookupError)
        assert not isinstance(e, ActionValidationError)
        assert "099" in e.message

    def test_transport(self):
        e = TransportError(reason="timeout", status=503, url="ws://bot")
        assert "timeout" in e.message
        assert e.details == {"status": 503, "url": "ws://bot"}
        assert not isinstance(e, ActionValidationError)

    def test_configuration(self):
        assert ConfigurationError(config_key="human_player").details == {
            "config_key": "human_player"}

    def test_data_load(self):
        e = DataLoadError(file_path="cards.json", reason="not found")
        assert e.file_path == "cards.json"
        assert e.details["reason"] == "not found"


class TestHelpers:
    def test_raise_if_finished(self):
        raise_if_finished(None)
        with pytest.raises(DuelFinishedError):
            raise_if_finished("player1")
