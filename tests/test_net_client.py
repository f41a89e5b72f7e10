"""
远端对手客户端测试
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from websockets.exceptions import InvalidURI

from duel.config import DuelConfig
from duel.exceptions import TransportError
from net.client import BotClient
from net.models import BotMoveModel
from net.protocol import ClientMsg, MsgType, ServerMsg


class TestBotClientInit:
    def test_default_config(self):
        client = BotClient()
        assert client.server_url == "ws://localhost:8765"
        assert client.timeout == 10.0

    def test_from_config(self):
        cfg = DuelConfig(bot_server_url="ws://10.0.0.2:9000", request_timeout=3.0)
        client = BotClient.from_config(cfg)
        assert client.server_url == "ws://10.0.0.2:9000"
        assert client.timeout == 3.0


class TestRequestMove:
    @pytest.mark.asyncio
    async def test_returns_moves(self):
        client = BotClient()
        reply = ServerMsg.move_reply([{"action": "play", "cardIndex": 1},
                                      {"action": "end_turn"}])
        client._exchange = AsyncMock(return_value=reply.to_json())

        moves = await client.request_move({"duelId": "d-1"}, "player2")

        assert moves == [BotMoveModel(action="play", index=1),
                         BotMoveModel(action="end_turn")]
        sent = ClientMsg.from_json(client._exchange.await_args.args[0])
        assert sent.type is MsgType.MOVE_REQUEST
        assert sent.data["playerKey"] == "player2"
        assert sent.duel_id == "d-1"

    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        client = BotClient()
        client._exchange = AsyncMock(return_value=ServerMsg.move_reply([], status=503).to_json())
        with pytest.raises(TransportError) as exc_info:
            await client.request_move({}, "player2")
        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_error_message(self):
        client = BotClient()
        client._exchange = AsyncMock(return_value=ServerMsg.error("no bot", 200).to_json())
        with pytest.raises(TransportError) as exc_info:
            await client.request_move({}, "player2")
        assert exc_info.value.reason == "no bot"

    @pytest.mark.asyncio
    async def test_malformed_reply(self):
        client = BotClient()
        client._exchange = AsyncMock(return_value="<html>")
        with pytest.raises(TransportError) as exc_info:
            await client.request_move({}, "player2")
        assert "malformed" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_invalid_move_in_reply(self):
        client = BotClient()
        reply = ServerMsg.move_reply([{"action": "play"}])
        client._exchange = AsyncMock(return_value=reply.to_json())
        with pytest.raises(TransportError):
            await client.request_move({}, "player2")

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        client = BotClient()
        client._exchange = AsyncMock(side_effect=ConnectionRefusedError("refused"))
        with pytest.raises(TransportError) as exc_info:
            await client.request_move({}, "player2")
        assert exc_info.value.url == "ws://localhost:8765"

    @pytest.mark.asyncio
    async def test_websocket_error(self):
        client = BotClient()
        client._exchange = AsyncMock(side_effect=InvalidURI("nope", "bad uri"))
        with pytest.raises(TransportError):
            await client.request_move({}, "player2")

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = BotClient(timeout=0.01)

        async def never_replies(payload):
            await asyncio.sleep(1)

        client._exchange = never_replies
        with pytest.raises(TransportError) as exc_info:
            await client.request_move({}, "player2")
        assert exc_info.value.reason == "timeout"


class TestSubmitSummary:
    @pytest.mark.asyncio
    async def test_ack(self):
        client = BotClient()
        client._exchange = AsyncMock(return_value=ServerMsg.summary_ack(201).to_json())
        reply = await client.submit_summary({"duelId": "d-1", "winner": "player1"})
        assert reply.ok
        assert reply.status == 201
        sent = ClientMsg.from_json(client._exchange.await_args.args[0])
        assert sent.type is MsgType.SUMMARY_SUBMIT
