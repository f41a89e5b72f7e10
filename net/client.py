"""远端对手 WebSocket 客户端

功能:
- 把对决快照发送给远端，取回机器人的行动列表
- 提交对局总结
- 把连接失败 / 超时 / 非 2xx 状态统一转换为 TransportError

每次请求独立建立连接，不做自动重试：失败直接交给调用方处理。
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError
from websockets.asyncio.client import connect
from websockets.exceptions import WebSocketException

from duel.exceptions import TransportError

from .models import BotMoveModel, ServerReplyModel
from .protocol import ClientMsg, MsgType, ServerMsg

logger = logging.getLogger(__name__)


class BotClient:
    """远端对手客户端

    职责:
    1. 一次请求 = 一次连接 + 一条消息 + 一条回复
    2. 校验回复结构 (ServerReplyModel)
    3. 将所有失败转换为 TransportError
    """

    def __init__(self, server_url: str = "ws://localhost:8765", timeout: float = 10.0):
        self.server_url = server_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> BotClient:
        return cls(config.bot_server_url, config.request_timeout)

    # ==================== 请求 ====================

    async def request_move(self, snapshot: dict[str, Any], player_key: str) -> list[BotMoveModel]:
        """请求远端为 player_key 行动

        Returns:
            行动列表（按顺序应用）

        Raises:
            TransportError: 连接失败、超时、非 2xx 状态或回复格式不合法
        """
        reply = await self._round_trip(ClientMsg.move_request(snapshot, player_key))
        logger.info("Remote returned %d moves for %s", len(reply.moves), player_key)
        return reply.moves

    async def submit_summary(self, summary: dict[str, Any]) -> ServerReplyModel:
        """提交对局总结

        Raises:
            TransportError: 同 request_move
        """
        reply = await self._round_trip(ClientMsg.summary_submit(summary))
        logger.info("Summary of duel %s submitted", summary.get("duelId"))
        return reply

    # ==================== 内部 ====================

    async def _exchange(self, payload: str) -> str | bytes:
        """建立连接，发送一条消息并等待一条回复"""
        async with connect(self.server_url, open_timeout=self.timeout) as ws:
            await ws.send(payload)
            return await ws.recv()

    async def _round_trip(self, msg: ClientMsg) -> ServerReplyModel:
        try:
            raw = await asyncio.wait_for(self._exchange(msg.to_json()), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Request %s to %s timed out", msg.type.value, self.server_url)
            raise TransportError(reason="timeout", url=self.server_url) from e
        except (OSError, WebSocketException) as e:
            logger.warning("Request %s to %s failed: %s", msg.type.value, self.server_url, e)
            raise TransportError(reason=str(e) or type(e).__name__, url=self.server_url) from e

        try:
            server_msg = ServerMsg.from_json(raw)
            reply = ServerReplyModel(
                status=server_msg.status,
                moves=server_msg.data.get("moves") or [],
                message=str(server_msg.data.get("message", "")),
                data=server_msg.data,
            )
        except (ValueError, KeyError, ValidationError) as e:
            raise TransportError(reason=f"malformed reply: {e}", url=self.server_url) from e

        if server_msg.type is MsgType.ERROR or not reply.ok:
            logger.warning("Remote rejected %s with status %d", msg.type.value, reply.status)
            raise TransportError(reason=reply.message or "remote error",
                                 status=reply.status, url=self.server_url)
        return reply
