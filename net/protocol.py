"""远端对手通信协议
基于 WebSocket 的 JSON 消息格式

协议设计:
- 引擎 → 远端: ClientMsg (请求行动 / 提交总结)
- 远端 → 引擎: ServerMsg (行动列表 / 确认 / 错误)
- 所有消息均为 JSON，包含 type 字段用于路由；
  ServerMsg 额外携带 HTTP 语义的 status 字段
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ==================== 消息类型枚举 ====================


class MsgType(Enum):
    """网络消息类型"""

    # ---- 引擎 → 远端 ----
    MOVE_REQUEST = "move_request"       # 请求远端为当前席位行动
    SUMMARY_SUBMIT = "summary_submit"   # 提交对局总结

    # ---- 远端 → 引擎 ----
    MOVE_REPLY = "move_reply"           # 行动列表
    SUMMARY_ACK = "summary_ack"         # 总结已保存
    ERROR = "error"                     # 错误


# ==================== 消息数据类 ====================


@dataclass
class ServerMsg:
    """远端 → 引擎消息

    {
        "type": "move_reply",
        "status": 200,
        "timestamp": 1706000000.0,
        "data": {"moves": [...]}
    }
    """
    type: MsgType
    data: dict[str, Any] = field(default_factory=dict)
    status: int = 200
    timestamp: float = field(default_factory=time.time)

    def to_json(self) -> str:
        """序列化为 JSON 字符串"""
        return json.dumps({
            "type": self.type.value,
            "status": self.status,
            "timestamp": self.timestamp,
            "data": self.data,
        }, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> ServerMsg:
        """从 JSON 字符串反序列化

        Raises:
            ValueError: JSON 不合法或 type 未知
        """
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise ValueError("server message must be a JSON object")
        return cls(
            type=MsgType(obj["type"]),
            data=obj.get("data") or {},
            status=int(obj.get("status", 200)),
            timestamp=obj.get("timestamp", 0.0),
        )

    # ---------- 工厂方法 ----------

    @classmethod
    def error(cls, message: str, status: int = 500) -> ServerMsg:
        return cls(type=MsgType.ERROR, data={"message": message}, status=status)

    @classmethod
    def move_reply(cls, moves: list[dict[str, Any]], status: int = 200) -> ServerMsg:
        return cls(type=MsgType.MOVE_REPLY, data={"moves": moves}, status=status)

    @classmethod
    def summary_ack(cls, status: int = 200) -> ServerMsg:
        return cls(type=MsgType.SUMMARY_ACK, status=status)


@dataclass
class ClientMsg:
    """引擎 → 远端消息"""
    type: MsgType
    data: dict[str, Any] = field(default_factory=dict)
    duel_id: str = ""
    timestamp: float = field(default_factory=time.time)

    def to_json(self) -> str:
        """序列化为 JSON 字符串"""
        return json.dumps({
            "type": self.type.value,
            "duel_id": self.duel_id,
            "timestamp": self.timestamp,
            "data": self.data,
        }, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> ClientMsg:
        """从 JSON 字符串反序列化"""
        obj = json.loads(raw)
        return cls(
            type=MsgType(obj["type"]),
            data=obj.get("data") or {},
            duel_id=obj.get("duel_id", ""),
            timestamp=obj.get("timestamp", 0.0),
        )

    # ---------- 工厂方法 ----------

    @classmethod
    def move_request(cls, snapshot: dict[str, Any], player_key: str) -> ClientMsg:
        return cls(
            type=MsgType.MOVE_REQUEST,
            data={"playerKey": player_key, "state": snapshot},
            duel_id=snapshot.get("duelId", ""),
        )

    @classmethod
    def summary_submit(cls, summary: dict[str, Any]) -> ClientMsg:
        return cls(
            type=MsgType.SUMMARY_SUBMIT,
            data={"summary": summary},
            duel_id=summary.get("duelId", ""),
        )
