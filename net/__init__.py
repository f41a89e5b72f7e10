"""远端对手通信模块
基于 WebSocket 的请求/回复，以及入站载荷校验
"""

from .client import BotClient
from .models import ActionModel, BotMoveModel, DuelInitModel, PlayerInitModel, ServerReplyModel
from .protocol import ClientMsg, MsgType, ServerMsg

__all__ = [
    "MsgType", "ServerMsg", "ClientMsg",
    "ActionModel", "BotMoveModel", "DuelInitModel", "PlayerInitModel", "ServerReplyModel",
    "BotClient",
]
