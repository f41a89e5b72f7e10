"""对决异常模块
定义卡牌对决中的各类异常，提供明确的错误类型和信息

分类:
- ActionValidationError: 调用方的请求不合法，状态保持不变
- CardLookupError: 未知卡牌，解析器会降级为无效果卡牌
- TransportError: 远端不可达，状态停留在上一次合法配置
"""

from i18n import t as _t


class DuelError(Exception):
    """对决异常基类

    所有对决相关的异常都应该继承此类，
    提供统一的异常处理接口。
    """

    def __init__(self, message: str | None = None, details: dict | None = None):
        """初始化对决异常

        Args:
            message: 错误消息
            details: 额外的错误详情（可选）
        """
        if message is None:
            message = _t("exc.duel_error")
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== 动作校验异常 ====================


class ActionValidationError(DuelError):
    """动作校验异常基类

    调用方提交了不合法的动作（越界索引、容量超限、非本方回合等）。
    抛出时对决状态保证未被修改。
    """


class InvalidActionError(ActionValidationError):
    """无效动作异常

    当玩家尝试执行不合法的动作时抛出
    """

    def __init__(
        self,
        message: str | None = None,
        action_type: str | None = None,
        player_key: str | None = None,
        index: int | None = None,
    ):
        if message is None:
            if index is not None:
                message = _t("exc.invalid_index", index=index)
            else:
                message = _t("exc.invalid_action")
        details = {}
        if action_type:
            details["action_type"] = action_type
        if player_key:
            details["player_key"] = player_key
        if index is not None:
            details["index"] = index
        super().__init__(message, details)
        self.action_type = action_type
        self.player_key = player_key
        self.index = index


class NotPlayerTurnError(ActionValidationError):
    """非玩家回合异常

    当非当前回合玩家尝试执行回合专属操作时抛出
    """

    def __init__(
        self,
        message: str | None = None,
        player_key: str | None = None,
        current_player: str | None = None,
    ):
        if message is None:
            message = _t("exc.not_player_turn")
        details = {}
        if player_key:
            details["player_key"] = player_key
        if current_player:
            details["current_player"] = current_player
        super().__init__(message, details)
        self.player_key = player_key
        self.current_player = current_player


class HandLockedError(ActionValidationError):
    """手牌封锁异常

    被感染卡封锁手牌期间尝试出牌或弃牌时抛出
    """

    def __init__(self, message: str | None = None, player_key: str | None = None,
                 turns: int = 0):
        if message is None:
            message = _t("exc.hand_locked")
        super().__init__(message, {"player_key": player_key, "turns": turns})
        self.player_key = player_key
        self.turns = turns


class DuelFinishedError(ActionValidationError):
    """对决已结束异常

    对决已决出胜者后仍尝试修改状态时抛出
    """

    def __init__(self, message: str | None = None, winner: str | None = None):
        if message is None:
            message = _t("exc.duel_finished")
        super().__init__(message, {"winner": winner} if winner else None)
        self.winner = winner


class DuelBusyError(ActionValidationError):
    """对决忙碌异常

    等待远端响应期间，同一对决拒绝本地修改
    """

    def __init__(self, message: str | None = None):
        if message is None:
            message = _t("exc.duel_busy")
        super().__init__(message)


# ==================== 区域异常 ====================


class ZoneError(ActionValidationError):
    """区域操作异常基类"""

    def __init__(self, message: str | None = None, zone: str | None = None):
        if message is None:
            message = _t("exc.invalid_zone", zone=zone)
        super().__init__(message, {"zone": zone} if zone else None)
        self.zone = zone


class CapacityExceededError(ZoneError):
    """容量超限异常

    手牌超过 4 张或场上超过 3 张时抛出
    """

    def __init__(self, message: str | None = None, zone: str | None = None,
                 limit: int = 0):
        if message is None:
            message = _t("exc.capacity_exceeded", zone=zone, limit=limit)
        super().__init__(message, zone)
        self.limit = limit
        self.details["limit"] = limit


class ZoneCardNotFoundError(ZoneError):
    """区域内未找到卡牌异常

    选择器没有匹配到任何卡牌时抛出
    """

    def __init__(self, message: str | None = None, zone: str | None = None,
                 selector: object = None):
        if message is None:
            message = _t("exc.zone_card_not_found", zone=zone)
        super().__init__(message, zone)
        self.selector = selector
        if selector is not None:
            self.details["selector"] = repr(selector)


class InvalidZoneError(ZoneError):
    """无效区域异常"""


# ==================== 查找异常 ====================


class CardLookupError(DuelError, LookupError):
    """卡牌未找到异常

    卡牌目录中不存在该标识符时抛出。
    解析器捕获后降级为无效果卡牌，不会中断结算。
    """

    def __init__(self, message: str | None = None, card_id: str | None = None):
        if message is None:
            message = _t("exc.card_lookup", card_id=card_id)
        super().__init__(message, {"card_id": card_id} if card_id else None)
        self.card_id = card_id


# ==================== 远端通信异常 ====================


class TransportError(DuelError):
    """远端通信异常

    提交机器人行动或对局总结失败（连接失败、超时、非 2xx 状态）。
    对决状态保持调用前的合法配置，可安全重试同一动作。
    """

    def __init__(
        self,
        message: str | None = None,
        reason: str | None = None,
        status: int | None = None,
        url: str | None = None,
    ):
        if message is None:
            message = _t("exc.transport", reason=reason or "unknown")
        details = {}
        if status is not None:
            details["status"] = status
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.reason = reason
        self.status = status
        self.url = url


# ==================== 配置/数据相关异常 ====================


class ConfigurationError(DuelError):
    """配置错误异常

    当对决配置有问题时抛出
    """

    def __init__(self, message: str | None = None, config_key: str | None = None):
        if message is None:
            message = _t("exc.config_error")
        super().__init__(message, {"config_key": config_key} if config_key else None)
        self.config_key = config_key


class DataLoadError(DuelError):
    """数据加载异常

    当加载卡牌目录文件失败时抛出
    """

    def __init__(
        self,
        message: str | None = None,
        file_path: str | None = None,
        reason: str | None = None,
    ):
        if message is None:
            message = _t("exc.data_load_error")
        details = {}
        if file_path:
            details["file_path"] = file_path
        if reason:
            details["reason"] = reason
        super().__init__(message, details)
        self.file_path = file_path
        self.reason = reason


# ==================== 工具函数 ====================


def raise_if_finished(winner: str | None) -> None:
    """检查对决是否已结束，已结束则抛出异常

    Args:
        winner: 当前胜者（None 表示未结束）

    Raises:
        DuelFinishedError: 如果对决已结束
    """
    if winner is not None:
        raise DuelFinishedError(winner=winner)
