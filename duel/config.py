"""对决配置中心 (SSOT - 单一事实来源)

所有可配置的对决参数应在此定义，支持从环境变量覆盖。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .constants import FIELD_LIMIT, HAND_LIMIT, MAX_HP, START_HP, PlayerKey
from .exceptions import ConfigurationError

DEFAULT_CATALOG_PATH = str(Path(__file__).parent / "data" / "cards.json")


def _get_env_float(key: str, default: float) -> float:
    """从环境变量获取浮点数配置"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            pass
    return default


def _get_env_int(key: str, default: int) -> int:
    """从环境变量获取整数配置"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_env_bool(key: str, default: bool) -> bool:
    """从环境变量获取布尔配置"""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class DuelConfig:
    """对决配置类 (不可变)

    所有配置项支持通过环境变量覆盖：
    - DUEL_OPENING_HAND: 开局手牌数
    - DUEL_HUMAN_PLAYER: 可交互操作的玩家席位
    - DUEL_STRICT_INTERACTIVE: 非交互席位出牌时抛异常而非静默忽略
    - DUEL_BOT_URL: 远端机器人 WebSocket 地址
    - DUEL_REQUEST_TIMEOUT: 远端请求超时秒数
    - DUEL_CATALOG: 卡牌目录 JSON 路径
    """
    # ==================== 规则数值 ====================
    start_hp: int = START_HP
    max_hp: int = MAX_HP
    hand_limit: int = HAND_LIMIT
    field_limit: int = FIELD_LIMIT
    opening_hand_size: int = field(
        default_factory=lambda: _get_env_int("DUEL_OPENING_HAND", 3)
    )

    # ==================== 交互 ====================
    human_player: str = field(
        default_factory=lambda: os.environ.get("DUEL_HUMAN_PLAYER", PlayerKey.PLAYER1.value)
    )
    strict_interactive: bool = field(
        default_factory=lambda: _get_env_bool("DUEL_STRICT_INTERACTIVE", False)
    )

    # ==================== 远端 ====================
    bot_server_url: str = field(
        default_factory=lambda: os.environ.get("DUEL_BOT_URL", "ws://localhost:8765")
    )
    request_timeout: float = field(
        default_factory=lambda: _get_env_float("DUEL_REQUEST_TIMEOUT", 10.0)
    )

    # ==================== 数据 ====================
    catalog_path: str = field(
        default_factory=lambda: os.environ.get("DUEL_CATALOG", DEFAULT_CATALOG_PATH)
    )

    # ==================== 日志与调试 ====================
    log_level: str = field(
        default_factory=lambda: os.environ.get("DUEL_LOG_LEVEL", "INFO")
    )
    debug_mode: bool = field(
        default_factory=lambda: _get_env_bool("DUEL_DEBUG", False)
    )
    event_history: int = field(
        default_factory=lambda: _get_env_int("DUEL_EVENT_HISTORY", 200)
    )

    def __post_init__(self) -> None:
        if self.human_player not in (PlayerKey.PLAYER1.value, PlayerKey.PLAYER2.value):
            raise ConfigurationError(config_key="human_player")
        if not 0 <= self.opening_hand_size <= self.hand_limit:
            raise ConfigurationError(config_key="opening_hand_size")
        if self.request_timeout <= 0:
            raise ConfigurationError(config_key="request_timeout")

    @classmethod
    def from_env(cls) -> DuelConfig:
        """从环境变量创建配置实例"""
        return cls()


# 全局配置单例
_config: DuelConfig | None = None


def get_config() -> DuelConfig:
    """获取全局配置实例（懒加载）"""
    global _config
    if _config is None:
        _config = DuelConfig.from_env()
    return _config


def reset_config() -> None:
    """重置配置（用于测试）"""
    global _config
    _config = None
