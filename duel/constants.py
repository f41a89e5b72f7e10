# -*- coding: utf-8 -*-
"""
对决常量模块
定义对决中使用的各类常量和枚举

本模块集中管理所有魔法字符串和常量值，
避免硬编码分散在代码各处。
"""

from enum import Enum


class PlayerKey(str, Enum):
    """
    玩家席位枚举

    继承 str 以便直接与 "player1" / "player2" 比较
    """
    PLAYER1 = "player1"
    PLAYER2 = "player2"

    @property
    def opponent(self) -> "PlayerKey":
        """对手席位"""
        return PlayerKey.PLAYER2 if self is PlayerKey.PLAYER1 else PlayerKey.PLAYER1


# ========== 数值上限 ==========
MIN_HP = 0
MAX_HP = 200
START_HP = 200
HAND_LIMIT = 4
FIELD_LIMIT = 3

# 卡牌 ID 固定宽度（"3" → "003"）
CARD_ID_WIDTH = 3

# 卡背（仅用于展示，不可打出）
CARD_BACK_ID = "000"


class FieldPermanent(str, Enum):
    """回合开始时生效的场上常驻卡"""
    ASSAULT_BACKPACK = "054"    # 额外从牌库摸 1 张
    TACTICAL_BACKPACK = "056"   # 额外从战利品堆获得 1 张


# ========== 用后弃置判定 ==========
AUTO_DISCARD_TAGS = frozenset({"discard_after_use", "consumable", "one_use"})

AUTO_DISCARD_PHRASES = (
    "discard after use",
    "discarded after use",
    "single use",
    "one-time use",
)

DISCARD_THIS_CARD_PHRASE = "discard this card"
