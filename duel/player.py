# -*- coding: utf-8 -*-
"""
玩家状态模块
定义单个玩家的体力、四个私有区域和修正袋
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field as dc_field
from typing import Any

from .buffs import ModifierBag
from .card import CardInstance
from .constants import MAX_HP, MIN_HP, START_HP

logger = logging.getLogger(__name__)


def _coerce_zone(raw: Any) -> list[CardInstance]:
    """将外部区域数据转为实例列表，缺失或非法条目降级为空"""
    if not isinstance(raw, list):
        return []
    cards: list[CardInstance] = []
    for entry in raw:
        try:
            cards.append(CardInstance.from_raw(entry))
        except (ValueError, TypeError):
            logger.warning("Dropping malformed card entry: %r", entry)
    return cards


@dataclass
class PlayerState:
    """
    玩家状态

    Attributes:
        hp: 体力值，始终在 [0, 200] 内
        hand: 手牌（≤ 4）
        field: 场上（≤ 3）
        deck: 牌库，索引 0 为牌顶
        discard_pile: 弃牌堆
        buffs: 修正袋
    """
    hp: int = START_HP
    hand: list[CardInstance] = dc_field(default_factory=list)
    field: list[CardInstance] = dc_field(default_factory=list)
    deck: list[CardInstance] = dc_field(default_factory=list)
    discard_pile: list[CardInstance] = dc_field(default_factory=list)
    buffs: ModifierBag = dc_field(default_factory=ModifierBag)

    @property
    def hand_count(self) -> int:
        return len(self.hand)

    @property
    def is_defeated(self) -> bool:
        return self.hp <= MIN_HP

    def card_ids(self) -> Counter[str]:
        """四个私有区域中卡牌 ID 的多重集"""
        return Counter(
            c.card_id for zone in (self.hand, self.field, self.deck, self.discard_pile)
            for c in zone
        )

    def to_dict(self, conceal_hand: bool = False) -> dict[str, Any]:
        """
        转换为外部快照

        Args:
            conceal_hand: 展示层隐藏手牌（只加 concealed 标记，不改变 isFaceDown）
        """
        hand = [c.to_dict() for c in self.hand]
        if conceal_hand:
            hand = [{**entry, "concealed": True} for entry in hand]
        return {
            "hp": self.hp,
            "hand": hand,
            "field": [c.to_dict() for c in self.field],
            "deck": [c.to_dict() for c in self.deck],
            "discardPile": [c.to_dict() for c in self.discard_pile],
            "buffs": self.buffs.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PlayerState:
        """从外部数据恢复，缺失的区域视为空"""
        data = data or {}
        try:
            hp = int(data.get("hp", START_HP))
        except (TypeError, ValueError):
            hp = START_HP
        return cls(
            hp=max(MIN_HP, min(MAX_HP, hp)),
            hand=_coerce_zone(data.get("hand")),
            field=_coerce_zone(data.get("field")),
            deck=_coerce_zone(data.get("deck")),
            discard_pile=_coerce_zone(data.get("discardPile", data.get("discard_pile"))),
            buffs=ModifierBag.from_dict(data.get("buffs")),
        )
