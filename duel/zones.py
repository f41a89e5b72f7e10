# -*- coding: utf-8 -*-
"""
区域管理模块
负责玩家私有区域（手牌/场上/牌库/弃牌堆）和共享战利品堆之间的卡牌移动

卡牌只会被移动，不会被复制或凭空创建。
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TYPE_CHECKING, Union

from .card import CardInstance, normalize_card_id
from .constants import FIELD_LIMIT, HAND_LIMIT
from .exceptions import CapacityExceededError, InvalidZoneError, ZoneCardNotFoundError

if TYPE_CHECKING:
    from .state import DuelState

logger = logging.getLogger(__name__)


class Zone(Enum):
    """区域枚举"""
    HAND = "hand"
    FIELD = "field"
    DECK = "deck"
    DISCARD = "discard"
    LOOT = "loot"  # 共享，不属于任何玩家


# 玩家状态上的属性名
_ZONE_ATTRS = {
    Zone.HAND: "hand",
    Zone.FIELD: "field",
    Zone.DECK: "deck",
    Zone.DISCARD: "discard_pile",
}


@dataclass(frozen=True)
class ZoneRef:
    """区域引用：(席位, 区域)，共享区域的席位为 None"""
    zone: Zone
    owner: str | None = None

    def __str__(self) -> str:
        return f"{self.owner}.{self.zone.value}" if self.owner else self.zone.value


# 选择器: 索引 / 卡牌 ID / 谓词 / "first" / "last" / "random"
Selector = Union[int, str, Callable[[CardInstance], bool]]


class ZoneManager:
    """
    区域管理器

    负责:
    - 区域读取（缺失的区域按空列表处理）
    - 容量限制（手牌 ≤ 4，场上 ≤ 3）
    - 原子移动（先校验再修改）
    """

    def __init__(self, state: 'DuelState', rng: random.Random | None = None,
                 hand_limit: int = HAND_LIMIT, field_limit: int = FIELD_LIMIT):
        self.state = state
        self.rng = rng or random.Random()
        self.limits: dict[Zone, int] = {Zone.HAND: hand_limit, Zone.FIELD: field_limit}

    # ==================== 读取 ====================

    def cards(self, ref: ZoneRef) -> list[CardInstance]:
        """
        获取区域的卡牌列表（可直接修改）

        Raises:
            InvalidZoneError: 区域引用不合法
        """
        if ref.zone is Zone.LOOT:
            if self.state.loot_pile is None:
                self.state.loot_pile = []
            return self.state.loot_pile

        attr = _ZONE_ATTRS.get(ref.zone)
        player = self.state.players.get(ref.owner) if ref.owner else None
        if attr is None or player is None:
            raise InvalidZoneError(zone=str(ref))

        cards = getattr(player, attr)
        if cards is None:
            cards = []
            setattr(player, attr, cards)
        return cards

    def has_room(self, ref: ZoneRef) -> bool:
        """区域是否还有空位"""
        limit = self.limits.get(ref.zone)
        return limit is None or len(self.cards(ref)) < limit

    # ==================== 选择 ====================

    def find_index(self, ref: ZoneRef, selector: Selector) -> int | None:
        """按选择器定位卡牌，未匹配时返回 None"""
        cards = self.cards(ref)
        if not cards:
            return None

        if isinstance(selector, bool):
            return None
        if isinstance(selector, int):
            return selector if 0 <= selector < len(cards) else None
        if callable(selector):
            matches = [i for i, c in enumerate(cards) if selector(c)]
            return matches[0] if matches else None
        if selector == "first":
            return 0
        if selector == "last":
            return len(cards) - 1
        if selector == "random":
            return self.rng.randrange(len(cards))

        try:
            wanted = normalize_card_id(selector)
        except ValueError:
            return None
        for i, c in enumerate(cards):
            if c.card_id == wanted:
                return i
        return None

    def random_index(self, ref: ZoneRef,
                     predicate: Callable[[CardInstance], bool] | None = None) -> int | None:
        """随机选择一张（可选过滤）卡牌的索引"""
        cards = self.cards(ref)
        candidates = [i for i, c in enumerate(cards) if predicate is None or predicate(c)]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    # ==================== 移动 ====================

    def move_card(self, source: ZoneRef, dest: ZoneRef, selector: Selector = "first",
                  *, face_down: bool | None = None) -> CardInstance:
        """
        将一张卡牌从 source 移动到 dest

        Args:
            source: 来源区域
            dest: 目标区域
            selector: 选择器
            face_down: 移动后的盖放状态；None 表示保持不变

        Returns:
            被移动的卡牌实例

        Raises:
            CapacityExceededError: 目标区域已满
            ZoneCardNotFoundError: 选择器没有匹配任何卡牌
            InvalidZoneError: 区域引用不合法
        """
        src_cards = self.cards(source)
        dst_cards = self.cards(dest)

        if not self.has_room(dest):
            raise CapacityExceededError(zone=dest.zone.value, limit=self.limits[dest.zone])

        index = self.find_index(source, selector)
        if index is None:
            raise ZoneCardNotFoundError(zone=source.zone.value, selector=selector)

        card = src_cards.pop(index)
        if face_down is not None:
            card.face_down = face_down
        dst_cards.append(card)
        logger.debug("Moved %s: %s → %s", card.card_id, source, dest)
        return card

    def try_move(self, source: ZoneRef, dest: ZoneRef, selector: Selector = "first",
                 **kwargs: Any) -> CardInstance | None:
        """同 move_card，但容量不足或未匹配时静默返回 None"""
        if not self.has_room(dest):
            return None
        index = self.find_index(source, selector)
        if index is None:
            return None
        return self.move_card(source, dest, index, **kwargs)

    # ==================== 结算区 ====================
    # 用后弃置的卡牌在结算期间不占用任何区域：take 取出，结算后 put 放入弃牌堆

    def take(self, source: ZoneRef, selector: Selector) -> CardInstance:
        """
        从区域取出一张卡牌（进入结算区）

        Raises:
            ZoneCardNotFoundError: 选择器没有匹配任何卡牌
        """
        index = self.find_index(source, selector)
        if index is None:
            raise ZoneCardNotFoundError(zone=source.zone.value, selector=selector)
        return self.cards(source).pop(index)

    def put(self, dest: ZoneRef, card: CardInstance, *, face_down: bool | None = None) -> None:
        """
        把结算区的卡牌放入区域

        Raises:
            CapacityExceededError: 目标区域已满
        """
        if not self.has_room(dest):
            raise CapacityExceededError(zone=dest.zone.value, limit=self.limits[dest.zone])
        if face_down is not None:
            card.face_down = face_down
        self.cards(dest).append(card)
        logger.debug("Put %s → %s", card.card_id, dest)


def hand(owner: str) -> ZoneRef:
    return ZoneRef(Zone.HAND, owner)


def field_of(owner: str) -> ZoneRef:
    return ZoneRef(Zone.FIELD, owner)


def deck(owner: str) -> ZoneRef:
    return ZoneRef(Zone.DECK, owner)


def discard(owner: str) -> ZoneRef:
    return ZoneRef(Zone.DISCARD, owner)


LOOT = ZoneRef(Zone.LOOT)
