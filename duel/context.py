# -*- coding: utf-8 -*-
"""ResolutionContext (结算上下文)

一次动作期间子系统 (CardResolver / TurnManager / DamageSystem) 共享的依赖集合:
对决状态、卡牌目录、随机源、事件收集器和配置。

每个动作创建一个新的上下文，事件收集器随之重置。
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from i18n import t as _t

from .buffs import BuffStore
from .card import CardCatalog, CardDefinition, CardInstance
from .config import DuelConfig
from .damage_system import DamageSystem
from .events import EventRecorder, EventType
from .exceptions import CardLookupError
from .zones import ZoneManager, deck, hand

if TYPE_CHECKING:
    from .state import DuelState

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """结算上下文"""
    state: 'DuelState'
    catalog: CardCatalog
    rng: random.Random = field(default_factory=random.Random)
    recorder: EventRecorder = field(default_factory=EventRecorder)
    config: DuelConfig = field(default_factory=DuelConfig)

    zones: ZoneManager = field(init=False)
    buffs: BuffStore = field(init=False)
    damage: DamageSystem = field(init=False)

    def __post_init__(self) -> None:
        self.zones = ZoneManager(self.state, self.rng,
                                 hand_limit=self.config.hand_limit,
                                 field_limit=self.config.field_limit)
        self.buffs = BuffStore(self.state)
        self.damage = DamageSystem(self.state, self.buffs, self.recorder,
                                   max_hp=self.config.max_hp)

    # ==================== 查询 ====================

    def lookup(self, card_id: Any) -> CardDefinition | None:
        """
        查找卡牌定义

        未知卡牌记录警告并返回 None，调用方按无效果卡牌处理。
        """
        try:
            return self.catalog.get(card_id)
        except CardLookupError as e:
            logger.warning(_t("log.unknown_card", card=e.card_id))
            return None

    def matches(self, card: CardInstance, category: str | None) -> bool:
        """卡牌实例是否属于给定类别（未知卡牌不属于任何类别）"""
        if category is None:
            return True
        definition = self.catalog.find(card.card_id)
        return definition is not None and definition.matches(category)

    def emit(self, event_type: EventType, **kwargs: Any):
        return self.recorder.emit(event_type, **kwargs)

    # ==================== 摸牌 ====================

    def draw_one(self, player_key: str, category: str | None = None) -> CardInstance | None:
        """
        摸一张牌

        指定类别时取牌库中第一张匹配的牌（不一定是牌顶），
        没有匹配时退化为普通摸牌。手牌已满或牌库为空时静默返回 None。
        """
        if not self.zones.has_room(hand(player_key)):
            logger.debug("%s hand full, draw skipped", player_key)
            return None
        cards = self.zones.cards(deck(player_key))
        if not cards:
            logger.debug("%s deck empty, draw skipped", player_key)
            return None

        selector: Any = "first"
        if category is not None:
            index = self.zones.find_index(deck(player_key),
                                          lambda c: self.matches(c, category))
            if index is not None:
                selector = index

        card = self.zones.move_card(deck(player_key), hand(player_key), selector,
                                    face_down=False)
        logger.info(_t("log.draw", player=player_key))
        self.emit(EventType.DRAW, player=player_key, cardId=card.card_id)
        return card
