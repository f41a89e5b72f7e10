# -*- coding: utf-8 -*-
"""
效果模式注册表
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import EffectPattern, ParsedEffect
from .patterns import default_patterns, is_auto_trigger_trap, should_auto_discard

if TYPE_CHECKING:
    from ..card import CardDefinition

logger = logging.getLogger(__name__)


class EffectRegistry:
    """
    效果模式注册表

    持有有序模式表，负责把卡牌定义解析为 ParsedEffect。
    效果文本是静态的，解析结果按卡牌 ID 缓存。
    """

    def __init__(self, patterns: list[EffectPattern] | None = None):
        self._patterns: list[EffectPattern] = list(patterns or [])
        self._cache: dict[str, ParsedEffect] = {}

    def register(self, pattern: EffectPattern) -> None:
        """在表尾追加模式（顺序即结算顺序）"""
        self._patterns.append(pattern)
        self._cache.clear()

    @property
    def patterns(self) -> list[EffectPattern]:
        return list(self._patterns)

    def parse(self, card: 'CardDefinition') -> ParsedEffect:
        """解析卡牌效果"""
        cached = self._cache.get(card.card_id)
        if cached is not None:
            return cached

        text = card.effect.lower()
        primitives = []
        for pattern in self._patterns:
            if pattern.applies_to(card):
                primitives.extend(pattern.match(text, card))

        auto_trigger = is_auto_trigger_trap(card)
        parsed = ParsedEffect(
            primitives=tuple(primitives),
            auto_trigger=auto_trigger,
            auto_discard=auto_trigger or should_auto_discard(card),
        )
        self._cache[card.card_id] = parsed
        logger.debug("Parsed %s → %s", card, [k.value for k in parsed.kinds()])
        return parsed

    def clear_cache(self) -> None:
        self._cache.clear()


def create_default_registry() -> EffectRegistry:
    """
    创建按默认顺序注册全部模式的注册表

    Returns:
        已注册所有模式的注册表
    """
    return EffectRegistry(default_patterns())
