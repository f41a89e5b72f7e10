# -*- coding: utf-8 -*-
"""
效果原语与模式基类

效果文本被一组有序模式扫描，每个模式产出零个或多个 EffectPrimitive，
再由 CardResolver 依次应用到对决状态上。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..card import CardDefinition


class EffectKind(Enum):
    """效果原语类型"""
    DAMAGE = "damage"
    AOE_DAMAGE = "aoe_damage"
    DOT = "dot"
    HEAL = "heal"
    DRAW = "draw"
    DISCARD = "discard"
    STEAL = "steal"
    SKIP_FLAG = "skip_flag"
    HEAL_BLOCK = "heal_block"
    FIELD_MUTATION = "field_mutation"
    BUFF_GRANT = "buff_grant"
    DRAIN = "drain"
    HAND_LOCK = "hand_lock"
    SPAWN_COMPANION = "spawn_companion"


class Target(Enum):
    """作用对象（相对出牌者）"""
    SELF = "self"
    OPPONENT = "opponent"
    BOTH = "both"


class FieldOp(str, Enum):
    """场上操作"""
    DESTROY = "destroy"
    DESTROY_INFECTED = "destroy_infected"
    DISARM = "disarm"
    REVEAL = "reveal"


class BuffOp(str, Enum):
    """增益授予"""
    NEXT_ATTACK_BONUS = "next_attack_bonus"
    NEXT_ATTACK_MULT = "next_attack_mult"
    GUN_FLAT_BONUS = "gun_flat_bonus"
    EXTRA_DRAW = "extra_draw_per_turn"


@dataclass(frozen=True)
class EffectPrimitive:
    """
    效果原语

    Attributes:
        kind: 原语类型
        amount: 数值（伤害、治疗、张数……）
        turns: 持续回合数
        target: 作用对象
        category: 类别过滤（类型或标签），None 表示不过滤
        random: 是否随机选择
        option: 子操作（FieldOp / BuffOp / 跳过标志名）
        mult: 倍率（仅 BuffOp.NEXT_ATTACK_MULT）
        tags: 标签限制（仅攻击增益）
    """
    kind: EffectKind
    amount: int = 0
    turns: int = 0
    target: Target = Target.OPPONENT
    category: str | None = None
    random: bool = False
    option: str | None = None
    mult: float = 1.0
    tags: frozenset[str] | None = None


@dataclass(frozen=True)
class ParsedEffect:
    """一张卡牌的解析结果（按卡牌 ID 缓存）"""
    primitives: tuple[EffectPrimitive, ...] = field(default_factory=tuple)
    auto_trigger: bool = False
    auto_discard: bool = False

    def kinds(self) -> list[EffectKind]:
        return [p.kind for p in self.primitives]


class EffectPattern(ABC):
    """
    效果模式抽象基类

    模式之间互不排斥：同一段文本可以同时命中多个模式。
    """

    #: 仅对指定类型的卡牌生效（None 表示所有类型）
    card_type: str | None = None

    def applies_to(self, card: 'CardDefinition') -> bool:
        return self.card_type is None or card.card_type.value == self.card_type

    @abstractmethod
    def match(self, text: str, card: 'CardDefinition') -> list[EffectPrimitive]:
        """
        扫描效果文本

        Args:
            text: 小写化的效果文本
            card: 卡牌定义

        Returns:
            命中的原语列表（未命中为空）
        """
