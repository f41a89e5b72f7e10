# -*- coding: utf-8 -*-
"""
增益/修正存储模块
每名玩家持有一个 ModifierBag，由结算器和回合管理器读写

修正分三类:
- 一次性 (one-shot): 被下一次符合条件的动作读取后立即复位
- 回合计数 (turn-scoped): 在持有者回合开始时递减，归零即失效
- 常驻 (persistent): 如 gun_flat_bonus，持续到对决结束
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, TYPE_CHECKING

from .card import coerce_tags

if TYPE_CHECKING:
    from .state import DuelState

logger = logging.getLogger(__name__)


@dataclass
class DamageOverTime:
    """持续伤害记录（仅存储，不在回合中自动结算）"""
    amount: int
    turns_remaining: int

    def to_dict(self) -> dict[str, int]:
        return {"amount": self.amount, "turnsRemaining": self.turns_remaining}


@dataclass
class ModifierBag:
    """
    玩家修正袋

    Attributes:
        extra_draw_per_turn: 每回合额外摸牌数（常驻）
        block_heal_turns: 禁疗剩余回合数
        skip_next_turn: 跳过下一个回合
        skip_next_draw: 跳过下一次摸牌阶段
        next_attack_bonus: 下一次伤害的固定加成（一次性）
        next_attack_mult: 下一次伤害的倍率（一次性，中性值 1.0）
        attack_restrict_tags: 上述一次性加成仅对带这些标签的卡生效
        gun_flat_bonus: 枪械类伤害的固定加成（常驻）
        dot: 持续伤害记录
        hand_lock_turns: 手牌封锁剩余回合数（感染卡）
    """
    extra_draw_per_turn: int = 0
    block_heal_turns: int = 0
    skip_next_turn: bool = False
    skip_next_draw: bool = False
    next_attack_bonus: int = 0
    next_attack_mult: float = 1.0
    attack_restrict_tags: frozenset[str] | None = None
    gun_flat_bonus: int = 0
    dot: DamageOverTime | None = None
    hand_lock_turns: int = 0

    @property
    def has_attack_modifiers(self) -> bool:
        """是否存在待消耗的一次性攻击修正"""
        return (
            self.next_attack_bonus != 0
            or self.next_attack_mult != 1.0
            or self.attack_restrict_tags is not None
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "extraDrawPerTurn": self.extra_draw_per_turn,
            "blockHealTurns": self.block_heal_turns,
            "skipNextTurn": self.skip_next_turn,
            "skipNextDraw": self.skip_next_draw,
            "nextAttackBonus": self.next_attack_bonus,
            "nextAttackMult": self.next_attack_mult,
            "attackRestrictTags": (
                sorted(self.attack_restrict_tags)
                if self.attack_restrict_tags is not None else None
            ),
            "gunFlatBonus": self.gun_flat_bonus,
            "dot": self.dot.to_dict() if self.dot else None,
            "handLockTurns": self.hand_lock_turns,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ModifierBag:
        """从外部数据恢复（字段缺失时使用中性值）"""
        if not data:
            return cls()
        restrict = data.get("attackRestrictTags")
        dot = data.get("dot")
        return cls(
            extra_draw_per_turn=int(data.get("extraDrawPerTurn", 0) or 0),
            block_heal_turns=int(data.get("blockHealTurns", 0) or 0),
            skip_next_turn=bool(data.get("skipNextTurn", False)),
            skip_next_draw=bool(data.get("skipNextDraw", False)),
            next_attack_bonus=int(data.get("nextAttackBonus", 0) or 0),
            next_attack_mult=float(data.get("nextAttackMult", 1.0) or 1.0),
            attack_restrict_tags=coerce_tags(restrict) if restrict is not None else None,
            gun_flat_bonus=int(data.get("gunFlatBonus", 0) or 0),
            dot=(
                DamageOverTime(int(dot.get("amount", 0)), int(dot.get("turnsRemaining", 0)))
                if isinstance(dot, dict) else None
            ),
            hand_lock_turns=int(data.get("handLockTurns", 0) or 0),
        )


# 允许通过 apply() 修改的字段名
_BAG_FIELDS = frozenset(f.name for f in fields(ModifierBag))

# 一次性攻击修正及其中性值
ONE_SHOT_ATTACK_MODIFIERS: dict[str, Any] = {
    "next_attack_bonus": 0,
    "next_attack_mult": 1.0,
    "attack_restrict_tags": None,
}

# 其余可单独消耗的一次性修正
_ONE_SHOT_NEUTRAL: dict[str, Any] = {
    **ONE_SHOT_ATTACK_MODIFIERS,
    "skip_next_turn": False,
    "skip_next_draw": False,
}


@dataclass(frozen=True)
class AttackModifiers:
    """一次伤害计算读取到的攻击修正快照"""
    bonus: int = 0
    mult: float = 1.0
    restrict_tags: frozenset[str] | None = None

    def applies_to(self, card_tags: frozenset[str]) -> bool:
        """标签限制下是否生效"""
        if self.restrict_tags is None:
            return True
        return bool(self.restrict_tags & card_tags)


class BuffStore:
    """
    增益存储

    对 DuelState 中各玩家 ModifierBag 的读写入口
    """

    def __init__(self, state: 'DuelState'):
        self.state = state

    def get(self, player_key: str) -> ModifierBag:
        """获取玩家的修正袋"""
        return self.state.player(player_key).buffs

    def apply(self, player_key: str, **patch: Any) -> ModifierBag:
        """
        覆盖写入修正字段

        Raises:
            KeyError: 未知的修正字段
        """
        bag = self.get(player_key)
        for name, value in patch.items():
            if name not in _BAG_FIELDS:
                raise KeyError(name)
            setattr(bag, name, value)
        logger.debug("Buffs applied to %s: %s", player_key, patch)
        return bag

    def consume_one_shot(self, player_key: str, name: str) -> Any:
        """
        读取并复位一个一次性修正

        Returns:
            复位前的值
        """
        if name not in _ONE_SHOT_NEUTRAL:
            raise KeyError(name)
        bag = self.get(player_key)
        value = getattr(bag, name)
        setattr(bag, name, _ONE_SHOT_NEUTRAL[name])
        return value

    def consume_attack_modifiers(self, player_key: str) -> AttackModifiers:
        """
        读取并复位全部一次性攻击修正

        只要被一次伤害计算读取就会复位，即使标签限制导致修正未生效。
        """
        return AttackModifiers(
            bonus=self.consume_one_shot(player_key, "next_attack_bonus"),
            mult=self.consume_one_shot(player_key, "next_attack_mult"),
            restrict_tags=self.consume_one_shot(player_key, "attack_restrict_tags"),
        )

    def tick(self, player_key: str) -> None:
        """
        回合开始时调用一次：递减回合计数类修正
        """
        bag = self.get(player_key)
        if bag.block_heal_turns > 0:
            bag.block_heal_turns -= 1
            logger.debug("%s block_heal_turns → %d", player_key, bag.block_heal_turns)

    def tick_end_of_turn(self, player_key: str) -> None:
        """回合结束时调用一次：递减手牌封锁"""
        bag = self.get(player_key)
        if bag.hand_lock_turns > 0:
            bag.hand_lock_turns -= 1
            logger.debug("%s hand_lock_turns → %d", player_key, bag.hand_lock_turns)
