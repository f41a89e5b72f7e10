# -*- coding: utf-8 -*-
"""
伤害系统模块
负责体力变更和伤害计算

本模块集中了对决中仅有的两个体力写入口：
- change_hp: 唯一允许修改 hp 的原语（钳制 + 禁疗）
- DamageSystem.damage_foe: 所有伤害类效果的唯一入口（消耗一次性攻击修正）
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from i18n import t as _t

from .buffs import BuffStore
from .constants import MAX_HP, MIN_HP
from .events import EventType

if TYPE_CHECKING:
    from .card import CardDefinition
    from .events import EventRecorder
    from .state import DuelState

logger = logging.getLogger(__name__)

GUN_TAG = "gun"


def change_hp(state: 'DuelState', player_key: str, delta: int,
              max_hp: int = MAX_HP) -> int:
    """
    修改玩家体力

    结果钳制在 [0, max_hp]；禁疗期间（block_heal_turns > 0）正向变化被完全屏蔽。
    体力归零本身不会结束对决，胜负由编排器在动作结束后统一判定。

    Args:
        state: 对决状态
        player_key: 玩家席位
        delta: 变化量（负数为扣减）
        max_hp: 体力上限

    Returns:
        实际变化量
    """
    player = state.player(player_key)
    if delta > 0 and player.buffs.block_heal_turns > 0:
        logger.debug("Heal of %d on %s blocked (%d turns left)",
                     delta, player_key, player.buffs.block_heal_turns)
        return 0

    old_hp = player.hp
    player.hp = max(MIN_HP, min(max_hp, old_hp + delta))
    return player.hp - old_hp


class DamageSystem:
    """
    伤害系统

    负责:
    - 伤害计算（一次性攻击修正 + 枪械常驻加成）
    - 治疗（受禁疗约束）
    - 发布 damage / heal 事件
    """

    def __init__(self, state: 'DuelState', buffs: BuffStore | None = None,
                 recorder: 'EventRecorder | None' = None, max_hp: int = MAX_HP):
        """
        初始化伤害系统

        Args:
            state: 对决状态
            buffs: 增益存储
            recorder: 本次动作的事件收集器
            max_hp: 体力上限
        """
        self.state = state
        self.buffs = buffs or BuffStore(state)
        self.recorder = recorder
        self.max_hp = max_hp

    def calculate_damage(self, actor: str, card: 'CardDefinition | None', base: int) -> int:
        """
        计算一次伤害的最终数值

        读取即消耗：一次性攻击修正在这里被复位，
        即使标签限制导致修正没有生效。
        """
        tags = card.tags if card is not None else frozenset()
        mods = self.buffs.consume_attack_modifiers(actor)

        amount = base
        if mods.applies_to(tags):
            amount = int(amount * mods.mult) + mods.bonus
        elif mods.restrict_tags is not None:
            logger.debug("Attack modifiers of %s discarded, %s not in %s",
                         actor, sorted(tags), sorted(mods.restrict_tags))

        if GUN_TAG in tags:
            amount += self.buffs.get(actor).gun_flat_bonus

        return max(0, amount)

    def damage_foe(self, actor: str, target: str, card: 'CardDefinition | None',
                   base: int) -> int:
        """
        造成伤害

        Args:
            actor: 伤害来源席位
            target: 目标席位（范围伤害时可以是自己）
            card: 造成伤害的卡牌定义，未知卡牌为 None
            base: 基础伤害

        Returns:
            目标实际失去的体力
        """
        amount = self.calculate_damage(actor, card, base)
        lost = -change_hp(self.state, target, -amount, self.max_hp)

        card_id = card.card_id if card is not None else None
        card_name = card.name if card is not None else "?"
        logger.info(_t("log.damage", target=target, amount=lost, card=card_name))
        if self.recorder is not None:
            self.recorder.emit(
                EventType.DAMAGE,
                player=actor,
                target=target,
                amount=lost,
                cardId=card_id,
                hp=self.state.player(target).hp,
            )
        return lost

    def heal(self, player_key: str, amount: int) -> int:
        """
        治疗

        禁疗期间静默失效，不抛异常。

        Returns:
            实际恢复的体力
        """
        if amount <= 0:
            return 0
        healed = change_hp(self.state, player_key, amount, self.max_hp)
        if healed == 0 and self.state.player(player_key).buffs.block_heal_turns > 0:
            logger.info(_t("log.heal_blocked", player=player_key))
            return 0

        logger.info(_t("log.heal", player=player_key, amount=healed))
        if self.recorder is not None:
            self.recorder.emit(
                EventType.HEAL,
                player=player_key,
                amount=healed,
                hp=self.state.player(player_key).hp,
            )
        return healed
