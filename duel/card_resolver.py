"""卡牌效果解析器

把 EffectRegistry 解析出的效果原语依次应用到对决状态:
- 伤害类: 单体 / 范围 / 持续 / 吸血（全部经由 DamageSystem.damage_foe）
- 体力类: 治疗 / 禁疗
- 区域类: 摸牌 / 弃牌 / 偷牌 / 场上操作 / 召唤同伴
- 修正类: 跳过标志 / 攻击增益 / 手牌封锁

所有方法依赖 ResolutionContext。解析器本身不做 I/O，也不抛出校验异常：
目标缺失、区域已满等情况一律降级为无操作。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from i18n import t as _t

from .buffs import DamageOverTime
from .card import CardType
from .effects import (
    BuffOp,
    EffectKind,
    EffectPrimitive,
    EffectRegistry,
    FieldOp,
    ParsedEffect,
    Target,
    create_default_registry,
)
from .events import EventType
from .zones import deck, discard, field_of, hand

if TYPE_CHECKING:
    from .card import CardDefinition, CardInstance
    from .context import ResolutionContext

logger = logging.getLogger(__name__)


class CardResolver:
    """卡牌效果解析器：按固定顺序应用一张卡牌的全部效果原语。"""

    def __init__(self, ctx: ResolutionContext, registry: EffectRegistry | None = None) -> None:
        self.ctx = ctx
        self.registry = registry or create_default_registry()
        self._handlers: dict[EffectKind, Callable[[str, CardDefinition, EffectPrimitive], None]] = {
            EffectKind.DAMAGE: self._apply_damage,
            EffectKind.AOE_DAMAGE: self._apply_aoe,
            EffectKind.DOT: self._apply_dot,
            EffectKind.HEAL: self._apply_heal,
            EffectKind.DRAW: self._apply_draw,
            EffectKind.DISCARD: self._apply_discard,
            EffectKind.STEAL: self._apply_steal,
            EffectKind.SKIP_FLAG: self._apply_skip_flag,
            EffectKind.HEAL_BLOCK: self._apply_heal_block,
            EffectKind.FIELD_MUTATION: self._apply_field_mutation,
            EffectKind.BUFF_GRANT: self._apply_buff_grant,
            EffectKind.DRAIN: self._apply_drain,
            EffectKind.HAND_LOCK: self._apply_hand_lock,
            EffectKind.SPAWN_COMPANION: self._apply_spawn,
        }

    def parse(self, card: CardDefinition | None) -> ParsedEffect:
        """解析卡牌效果；未知卡牌视为无效果"""
        if card is None:
            return ParsedEffect()
        return self.registry.parse(card)

    def resolve(self, actor: str, card: CardDefinition | None) -> ParsedEffect:
        """
        结算一张卡牌的效果

        Args:
            actor: 出牌者席位
            card: 卡牌定义，未知卡牌为 None（无操作）

        Returns:
            解析结果（供编排器决定是否弃置）
        """
        parsed = self.parse(card)
        if card is None:
            return parsed

        for primitive in parsed.primitives:
            self._handlers[primitive.kind](actor, card, primitive)
        return parsed

    # ==================== 工具 ====================

    def _target_key(self, actor: str, target: Target) -> str:
        if target is Target.SELF:
            return actor
        return self.ctx.state.opponent_of(actor)

    def _is_face_down_trap(self, card: CardInstance) -> bool:
        if not card.face_down:
            return False
        definition = self.ctx.catalog.find(card.card_id)
        return definition is None or definition.card_type is CardType.TRAP

    def _is_infected(self, card: CardInstance) -> bool:
        """只认感染类型的卡，仅带 infected 标签的不算"""
        definition = self.ctx.catalog.find(card.card_id)
        return definition is not None and definition.card_type is CardType.INFECTED

    # ==================== 伤害 ====================

    def _apply_damage(self, actor, card, p):
        opponent = self.ctx.state.opponent_of(actor)
        self.ctx.damage.damage_foe(actor, opponent, card, p.amount)

    def _apply_aoe(self, actor, card, p):
        """对手先受伤，然后是自己"""
        opponent = self.ctx.state.opponent_of(actor)
        self.ctx.damage.damage_foe(actor, opponent, card, p.amount)
        self.ctx.damage.damage_foe(actor, actor, card, p.amount)

    def _apply_dot(self, actor, card, p):
        """立即结算一次，并在对手修正袋中记录（不做逐回合结算）"""
        opponent = self.ctx.state.opponent_of(actor)
        self.ctx.damage.damage_foe(actor, opponent, card, p.amount)
        self.ctx.buffs.apply(opponent, dot=DamageOverTime(p.amount, p.turns))
        self.ctx.emit(EventType.BUFF_APPLIED, player=opponent, buff="dot",
                      amount=p.amount, turns=p.turns)

    def _apply_drain(self, actor, card, p):
        """吸血：按实际造成的伤害回复自身"""
        opponent = self.ctx.state.opponent_of(actor)
        lost = self.ctx.damage.damage_foe(actor, opponent, card, p.amount)
        self.ctx.damage.heal(actor, lost)

    # ==================== 体力 ====================

    def _apply_heal(self, actor, card, p):
        self.ctx.damage.heal(actor, p.amount)

    def _apply_heal_block(self, actor, card, p):
        """覆盖写入，不叠加"""
        opponent = self.ctx.state.opponent_of(actor)
        self.ctx.buffs.apply(opponent, block_heal_turns=p.turns)
        logger.info(_t("log.heal_block", player=opponent, turns=p.turns))
        self.ctx.emit(EventType.HEAL_BLOCK, player=opponent, turns=p.turns)

    # ==================== 区域 ====================

    def _apply_draw(self, actor, card, p):
        for _ in range(p.amount):
            if self.ctx.draw_one(actor, p.category) is None:
                break

    def _apply_discard(self, actor, card, p):
        """随机弃牌（可按类别过滤）"""
        victim = self._target_key(actor, p.target)
        zones = self.ctx.zones
        for _ in range(p.amount):
            index = zones.random_index(hand(victim), lambda c: self.ctx.matches(c, p.category))
            if index is None:
                break
            moved = zones.move_card(hand(victim), discard(victim), index, face_down=False)
            logger.info(_t("log.discard", player=victim, card=moved.card_id))
            self.ctx.emit(EventType.DISCARD, player=victim, cardId=moved.card_id,
                          forced=victim != actor)

    def _apply_steal(self, actor, card, p):
        """从对手手牌随机偷取，受自身手牌上限约束"""
        victim = self.ctx.state.opponent_of(actor)
        zones = self.ctx.zones
        for _ in range(p.amount):
            if not zones.has_room(hand(actor)):
                break
            index = zones.random_index(hand(victim), lambda c: self.ctx.matches(c, p.category))
            if index is None:
                break
            moved = zones.move_card(hand(victim), hand(actor), index, face_down=False)
            logger.info(_t("log.steal", player=actor, victim=victim))
            self.ctx.emit(EventType.STEAL, player=actor, victim=victim, cardId=moved.card_id)

    def _apply_field_mutation(self, actor, card, p):
        opponent = self.ctx.state.opponent_of(actor)
        zones = self.ctx.zones
        enemy_field = field_of(opponent)
        op = FieldOp(p.option)

        if op is FieldOp.DESTROY:
            if p.random:
                index = zones.random_index(enemy_field)
            else:
                index = zones.find_index(enemy_field, "first")
        elif op is FieldOp.DESTROY_INFECTED:
            index = zones.find_index(enemy_field, self._is_infected)
        else:
            index = zones.random_index(enemy_field, self._is_face_down_trap)

        if index is None:
            logger.debug("%s found no target on %s field", op.value, opponent)
            return

        if op is FieldOp.REVEAL:
            revealed = zones.cards(enemy_field)[index]
            revealed.face_down = False
            logger.info(_t("log.trap_revealed", player=actor, card=revealed.card_id))
            self.ctx.emit(EventType.TRAP_REVEALED, player=actor, target=opponent,
                          cardId=revealed.card_id)
            return

        moved = zones.move_card(enemy_field, discard(opponent), index, face_down=False)
        if op is FieldOp.DISARM:
            logger.info(_t("log.trap_disarmed", player=actor, card=moved.card_id))
            self.ctx.emit(EventType.TRAP_DISARMED, player=actor, target=opponent,
                          cardId=moved.card_id)
        else:
            logger.info(_t("log.card_destroyed", player=actor, card=moved.card_id))
            self.ctx.emit(EventType.CARD_DESTROYED, player=actor, target=opponent,
                          cardId=moved.card_id)

    def _apply_spawn(self, actor, card, p):
        """把牌库中第一张感染卡移到自己场上（移动而非创建）"""
        zones = self.ctx.zones
        if not zones.has_room(field_of(actor)):
            return
        index = zones.find_index(
            deck(actor), lambda c: self.ctx.matches(c, CardType.INFECTED.value))
        if index is None:
            return
        moved = zones.move_card(deck(actor), field_of(actor), index, face_down=False)
        logger.info(_t("log.spawn", player=actor, card=moved.card_id))
        self.ctx.emit(EventType.SPAWN, player=actor, cardId=moved.card_id)

    # ==================== 修正 ====================

    def _apply_skip_flag(self, actor, card, p):
        key = self._target_key(actor, p.target)
        self.ctx.buffs.apply(key, **{p.option: True})
        logger.info(_t("log.skip_flag", player=key, flag=p.option))
        self.ctx.emit(EventType.SKIP_FLAG, player=key, flag=p.option)

    def _apply_hand_lock(self, actor, card, p):
        opponent = self.ctx.state.opponent_of(actor)
        self.ctx.buffs.apply(opponent, hand_lock_turns=p.turns)
        logger.info(_t("log.hand_lock", player=opponent, turns=p.turns))
        self.ctx.emit(EventType.HAND_LOCK, player=opponent, turns=p.turns)

    def _apply_buff_grant(self, actor, card, p):
        buffs = self.ctx.buffs
        bag = buffs.get(actor)
        op = BuffOp(p.option)

        if op is BuffOp.NEXT_ATTACK_BONUS:
            buffs.apply(actor, next_attack_bonus=p.amount, attack_restrict_tags=p.tags)
            value: float = p.amount
        elif op is BuffOp.NEXT_ATTACK_MULT:
            buffs.apply(actor, next_attack_mult=p.mult, attack_restrict_tags=p.tags)
            value = p.mult
        elif op is BuffOp.GUN_FLAT_BONUS:
            buffs.apply(actor, gun_flat_bonus=bag.gun_flat_bonus + p.amount)
            value = bag.gun_flat_bonus
        else:
            buffs.apply(actor, extra_draw_per_turn=bag.extra_draw_per_turn + p.amount)
            value = bag.extra_draw_per_turn

        logger.info(_t("log.buff_applied", player=actor, buff=op.value))
        self.ctx.emit(EventType.BUFF_APPLIED, player=actor, buff=op.value, value=value,
                      tags=sorted(p.tags) if p.tags else None)
