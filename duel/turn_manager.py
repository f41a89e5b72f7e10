"""回合管理器模块
负责回合交接：交换行动方、跳过回合、摸牌阶段和回合开始修正

本模块将回合流转逻辑从 DuelEngine 中解耦，
使得回合规则可以独立测试。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from i18n import t as _t

from .constants import FieldPermanent
from .events import EventType
from .phase_fsm import PhaseFSM, TurnPhase
from .zones import LOOT, field_of, hand

if TYPE_CHECKING:
    from .context import ResolutionContext

logger = logging.getLogger(__name__)


class TurnManager:
    """回合管理器

    负责:
    - 行动方交换
    - 跳过回合（完整的一来一回：被跳过的玩家既不摸牌也不行动）
    - 摸牌阶段（1 张保底 + 每回合额外摸牌）
    - 回合开始修正递减与场上常驻卡效果
    """

    def __init__(self, ctx: ResolutionContext, fsm: PhaseFSM | None = None):
        """初始化回合管理器

        Args:
            ctx: 结算上下文
            fsm: 阶段状态机
        """
        self.ctx = ctx
        self.fsm = fsm or PhaseFSM()

    def end_turn(self) -> str:
        """结束当前玩家的回合

        Returns:
            交接后的行动方席位
        """
        state = self.ctx.state
        buffs = self.ctx.buffs
        outgoing = state.current_player

        self.fsm.transition(TurnPhase.TURN_TRANSITION)
        buffs.tick_end_of_turn(outgoing)
        logger.info(_t("log.turn_end", player=outgoing))
        self.ctx.emit(EventType.TURN_END, player=outgoing)

        incoming = state.opponent_of(outgoing)
        state.current_player = incoming

        if buffs.get(incoming).skip_next_turn:
            buffs.consume_one_shot(incoming, "skip_next_turn")
            buffs.tick(incoming)
            logger.info(_t("log.turn_skipped", player=incoming))
            self.ctx.emit(EventType.TURN_SKIPPED, player=incoming)

            # 控制权回到原玩家，不进行摸牌阶段
            state.current_player = outgoing
            state.turn_number += 1
            logger.info(_t("log.turn_start", player=outgoing))
            self.ctx.emit(EventType.TURN_START, player=outgoing, turn=state.turn_number)
        else:
            self.start_turn(incoming)

        self.fsm.transition(TurnPhase.AWAITING_ACTION)
        return state.current_player

    def start_turn(self, player_key: str) -> None:
        """执行回合开始流程：摸牌阶段 → 修正递减 → 场上常驻卡"""
        state = self.ctx.state
        state.turn_number += 1
        logger.info(_t("log.turn_start", player=player_key))
        self.ctx.emit(EventType.TURN_START, player=player_key, turn=state.turn_number)

        self.draw_phase(player_key)
        self.ctx.buffs.tick(player_key)
        self.apply_field_permanents(player_key)

    def draw_phase(self, player_key: str) -> int:
        """摸牌阶段

        每次摸牌都独立受手牌上限和牌库为空的约束。

        Returns:
            实际摸到的张数
        """
        buffs = self.ctx.buffs
        if buffs.get(player_key).skip_next_draw:
            buffs.consume_one_shot(player_key, "skip_next_draw")
            logger.info("%s skips the draw phase", player_key)
            return 0

        draws = 1 + max(0, buffs.get(player_key).extra_draw_per_turn)
        drawn = 0
        for _ in range(draws):
            if self.ctx.draw_one(player_key) is not None:
                drawn += 1
        return drawn

    def apply_field_permanents(self, player_key: str) -> None:
        """场上常驻卡：突击背包从牌库额外摸 1 张，战术背包从战利品堆获得 1 张"""
        zones = self.ctx.zones
        for card in list(zones.cards(field_of(player_key))):
            if card.face_down:
                continue
            if card.card_id == FieldPermanent.ASSAULT_BACKPACK.value:
                self.ctx.draw_one(player_key)
            elif card.card_id == FieldPermanent.TACTICAL_BACKPACK.value:
                looted = zones.try_move(LOOT, hand(player_key), "first", face_down=False)
                if looted is not None:
                    logger.info(_t("log.draw", player=player_key))
                    self.ctx.emit(EventType.DRAW, player=player_key,
                                  cardId=looted.card_id, source="loot")
