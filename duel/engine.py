# -*- coding: utf-8 -*-
"""
对决引擎模块
对决的唯一编排入口：出牌、弃牌、摸牌、结束回合、远端回合

每个入口都按以下顺序执行：
1. 校验（忙碌 / 已结束 / 行动方 / 索引 / 容量），失败时状态保持不变
2. 区域移动与效果结算
3. 胜负判定（每个动作只判定一次）
4. 返回状态快照与本次动作的事件列表
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from i18n import t as _t

from .card import CardCatalog, CardType
from .card_resolver import CardResolver
from .config import DuelConfig, get_config
from .context import ResolutionContext
from .effects import EffectRegistry, create_default_registry
from .events import DuelEvent, EventBus, EventRecorder, EventType
from .exceptions import (
    CapacityExceededError,
    DuelBusyError,
    HandLockedError,
    InvalidActionError,
    NotPlayerTurnError,
    raise_if_finished,
)
from .phase_fsm import PhaseFSM, TurnPhase
from .state import DuelState, create_duel_state
from .turn_manager import TurnManager
from .win_checker import WinConditionChecker
from .zones import deck, discard, field_of, hand

if TYPE_CHECKING:
    from net.client import BotClient

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """
    动作结果

    Attributes:
        action: 动作名（play_card / discard_card / draw_card / end_turn / remote_turn）
        player: 行动方席位
        applied: 动作是否生效（非交互席位的静默忽略为 False）
        state: 动作完成后的完整快照
        events: 本次动作产生的事件
        winner: 胜者席位
    """
    action: str
    player: str
    applied: bool = True
    state: dict[str, Any] = field(default_factory=dict)
    events: list[DuelEvent] = field(default_factory=list)
    winner: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "player": self.player,
            "applied": self.applied,
            "winner": self.winner,
            "state": self.state,
            "events": [e.to_dict() for e in self.events],
        }


class DuelEngine:
    """
    对决引擎

    每个实例独占一个 DuelState；多个对决之间不共享任何状态。
    随机源通过构造参数注入，便于测试复现。
    """

    def __init__(
        self,
        state: DuelState,
        catalog: CardCatalog | None = None,
        *,
        rng: random.Random | None = None,
        config: DuelConfig | None = None,
        event_bus: EventBus | None = None,
        registry: EffectRegistry | None = None,
    ):
        """
        初始化对决引擎

        Args:
            state: 对决状态（由引擎独占）
            catalog: 卡牌目录，默认从配置的路径加载
            rng: 随机源
            config: 对决配置
            event_bus: 事件总线（展示层订阅）
            registry: 效果模式注册表
        """
        self.config = config or get_config()
        self.catalog = catalog if catalog is not None else CardCatalog.load(self.config.catalog_path)
        self.rng = rng or random.Random()
        self.event_bus = event_bus or EventBus(max_history=self.config.event_history)
        self.registry = registry or create_default_registry()

        self._state = state
        self.fsm = PhaseFSM(TurnPhase.FINISHED if state.winner else TurnPhase.AWAITING_ACTION)

        # 远端往返期间阻止同一对决的本地修改
        self._lock = asyncio.Lock()
        self._busy = False

    # ==================== 只读属性 ====================

    @property
    def state(self) -> DuelState:
        """当前对决状态（远端回合提交后会被替换为新实例）"""
        return self._state

    @property
    def current_player(self) -> str:
        return self._state.current_player

    @property
    def winner(self) -> str | None:
        return self._state.winner

    @property
    def is_finished(self) -> bool:
        return self._state.is_finished

    @property
    def is_busy(self) -> bool:
        return self._busy

    def snapshot(self, conceal_hand_of: str | None = None) -> dict[str, Any]:
        return self._state.to_dict(conceal_hand_of=conceal_hand_of)

    # ==================== 公共入口 ====================

    def play_card(self, index: int, player_key: str | None = None,
                  *, interactive: bool = True) -> ActionResult:
        """
        打出手牌

        Args:
            index: 手牌索引
            player_key: 声明的行动方；与当前玩家不一致时抛出 NotPlayerTurnError
            interactive: 是否为交互式调用（只有配置的人类席位可以交互出牌）

        Raises:
            InvalidActionError: 索引越界
            CapacityExceededError: 场上已满（常驻卡 / 盖放陷阱）
            HandLockedError: 手牌被封锁
        """
        actor = self._guard("play_card", player_key)
        if interactive and not self._is_interactive(actor):
            return self._ignored("play_card", actor)

        ctx = self._context(self._state)
        self._do_play(ctx, actor, index)
        return self._settle(ctx, self.fsm, "play_card", actor)

    def discard_card(self, index: int, player_key: str | None = None,
                     *, interactive: bool = True) -> ActionResult:
        """
        从手牌弃置一张牌

        Raises:
            InvalidActionError: 索引越界
            HandLockedError: 手牌被封锁
        """
        actor = self._guard("discard_card", player_key)
        if interactive and not self._is_interactive(actor):
            return self._ignored("discard_card", actor)

        ctx = self._context(self._state)
        self._do_discard(ctx, actor, index)
        return self._settle(ctx, self.fsm, "discard_card", actor)

    def draw_card(self, player_key: str | None = None) -> ActionResult:
        """
        主动摸一张牌

        手牌已满时抛出 CapacityExceededError；牌库为空时为无操作。
        """
        actor = self._guard("draw_card", player_key)
        ctx = self._context(self._state)
        self._do_draw(ctx, actor)
        return self._settle(ctx, self.fsm, "draw_card", actor)

    def end_turn(self, player_key: str | None = None) -> ActionResult:
        """结束当前玩家的回合"""
        actor = self._guard("end_turn", player_key)
        ctx = self._context(self._state)
        TurnManager(ctx, self.fsm).end_turn()
        return self._settle(ctx, self.fsm, "end_turn", actor)

    async def play_remote_turn(self, client: BotClient, *,
                               auto_end_turn: bool = True) -> ActionResult:
        """
        由远端对手完成当前玩家的回合

        请求期间对决处于忙碌状态，同步入口会抛出 DuelBusyError。
        返回的行动在状态副本上依次应用，全部成功后才提交；
        任何失败（传输错误、非法行动）都会让状态保持请求前的样子。

        Raises:
            TransportError: 连接失败、超时或非 2xx 状态
            ActionValidationError: 远端返回的行动不合法
        """
        async with self._lock:
            actor = self._guard("remote_turn", None)
            self._busy = True
            try:
                moves = await client.request_move(self._state.to_dict(), actor)

                working = self._state.copy()
                fsm = PhaseFSM(self.fsm.current)
                ctx = self._context(working, publish=False)
                ended = False
                for move in moves:
                    if working.is_finished or ended:
                        break
                    ended = self._apply_move(ctx, fsm, actor, move.action, move.index)
                if auto_end_turn and not ended and not working.is_finished:
                    TurnManager(ctx, fsm).end_turn()

                result = self._settle(ctx, fsm, "remote_turn", actor)
            finally:
                self._busy = False

            # 全部成功才提交
            self._state = working
            self.fsm = fsm
            for event in ctx.recorder.events:
                self.event_bus.publish(event)
            logger.info("Remote turn of %s committed (%d events)", actor, len(result.events))
            return result

    async def submit_summary(self, client: BotClient) -> Any:
        """把对局总结提交给远端，失败时抛出 TransportError"""
        return await client.submit_summary(self.summary())

    def summary(self) -> dict[str, Any]:
        """对局总结（只读）"""
        state = self._state
        winner = state.winner
        return {
            "duelId": state.duel_id,
            "winner": winner,
            "loser": state.opponent_of(winner) if winner else None,
            "winnerId": state.player_ids.get(winner) if winner else None,
            "turns": state.turn_number,
            "players": {
                key: {
                    "playerId": state.player_ids.get(key),
                    "hp": p.hp,
                    "hand": len(p.hand),
                    "field": len(p.field),
                    "deck": len(p.deck),
                    "discardPile": len(p.discard_pile),
                }
                for key, p in state.players.items()
            },
        }

    # ==================== 校验 ====================

    def _guard(self, action: str, player_key: str | None) -> str:
        if self._busy:
            raise DuelBusyError()
        raise_if_finished(self._state.winner)
        actor = self._state.current_player
        if player_key is not None and player_key != actor:
            raise NotPlayerTurnError(player_key=player_key, current_player=actor)
        logger.debug("%s by %s", action, actor)
        return actor

    def _is_interactive(self, actor: str) -> bool:
        if actor == self.config.human_player:
            return True
        if self.config.strict_interactive:
            raise NotPlayerTurnError(player_key=actor, current_player=actor)
        return False

    def _ignored(self, action: str, actor: str) -> ActionResult:
        logger.debug("%s ignored for non-interactive %s", action, actor)
        return ActionResult(action=action, player=actor, applied=False,
                            state=self._state.to_dict(), winner=self._state.winner)

    @staticmethod
    def _check_hand_index(ctx: ResolutionContext, actor: str, index: Any, action: str) -> None:
        cards = ctx.zones.cards(hand(actor))
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(cards):
            raise InvalidActionError(action_type=action, player_key=actor, index=index)
        lock = ctx.buffs.get(actor).hand_lock_turns
        if lock > 0:
            raise HandLockedError(player_key=actor, turns=lock)

    # ==================== 动作实现 ====================

    def _context(self, state: DuelState, publish: bool = True) -> ResolutionContext:
        recorder = EventRecorder(self.event_bus if publish else None)
        return ResolutionContext(state=state, catalog=self.catalog, rng=self.rng,
                                 recorder=recorder, config=self.config)

    def _do_play(self, ctx: ResolutionContext, actor: str, index: int) -> None:
        self._check_hand_index(ctx, actor, index, "play_card")
        zones = ctx.zones
        instance = zones.cards(hand(actor))[index]
        definition = ctx.lookup(instance.card_id)
        resolver = CardResolver(ctx, self.registry)
        parsed = resolver.parse(definition)
        is_trap = definition is not None and definition.card_type is CardType.TRAP
        name = definition.name if definition is not None else instance.card_id

        if is_trap and not parsed.auto_trigger:
            # 普通陷阱：盖放在场上，等待揭示，不结算
            zones.move_card(hand(actor), field_of(actor), index, face_down=True)
            logger.info(_t("log.trap_set", player=actor))
            ctx.emit(EventType.TRAP_SET, player=actor)
            return

        if parsed.auto_discard:
            # 结算区：不占用场上格子，结算后进入弃牌堆
            played = zones.take(hand(actor), index)
            logger.info(_t("log.card_played", player=actor, card=name))
            ctx.emit(EventType.CARD_PLAYED, player=actor, cardId=played.card_id)
            if is_trap:
                logger.info(_t("log.trap_triggered", player=actor, card=name))
                ctx.emit(EventType.TRAP_TRIGGERED, player=actor, cardId=played.card_id)
            resolver.resolve(actor, definition)
            zones.put(discard(actor), played, face_down=False)
            ctx.emit(EventType.DISCARD, player=actor, cardId=played.card_id, forced=False)
            return

        # 常驻卡：先上场（场上已满则抛出，状态不变），再结算
        played = zones.move_card(hand(actor), field_of(actor), index, face_down=False)
        logger.info(_t("log.card_played", player=actor, card=name))
        ctx.emit(EventType.CARD_PLAYED, player=actor, cardId=played.card_id)
        resolver.resolve(actor, definition)

    def _do_discard(self, ctx: ResolutionContext, actor: str, index: int) -> None:
        self._check_hand_index(ctx, actor, index, "discard_card")
        moved = ctx.zones.move_card(hand(actor), discard(actor), index, face_down=False)
        logger.info(_t("log.discard", player=actor, card=moved.card_id))
        ctx.emit(EventType.DISCARD, player=actor, cardId=moved.card_id, forced=False)

    def _do_draw(self, ctx: ResolutionContext, actor: str) -> None:
        if not ctx.zones.has_room(hand(actor)):
            raise CapacityExceededError(zone="hand", limit=self.config.hand_limit)
        if not ctx.zones.cards(deck(actor)):
            logger.debug("%s deck empty, draw is a no-op", actor)
            return
        ctx.draw_one(actor)

    def _apply_move(self, ctx: ResolutionContext, fsm: PhaseFSM, actor: str,
                    action: str, index: int | None) -> bool:
        """
        应用一条远端行动

        Returns:
            该行动是否结束了回合
        """
        if action == "play":
            self._do_play(ctx, actor, index)
        elif action == "discard":
            self._do_discard(ctx, actor, index)
        elif action == "draw":
            self._do_draw(ctx, actor)
        elif action == "end_turn":
            TurnManager(ctx, fsm).end_turn()
            return True
        else:
            raise InvalidActionError(action_type=action, player_key=actor)

        # 远端行动之间也要逐个判定胜负
        self._check_winner(ctx, fsm, actor)
        return False

    # ==================== 收尾 ====================

    def _check_winner(self, ctx: ResolutionContext, fsm: PhaseFSM, actor: str) -> None:
        state = ctx.state
        if state.winner is not None:
            return
        info = WinConditionChecker(state).check_game_over(actor)
        if info.is_over:
            state.winner = info.winner
            fsm.transition(TurnPhase.FINISHED)
            logger.info(info.message)
            ctx.emit(EventType.GAME_OVER, winner=info.winner,
                     playerId=state.player_ids.get(info.winner))

    def _settle(self, ctx: ResolutionContext, fsm: PhaseFSM, action: str,
                actor: str) -> ActionResult:
        """动作完成后统一判定胜负并生成结果"""
        self._check_winner(ctx, fsm, actor)
        return ActionResult(
            action=action,
            player=actor,
            state=ctx.state.to_dict(),
            events=list(ctx.recorder.events),
            winner=ctx.state.winner,
        )


def create_duel(
    payload: Any,
    catalog: CardCatalog | None = None,
    *,
    rng: random.Random | None = None,
    config: DuelConfig | None = None,
    event_bus: EventBus | None = None,
) -> DuelEngine:
    """
    根据初始化载荷创建对决

    载荷包含两名玩家的标识与牌库，可选共享战利品堆和先手覆盖；
    未指定先手时由随机源掷硬币决定。双方按配置摸起始手牌。

    Args:
        payload: dict 或 DuelInitModel

    Raises:
        pydantic.ValidationError: 载荷格式不合法
    """
    from net.models import DuelInitModel

    init = payload if isinstance(payload, DuelInitModel) else DuelInitModel.model_validate(payload)
    config = config or get_config()
    rng = rng or random.Random()

    state = create_duel_state(
        init.player1.deck,
        init.player2.deck,
        loot_pile=init.loot_pile,
        first_player=init.first_player,
        rng=rng,
        shuffle=init.shuffle,
        start_hp=config.start_hp,
        player_ids={"player1": init.player1.player_id, "player2": init.player2.player_id},
        duel_id=init.duel_id,
    )
    engine = DuelEngine(state, catalog, rng=rng, config=config, event_bus=event_bus)

    ctx = engine._context(state)
    for key in state.players:
        for _ in range(config.opening_hand_size):
            if ctx.draw_one(key) is None:
                break
    return engine
