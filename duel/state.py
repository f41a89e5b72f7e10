# -*- coding: utf-8 -*-
"""
对决状态模块
对决的根状态：两名玩家、共享战利品堆、当前回合玩家和胜者

每场对决独占一个 DuelState 实例，只能通过 DuelEngine 的入口修改。
"""

from __future__ import annotations

import copy
import logging
import random
import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from .card import CardInstance, normalize_card_id
from .constants import PlayerKey
from .exceptions import InvalidActionError
from .player import PlayerState, _coerce_zone

logger = logging.getLogger(__name__)


@dataclass
class DuelState:
    """
    对决根状态

    Attributes:
        players: 席位 → 玩家状态
        loot_pile: 共享战利品堆
        current_player: 当前行动席位
        winner: 胜者席位，None 表示对决未结束
        turn_number: 已开始的回合数
        duel_id: 对决标识
        player_ids: 席位 → 外部玩家标识
    """
    players: dict[str, PlayerState] = field(default_factory=lambda: {
        PlayerKey.PLAYER1.value: PlayerState(),
        PlayerKey.PLAYER2.value: PlayerState(),
    })
    loot_pile: list[CardInstance] = field(default_factory=list)
    current_player: str = PlayerKey.PLAYER1.value
    winner: str | None = None
    turn_number: int = 1
    duel_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    player_ids: dict[str, str] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    def player(self, key: str) -> PlayerState:
        """
        获取玩家状态

        Raises:
            InvalidActionError: 未知席位
        """
        state = self.players.get(key)
        if state is None:
            raise InvalidActionError(player_key=str(key))
        return state

    def opponent_of(self, key: str) -> str:
        return PlayerKey(key).opponent.value

    def card_ids(self) -> Counter[str]:
        """全局卡牌多重集（两名玩家的四个区域 + 战利品堆）"""
        total: Counter[str] = Counter(c.card_id for c in self.loot_pile)
        for p in self.players.values():
            total.update(p.card_ids())
        return total

    def copy(self) -> DuelState:
        """深拷贝（用于事务回滚）"""
        return copy.deepcopy(self)

    def to_dict(self, conceal_hand_of: str | None = None) -> dict[str, Any]:
        """
        完整快照

        Args:
            conceal_hand_of: 展示层需要隐藏手牌的席位（如对手视角）
        """
        return {
            "duelId": self.duel_id,
            "players": {
                key: p.to_dict(conceal_hand=(key == conceal_hand_of))
                for key, p in self.players.items()
            },
            "playerIds": dict(self.player_ids),
            "lootPile": [c.to_dict() for c in self.loot_pile],
            "currentPlayer": self.current_player,
            "winner": self.winner,
            "turnNumber": self.turn_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DuelState:
        """从外部快照恢复（对格式不规范的数据做降级处理）"""
        raw_players = data.get("players") or {}
        players = {
            key.value: PlayerState.from_dict(raw_players.get(key.value))
            for key in PlayerKey
        }
        current = data.get("currentPlayer", PlayerKey.PLAYER1.value)
        if current not in _VALID_KEYS:
            current = PlayerKey.PLAYER1.value
        winner = data.get("winner")
        return cls(
            players=players,
            loot_pile=_coerce_zone(data.get("lootPile")),
            current_player=current,
            winner=winner if winner in _VALID_KEYS else None,
            turn_number=int(data.get("turnNumber", 1) or 1),
            duel_id=str(data.get("duelId") or uuid.uuid4().hex[:12]),
            player_ids=dict(data.get("playerIds") or {}),
        )


_VALID_KEYS = frozenset(k.value for k in PlayerKey)


def _to_instances(cards: Iterable[Any]) -> list[CardInstance]:
    return [CardInstance(normalize_card_id(c)) for c in cards]


def create_duel_state(
    deck1: Iterable[Any],
    deck2: Iterable[Any],
    *,
    loot_pile: Iterable[Any] = (),
    first_player: str | None = None,
    rng: random.Random | None = None,
    shuffle: bool = True,
    start_hp: int = 200,
    player_ids: dict[str, str] | None = None,
    duel_id: str | None = None,
) -> DuelState:
    """
    创建初始对决状态

    Args:
        deck1 / deck2: 两名玩家的牌库（卡牌 ID，数字或字符串均可）
        loot_pile: 共享战利品堆
        first_player: 指定先手；为 None 时掷硬币决定
        rng: 随机源（洗牌与掷硬币）
        shuffle: 是否洗牌
        start_hp: 初始体力
    """
    rng = rng or random.Random()
    decks = [_to_instances(deck1), _to_instances(deck2)]
    loot = _to_instances(loot_pile)
    if shuffle:
        for d in decks:
            rng.shuffle(d)
        rng.shuffle(loot)

    if first_player is None:
        # 掷硬币
        first_player = PlayerKey.PLAYER1.value if rng.random() < 0.5 else PlayerKey.PLAYER2.value
    elif first_player not in _VALID_KEYS:
        raise InvalidActionError(action_type="create_duel", player_key=str(first_player))

    state = DuelState(
        players={
            PlayerKey.PLAYER1.value: PlayerState(hp=start_hp, deck=decks[0]),
            PlayerKey.PLAYER2.value: PlayerState(hp=start_hp, deck=decks[1]),
        },
        loot_pile=loot,
        current_player=first_player,
        player_ids=dict(player_ids or {}),
    )
    if duel_id:
        state.duel_id = duel_id
    logger.info("Duel %s created, %s goes first", state.duel_id, first_player)
    return state
