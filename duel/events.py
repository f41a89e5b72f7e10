# -*- coding: utf-8 -*-
"""
事件总线系统
实现观察者模式，用于解耦结算引擎和展示层

结算过程中产生的每个事件（伤害、摸牌、摧毁……）都会发布到总线，
同时被收集进本次动作的事件列表，供展示层驱动动画和日志。
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """对决事件类型枚举（value 即对外的 kind 字段）"""
    # 回合相关
    TURN_START = "turn-start"
    TURN_END = "turn-end"
    TURN_SKIPPED = "turn-skipped"

    # 卡牌相关
    CARD_PLAYED = "card-played"
    DRAW = "draw"
    DISCARD = "discard"
    STEAL = "steal"
    CARD_DESTROYED = "card-destroyed"
    SPAWN = "spawn"

    # 陷阱相关
    TRAP_SET = "trap-set"
    TRAP_TRIGGERED = "trap-triggered"
    TRAP_DISARMED = "trap-disarmed"
    TRAP_REVEALED = "trap-revealed"

    # 体力相关
    DAMAGE = "damage"
    HEAL = "heal"

    # 修正相关
    BUFF_APPLIED = "buff-applied"
    SKIP_FLAG = "skip-flag"
    HEAL_BLOCK = "heal-block"
    HAND_LOCK = "hand-lock"

    # 对决状态
    GAME_OVER = "game-over"

    # 日志
    LOG_MESSAGE = "log"


@dataclass
class DuelEvent:
    """
    对决事件数据类
    携带事件的所有相关信息
    """
    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)

    # 事件控制
    cancelled: bool = False

    @property
    def kind(self) -> str:
        return self.event_type.value

    @property
    def player(self) -> str | None:
        return self.data.get('player')

    @property
    def target(self) -> str | None:
        return self.data.get('target')

    @property
    def amount(self) -> int:
        return self.data.get('amount', 0)

    @property
    def card_id(self) -> str | None:
        return self.data.get('cardId')

    @property
    def message(self) -> str:
        return self.data.get('message', '')

    def cancel(self) -> None:
        """取消后续处理器"""
        self.cancelled = True

    def to_dict(self) -> dict[str, Any]:
        """对外格式：{"kind": ..., **data}"""
        return {"kind": self.kind, **self.data}


# 事件处理器类型
EventHandler = Callable[[DuelEvent], None]


class EventBus:
    """
    事件总线

    全局处理器先于按类型订阅的处理器执行；同组内按优先级从高到低。
    任一处理器调用 event.cancel() 后，后续处理器不再收到该事件。
    最近的事件保存在定长历史中（max_history=0 表示不保留）。
    """

    def __init__(self, max_history: int = 100):
        self._handlers: dict[EventType, list[tuple[int, EventHandler]]] = defaultdict(list)
        self._global_handlers: list[tuple[int, EventHandler]] = []
        self._history: deque[DuelEvent] = deque(maxlen=max(0, max_history))

    @staticmethod
    def _insert(handlers: list[tuple[int, EventHandler]], priority: int,
                handler: EventHandler) -> None:
        # 同优先级保持订阅顺序
        index = next((i for i, (p, _) in enumerate(handlers) if p < priority), len(handlers))
        handlers.insert(index, (priority, handler))

    def subscribe(self, event_type: EventType, handler: EventHandler,
                  priority: int = 0) -> None:
        """
        订阅某一类事件

        Args:
            event_type: 事件类型
            handler: 事件处理器
            priority: 优先级（数字越大越先执行）
        """
        self._insert(self._handlers[event_type], priority, handler)

    def subscribe_all(self, handler: EventHandler, priority: int = 0) -> None:
        self._insert(self._global_handlers, priority, handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers[event_type] = [
            entry for entry in self._handlers[event_type] if entry[1] != handler
        ]

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """从全局和所有类型订阅中移除 handler"""
        self._global_handlers = [e for e in self._global_handlers if e[1] != handler]
        for event_type in list(self._handlers):
            self.unsubscribe(event_type, handler)

    def _dispatch(self, handlers: list[tuple[int, EventHandler]], event: DuelEvent) -> None:
        for _, handler in list(handlers):
            if event.cancelled:
                return
            try:
                handler(event)
            except Exception:
                # 展示层的故障不能中断结算
                logger.exception("Event handler %r failed on %s", handler, event.kind)

    def publish(self, event: DuelEvent) -> DuelEvent:
        """发布事件并返回它（处理器可能已将其取消）"""
        self._history.append(event)
        self._dispatch(self._global_handlers, event)
        self._dispatch(self._handlers.get(event.event_type, []), event)
        return event

    def emit(self, event_type: EventType, **kwargs: Any) -> DuelEvent:
        return self.publish(DuelEvent(event_type=event_type, data=kwargs))

    def clear(self) -> None:
        """清除所有订阅（历史保留）"""
        self._handlers.clear()
        self._global_handlers.clear()

    def get_history(self, count: int = 10) -> list[DuelEvent]:
        """最近 count 条事件，按发布顺序"""
        return list(self._history)[-count:] if count > 0 else []


class EventRecorder:
    """
    单次动作的事件收集器

    结算器通过 emit() 同时发布到总线并记录到本次动作的事件列表。
    """

    def __init__(self, bus: EventBus | None = None):
        self.bus = bus
        self.events: list[DuelEvent] = []

    def emit(self, event_type: EventType, **kwargs: Any) -> DuelEvent:
        event = DuelEvent(event_type=event_type, data=kwargs)
        self.events.append(event)
        if self.bus is not None:
            self.bus.publish(event)
        return event

    def kinds(self) -> list[str]:
        return [e.kind for e in self.events]
