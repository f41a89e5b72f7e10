"""回合阶段有限状态机 (Phase FSM)

提供回合阶段的合法转换验证，防止非法阶段跳转。
例如：对决结束后不能再回到等待行动阶段。
"""

from __future__ import annotations

import logging
from enum import Enum

from .exceptions import InvalidActionError

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    """回合阶段"""
    AWAITING_ACTION = "awaiting_action"   # 当前玩家可以行动
    TURN_TRANSITION = "turn_transition"   # 交换行动方、摸牌、结算回合开始修正
    FINISHED = "finished"                 # 已决出胜者


# 合法的阶段转换表
# key: 当前阶段, value: 允许转换到的目标阶段集合
VALID_TRANSITIONS: dict[TurnPhase, set[TurnPhase]] = {
    TurnPhase.AWAITING_ACTION: {TurnPhase.TURN_TRANSITION, TurnPhase.FINISHED},
    TurnPhase.TURN_TRANSITION: {TurnPhase.AWAITING_ACTION, TurnPhase.FINISHED},
    TurnPhase.FINISHED: set(),
}


class InvalidPhaseTransition(InvalidActionError):
    """非法阶段转换异常

    当尝试进行不合法的阶段转换时抛出，
    例如从 FINISHED 回到 AWAITING_ACTION。
    """

    def __init__(self, current_phase: TurnPhase, target_phase: TurnPhase):
        message = f"Invalid phase transition: {current_phase.name} → {target_phase.name}"
        super().__init__(message=message, action_type="phase_transition")
        self.from_phase = current_phase
        self.to_phase = target_phase


class PhaseFSM:
    """回合阶段有限状态机

    使用方式::

        fsm = PhaseFSM()
        fsm.transition(TurnPhase.TURN_TRANSITION)   # OK
        fsm.transition(TurnPhase.AWAITING_ACTION)   # OK
        fsm.transition(TurnPhase.FINISHED)          # OK，此后任何转换都会抛出
    """

    def __init__(self, phase: TurnPhase = TurnPhase.AWAITING_ACTION) -> None:
        self._phase = phase

    @property
    def current(self) -> TurnPhase:
        """当前阶段"""
        return self._phase

    @property
    def is_finished(self) -> bool:
        return self._phase is TurnPhase.FINISHED

    def transition(self, target: TurnPhase) -> None:
        """转换到目标阶段

        Raises:
            InvalidPhaseTransition: 如果转换不合法
        """
        if not self.can_transition(target):
            raise InvalidPhaseTransition(self._phase, target)
        logger.debug("Phase transition: %s → %s", self._phase.name, target.name)
        self._phase = target

    def can_transition(self, target: TurnPhase) -> bool:
        return target in VALID_TRANSITIONS.get(self._phase, set())

    def can_act(self) -> bool:
        """当前是否接受玩家动作"""
        return self._phase is TurnPhase.AWAITING_ACTION
