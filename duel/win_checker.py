"""胜利条件检查器模块
负责在每个动作结束后判定对决是否结束

本模块将胜利判定逻辑从 DuelEngine 中解耦，
使得胜利条件可以独立测试。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from i18n import t as _t

if TYPE_CHECKING:
    from .state import DuelState


@dataclass(slots=True)
class GameOverInfo:
    """对决结束信息"""

    is_over: bool
    winner: str | None = None
    message: str = ""


class WinConditionChecker:
    """胜利条件检查器

    每个动作的所有效果结算完毕后调用一次：
    - 对手体力归零 → 行动方获胜（优先判定）
    - 否则行动方体力归零 → 对手获胜
    """

    def __init__(self, state: DuelState):
        self.state = state

    def check_game_over(self, actor: str) -> GameOverInfo:
        """检查对决是否结束

        Args:
            actor: 本次动作的行动方

        Returns:
            GameOverInfo: 对决结束信息
        """
        if self.state.winner is not None:
            return GameOverInfo(True, self.state.winner,
                                _t("log.game_over", winner=self.state.winner))

        opponent = self.state.opponent_of(actor)
        if self.state.player(opponent).is_defeated:
            winner = actor
        elif self.state.player(actor).is_defeated:
            winner = opponent
        else:
            return GameOverInfo(is_over=False)

        return GameOverInfo(True, winner, _t("log.game_over", winner=winner))
