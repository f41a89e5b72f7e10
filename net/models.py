"""对决载荷 Pydantic 校验模型

为引擎入口和远端往返提供严格的输入校验:
  - DuelInitModel: 对决初始化载荷（双方标识与牌库）
  - ActionModel: 玩家动作请求
  - BotMoveModel: 远端对手返回的一条行动
  - ServerReplyModel: 远端回复外层结构

设计原则:
  - 校验模型与内部 dataclass 分离 (校验层 vs 业务层)
  - 卡牌标识符在校验时统一规范化为 3 位补零字符串
  - 校验失败抛出 pydantic.ValidationError，由调用方统一处理
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from duel.card import normalize_card_id


def _normalize_ids(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("card list must be an array")
    return [normalize_card_id(v) for v in value]


# ====================================================================== #
#  对决初始化                                                              #
# ====================================================================== #


class PlayerInitModel(BaseModel):
    """单个玩家的初始化数据"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    player_id: str = Field(min_length=1, max_length=64, alias="playerId")
    deck: list[str] = Field(default_factory=list)

    @field_validator("player_id", mode="before")
    @classmethod
    def coerce_player_id(cls, v: Any) -> str:
        return str(v) if isinstance(v, int) else v

    @field_validator("deck", mode="before")
    @classmethod
    def normalize_deck(cls, v: Any) -> list[str]:
        return _normalize_ids(v)


class DuelInitModel(BaseModel):
    """对决初始化载荷"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    player1: PlayerInitModel
    player2: PlayerInitModel
    loot_pile: list[str] = Field(default_factory=list, alias="lootPile")
    first_player: Literal["player1", "player2"] | None = Field(default=None, alias="firstPlayer")
    duel_id: str | None = Field(default=None, max_length=64, alias="duelId")
    shuffle: bool = True

    @field_validator("loot_pile", mode="before")
    @classmethod
    def normalize_loot(cls, v: Any) -> list[str]:
        return _normalize_ids(v)


# ====================================================================== #
#  动作                                                                   #
# ====================================================================== #

ActionName = Literal["play", "discard", "draw", "end_turn"]


class ActionModel(BaseModel):
    """玩家动作请求"""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    action: ActionName
    index: int | None = Field(default=None, ge=0, le=3, alias="cardIndex")
    player_key: Literal["player1", "player2"] | None = Field(default=None, alias="playerKey")

    @model_validator(mode="after")
    def index_required_for_hand_actions(self) -> ActionModel:
        if self.index is None and self.action in ("play", "discard"):
            raise ValueError("cardIndex is required for play/discard")
        return self


class BotMoveModel(ActionModel):
    """远端对手返回的一条行动（字段同 ActionModel，允许附加说明）"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    note: str = Field(default="", max_length=200)


# ====================================================================== #
#  远端回复                                                                #
# ====================================================================== #


class ServerReplyModel(BaseModel):
    """远端回复外层结构

    status 采用 HTTP 语义：2xx 表示成功。
    """

    model_config = ConfigDict(extra="ignore")

    status: int = Field(ge=100, le=599)
    moves: list[BotMoveModel] = Field(default_factory=list)
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

