"""卡牌系统模块
定义卡牌类型、卡牌定义、卡牌实例和卡牌目录
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator

from .constants import CARD_ID_WIDTH
from .exceptions import CardLookupError, DataLoadError

logger = logging.getLogger(__name__)


class CardType(Enum):
    """卡牌类型枚举"""

    ATTACK = "attack"  # 攻击
    DEFENSE = "defense"  # 防御
    TRAP = "trap"  # 陷阱
    TACTICAL = "tactical"  # 战术
    LOOT = "loot"  # 战利品
    INFECTED = "infected"  # 感染


def normalize_card_id(value: Any) -> str:
    """将卡牌标识符规范化为固定宽度的补零字符串

    外部数据中的 ID 可能是数字 ``3``、短字符串 ``"3"`` 或完整的 ``"003"``，
    也可能带有图片文件名后缀（``"003_Pistol.png"``）。

    Raises:
        ValueError: 无法解析为卡牌 ID
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid card id: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid card id: {value!r}")
        return str(value).zfill(CARD_ID_WIDTH)
    text = str(value).strip()
    # "003_Pistol.png" → "003"
    head = text.split("_", 1)[0]
    if not head.isdigit():
        raise ValueError(f"Invalid card id: {value!r}")
    return str(int(head)).zfill(CARD_ID_WIDTH)


def coerce_tags(raw: Any) -> frozenset[str]:
    """标签可能是列表，也可能是逗号分隔的字符串"""
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    else:
        items = raw
    return frozenset(str(t).strip().lower() for t in items if str(t).strip())


@dataclass(frozen=True, slots=True)
class CardDefinition:
    """卡牌定义（不可变，加载一次）

    Attributes:
        card_id: 3 位补零的卡牌标识符
        name: 卡牌名称
        card_type: 卡牌类型
        tags: 标签集合（小写）
        effect: 效果描述文本，结算时解析
        image: 卡图文件名（仅展示层使用）
    """

    card_id: str
    name: str
    card_type: CardType
    tags: frozenset[str] = field(default_factory=frozenset)
    effect: str = ""
    image: str = ""

    def is_type(self, card_type: CardType) -> bool:
        """检查是否为指定类型"""
        return self.card_type == card_type

    def matches(self, category: str) -> bool:
        """类型或标签是否匹配给定类别"""
        category = category.lower()
        return self.card_type.value == category or category in self.tags

    def __str__(self) -> str:
        return f"{self.name} (#{self.card_id})"

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "card_id": self.card_id,
            "name": self.name,
            "type": self.card_type.value,
            "tags": sorted(self.tags),
            "effect": self.effect,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardDefinition:
        """从字典创建卡牌定义"""
        return cls(
            card_id=normalize_card_id(data.get("card_id", data.get("id"))),
            name=data["name"],
            card_type=CardType(str(data["type"]).lower()),
            tags=coerce_tags(data.get("tags")),
            effect=data.get("effect", data.get("effect_text", "")) or "",
            image=data.get("image", ""),
        )


@dataclass(slots=True)
class CardInstance:
    """卡牌实例

    同一时刻只存在于一个区域中。``face_down`` 只表示陷阱自身的盖放状态，
    对手手牌的展示隐藏不写入此字段。
    """

    card_id: str
    face_down: bool = False

    def __post_init__(self):
        self.card_id = normalize_card_id(self.card_id)

    def to_dict(self) -> dict[str, Any]:
        return {"cardId": self.card_id, "isFaceDown": self.face_down}

    @classmethod
    def from_raw(cls, raw: Any) -> CardInstance:
        """从外部数据创建实例（数字、字符串或字典均可）"""
        if isinstance(raw, CardInstance):
            return cls(raw.card_id, raw.face_down)
        if isinstance(raw, dict):
            card_id = raw.get("cardId", raw.get("card_id", raw.get("id")))
            face_down = bool(raw.get("isFaceDown", raw.get("faceDown", raw.get("face_down", False))))
            return cls(card_id, face_down)
        return cls(raw)


class CardCatalog:
    """卡牌目录

    卡牌标识符 → 卡牌定义的不可变查找表
    """

    def __init__(self, cards: Iterable[CardDefinition] = ()):
        self._cards: dict[str, CardDefinition] = {}
        for card in cards:
            self._cards[card.card_id] = card

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> CardCatalog:
        """从字典记录列表创建目录"""
        return cls(CardDefinition.from_dict(r) for r in records)

    @classmethod
    def load(cls, data_path: str | Path) -> CardCatalog:
        """从 JSON 文件加载卡牌目录

        支持顶层为列表，或 ``{"cards": [...]}`` 形式。

        Raises:
            DataLoadError: 文件不存在或格式不合法
        """
        path = Path(data_path)
        if not path.exists():
            raise DataLoadError(file_path=str(path), reason="not found")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            records = data.get("cards", []) if isinstance(data, dict) else data
            catalog = cls.from_records(records)
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            raise DataLoadError(file_path=str(path), reason=str(e)) from e

        logger.info("Loaded %d card definitions from %s", len(catalog), path)
        return catalog

    def get(self, card_id: Any) -> CardDefinition:
        """按 ID 获取卡牌定义

        Raises:
            CardLookupError: 目录中不存在该卡牌
        """
        try:
            key = normalize_card_id(card_id)
        except ValueError:
            raise CardLookupError(card_id=str(card_id)) from None
        card = self._cards.get(key)
        if card is None:
            raise CardLookupError(card_id=key)
        return card

    def find(self, card_id: Any) -> CardDefinition | None:
        """按 ID 查找卡牌定义，不存在时返回 None"""
        try:
            return self.get(card_id)
        except CardLookupError:
            return None

    def ids(self) -> list[str]:
        return sorted(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return self.find(card_id) is not None

    def __iter__(self) -> Iterator[CardDefinition]:
        return iter(self._cards.values())

    def __len__(self) -> int:
        return len(self._cards)
