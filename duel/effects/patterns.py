# -*- coding: utf-8 -*-
"""
效果模式表

按固定顺序扫描卡牌效果文本（已小写化）：
 1. 伤害（NxM 连击优先于普通伤害，二者只取其一）
 2. 双方范围伤害
 3. 持续伤害
 4. 治疗
 5. 摸牌（指定类别 / 普通）
 6. 弃牌 / 偷牌
 7. 跳过标志
 8. 禁疗
 9. 场上操作（摧毁 / 拆除 / 揭示）
10. 攻击增益授予
11. 感染卡专属（撕咬 / 吸血 / 封锁手牌 / 召唤同伴）
12. 陷阱自动触发检测（见 is_auto_trigger_trap）
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..card import CardType
from ..constants import AUTO_DISCARD_PHRASES, AUTO_DISCARD_TAGS, DISCARD_THIS_CARD_PHRASE
from .base import BuffOp, EffectKind, EffectPattern, EffectPrimitive, FieldOp, Target

if TYPE_CHECKING:
    from ..card import CardDefinition

# 数量：数字或 a / an / one / two / three
_NUM = r"(\d+|an?|one|two|three)"
_NUM_WORDS = {"a": 1, "an": 1, "one": 1, "two": 2, "three": 3}

# 类别过滤：类型名或常见标签
_CATEGORY = r"(trap|defense|tactical|loot|attack|infected|gun|melee|explosive)"

_DMG = r"(?:dmg|damage)"
# 伤害数值，可带连击倍数 "10x2"
_AMOUNT = r"(\d+)(?:\s*x\s*(\d+))?"
_ONE = r"(?:1\s+|an?\s+|one\s+)?"


def _to_int(token: str) -> int:
    return int(token) if token.isdigit() else _NUM_WORDS[token]


class DamagePattern(EffectPattern):
    """单体伤害：先识别 "10x2 dmg" 连击，否则识别 "deal 10 dmg"

    属于双方伤害短语的数值由 AreaDamagePattern 处理。
    """

    REPEAT = re.compile(rf"(\d+)\s*x\s*(\d+)\s*{_DMG}\b")
    PLAIN = re.compile(rf"\bdeals?\s+(\d+)\s*{_DMG}\b(?!\s+(?:over|to\s+both))")

    def match(self, text, card):
        aoe = AreaDamagePattern.PATTERN.search(text)
        for m in self.REPEAT.finditer(text):
            if aoe and aoe.start() <= m.start() < aoe.end():
                continue
            amount = int(m.group(1)) * int(m.group(2))
            return [EffectPrimitive(EffectKind.DAMAGE, amount=amount)]
        m = self.PLAIN.search(text)
        if m:
            return [EffectPrimitive(EffectKind.DAMAGE, amount=int(m.group(1)))]
        return []


class AreaDamagePattern(EffectPattern):
    """双方范围伤害（"both players take 20 dmg" / "10x2 dmg to both players"）"""

    PATTERN = re.compile(
        rf"both\s+players\s+take\s+{_AMOUNT}\s*{_DMG}"
        rf"|{_AMOUNT}\s*{_DMG}\s+to\s+both\s+players"
    )

    def match(self, text, card):
        m = self.PATTERN.search(text)
        if not m:
            return []
        base, times = (m.group(1), m.group(2)) if m.group(1) else (m.group(3), m.group(4))
        amount = int(base) * int(times or 1)
        return [EffectPrimitive(EffectKind.AOE_DAMAGE, amount=amount, target=Target.BOTH)]


class DamageOverTimePattern(EffectPattern):
    """持续伤害：立即结算一次并记录到对手的修正袋"""

    PATTERN = re.compile(rf"(\d+)\s*{_DMG}\s+over\s+(\d+)\s+turns?")

    def match(self, text, card):
        m = self.PATTERN.search(text)
        if not m:
            return []
        return [EffectPrimitive(EffectKind.DOT, amount=int(m.group(1)), turns=int(m.group(2)))]


class HealPattern(EffectPattern):
    PATTERN = re.compile(r"\b(?:restore|heal)s?\s+(\d+)\s*(?:hp|health)\b")

    def match(self, text, card):
        m = self.PATTERN.search(text)
        if not m:
            return []
        return [EffectPrimitive(EffectKind.HEAL, amount=int(m.group(1)), target=Target.SELF)]


class DrawPattern(EffectPattern):
    """摸牌：指定类别（从牌库中任意位置取第一张匹配的牌）与普通摸牌"""

    CATEGORY = re.compile(rf"\bdraw\s+(?:1|an?|one)\s+{_CATEGORY}\s+cards?\b")
    GENERIC = re.compile(rf"\bdraw\s+{_NUM}\s+cards?\b(?!\s+(?:each|every|per)\b)")

    def match(self, text, card):
        found = []
        m = self.CATEGORY.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DRAW, amount=1, target=Target.SELF,
                                         category=m.group(1)))
        m = self.GENERIC.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DRAW, amount=_to_int(m.group(1)),
                                         target=Target.SELF))
        return found


class DiscardStealPattern(EffectPattern):
    """随机弃牌（对手或自己）与偷牌"""

    FORCED = re.compile(
        r"(?:force\s+(?:the\s+)?(?:opponent|enemy)\s+to\s+discard"
        r"|(?:opponent|enemy)\s+discards)"
        rf"\s+{_NUM}\s+(?:random\s+)?(?:{_CATEGORY}\s+)?cards?\b"
    )
    SELF = re.compile(
        rf"\bdiscard\s+{_NUM}\s+(?:random\s+)?(?:{_CATEGORY}\s+)?cards?\s+from\s+your\s+hand"
    )
    STEAL = re.compile(rf"\bsteal\s+{_NUM}\s+(?:random\s+)?(?:{_CATEGORY}\s+)?cards?\b")

    def match(self, text, card):
        found = []
        m = self.FORCED.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DISCARD, amount=_to_int(m.group(1)),
                                         target=Target.OPPONENT, category=m.group(2),
                                         random=True))
        m = self.SELF.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DISCARD, amount=_to_int(m.group(1)),
                                         target=Target.SELF, category=m.group(2),
                                         random=True))
        m = self.STEAL.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.STEAL, amount=_to_int(m.group(1)),
                                         target=Target.OPPONENT, category=m.group(2),
                                         random=True))
        return found


class SkipFlagPattern(EffectPattern):
    OPPONENT = re.compile(r"(?:opponent|enemy)\s+skips\s+(?:their|its|the)\s+next\s+(turn|draw)")
    SELF = re.compile(r"\bskip\s+your\s+next\s+(turn|draw)")

    def match(self, text, card):
        found = []
        for regex, target in ((self.OPPONENT, Target.OPPONENT), (self.SELF, Target.SELF)):
            m = regex.search(text)
            if m:
                found.append(EffectPrimitive(EffectKind.SKIP_FLAG, target=target,
                                             option=f"skip_next_{m.group(1)}"))
        return found


class HealBlockPattern(EffectPattern):
    PATTERN = re.compile(
        r"block\s+(?:the\s+)?(?:enemy|opponent)(?:'s)?\s+heal(?:ing)?\s+for\s+(\d+)\s+turns?"
    )

    def match(self, text, card):
        m = self.PATTERN.search(text)
        if not m:
            return []
        return [EffectPrimitive(EffectKind.HEAL_BLOCK, turns=int(m.group(1)))]


class FieldPattern(EffectPattern):
    """对敌方场上的操作"""

    DESTROY_INFECTED = re.compile(
        rf"\b(?:destroy|remove)\s+{_ONE}(?:random\s+)?enemy\s+infected\s+card")
    DESTROY = re.compile(rf"\b(?:destroy|remove)\s+{_ONE}(random\s+)?enemy\s+(?:field\s+)?card")
    DISARM = re.compile(rf"\bdisarm\s+{_ONE}(?:random\s+)?enemy\s+trap")
    REVEAL = re.compile(rf"\breveal\s+{_ONE}(?:random\s+)?enemy\s+trap")

    def match(self, text, card):
        found = []
        m = self.DESTROY.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.FIELD_MUTATION, option=FieldOp.DESTROY.value,
                                         random=bool(m.group(1))))
        if self.DESTROY_INFECTED.search(text):
            found.append(EffectPrimitive(EffectKind.FIELD_MUTATION,
                                         option=FieldOp.DESTROY_INFECTED.value))
        if self.DISARM.search(text):
            found.append(EffectPrimitive(EffectKind.FIELD_MUTATION, option=FieldOp.DISARM.value,
                                         random=True))
        if self.REVEAL.search(text):
            found.append(EffectPrimitive(EffectKind.FIELD_MUTATION, option=FieldOp.REVEAL.value,
                                         random=True))
        return found


class BuffGrantPattern(EffectPattern):
    """攻击增益与每回合额外摸牌"""

    NEXT_ATTACK = re.compile(
        r"your\s+next\s+(?:([a-z_]+)\s+)?attack\s+deals\s+"
        r"(?:\+(\d+)|x(\d+(?:\.\d+)?)|(double))"
    )
    GUN = re.compile(rf"all\s+gun\s+attacks\s+deal\s+\+(\d+)\s*{_DMG}")
    EXTRA_DRAW = re.compile(rf"\bdraw\s+{_NUM}\s+extra\s+cards?\s+(?:each|every|per)\s+turn")

    def match(self, text, card):
        found = []
        m = self.NEXT_ATTACK.search(text)
        if m:
            tag, bonus, mult, double = m.groups()
            tags = frozenset({tag}) if tag else None
            if bonus:
                found.append(EffectPrimitive(EffectKind.BUFF_GRANT, target=Target.SELF,
                                             option=BuffOp.NEXT_ATTACK_BONUS.value,
                                             amount=int(bonus), tags=tags))
            else:
                found.append(EffectPrimitive(EffectKind.BUFF_GRANT, target=Target.SELF,
                                             option=BuffOp.NEXT_ATTACK_MULT.value,
                                             mult=2.0 if double else float(mult), tags=tags))
        m = self.GUN.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.BUFF_GRANT, target=Target.SELF,
                                         option=BuffOp.GUN_FLAT_BONUS.value,
                                         amount=int(m.group(1))))
        m = self.EXTRA_DRAW.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.BUFF_GRANT, target=Target.SELF,
                                         option=BuffOp.EXTRA_DRAW.value,
                                         amount=_to_int(m.group(1))))
        return found


class InfectedPattern(EffectPattern):
    """感染卡专属效果，与通用模式叠加"""

    card_type = CardType.INFECTED.value

    BITE = re.compile(rf"\bbites?\s+(?:the\s+enemy\s+)?for\s+(\d+)\s*{_DMG}")
    DRAIN = re.compile(r"\bdrains?\s+(\d+)\s*(?:hp|health)")
    HAND_LOCK = re.compile(
        r"\block\s+(?:the\s+)?(?:enemy|opponent)(?:'s)?\s+hand\s+for\s+(\d+)\s+turns?"
    )
    SPAWN = re.compile(r"\bspawns?\s+an?\s+infected\s+companion")

    def match(self, text, card):
        found = []
        m = self.BITE.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DAMAGE, amount=int(m.group(1))))
        m = self.DRAIN.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.DRAIN, amount=int(m.group(1))))
        m = self.HAND_LOCK.search(text)
        if m:
            found.append(EffectPrimitive(EffectKind.HAND_LOCK, turns=int(m.group(1))))
        if self.SPAWN.search(text):
            found.append(EffectPrimitive(EffectKind.SPAWN_COMPANION, target=Target.SELF))
        return found


# 陷阱自动触发措辞
AUTO_TRIGGER = re.compile(r"\bby\s+play\b|\bautomatically\b|\bon\s+enemy\s+card\b")


def is_auto_trigger_trap(card: 'CardDefinition') -> bool:
    """陷阱文本声明"打出即触发"时返回 True；非陷阱卡恒为 False"""
    if card.card_type is not CardType.TRAP:
        return False
    return bool(AUTO_TRIGGER.search(card.effect.lower()))


def should_auto_discard(card: 'CardDefinition') -> bool:
    """
    用后弃置判定

    - 标签含 discard_after_use / consumable / one_use
    - 文本含 "discard after use" 一类措辞
    - 文本含 "discard this card" 且不是防御卡
    """
    if card.tags & AUTO_DISCARD_TAGS:
        return True
    text = card.effect.lower()
    if any(phrase in text for phrase in AUTO_DISCARD_PHRASES):
        return True
    return DISCARD_THIS_CARD_PHRASE in text and card.card_type is not CardType.DEFENSE


def default_patterns() -> list[EffectPattern]:
    """按结算顺序排列的默认模式表"""
    return [
        DamagePattern(),
        AreaDamagePattern(),
        DamageOverTimePattern(),
        HealPattern(),
        DrawPattern(),
        DiscardStealPattern(),
        SkipFlagPattern(),
        HealBlockPattern(),
        FieldPattern(),
        BuffGrantPattern(),
        InfectedPattern(),
    ]
