"""卡牌效果解析模块

把卡牌效果文本解析为效果原语序列，
由 CardResolver 负责应用。
"""

from .base import BuffOp, EffectKind, EffectPattern, EffectPrimitive, FieldOp, ParsedEffect, Target
from .patterns import is_auto_trigger_trap, should_auto_discard
from .registry import EffectRegistry, create_default_registry

__all__ = [
    'BuffOp',
    'EffectKind',
    'EffectPattern',
    'EffectPrimitive',
    'EffectRegistry',
    'FieldOp',
    'ParsedEffect',
    'Target',
    'create_default_registry',
    'is_auto_trigger_trap',
    'should_auto_discard',
]
