# -*- coding: utf-8 -*-
"""
卡牌对决核心模块
包含卡牌目录、区域管理、增益存储、效果解析、回合流转和对决引擎

引擎接收对决状态和玩家动作，返回更新后的状态与效果事件列表，
展示层与传输层只通过这两者与引擎交互。
"""

from .buffs import BuffStore, DamageOverTime, ModifierBag
from .card import CardCatalog, CardDefinition, CardInstance, CardType, normalize_card_id
from .card_resolver import CardResolver
from .config import DuelConfig, get_config, reset_config
from .constants import PlayerKey
from .damage_system import DamageSystem, change_hp
from .engine import ActionResult, DuelEngine, create_duel
from .events import DuelEvent, EventBus, EventRecorder, EventType
from .state import DuelState, create_duel_state
from .zones import Zone, ZoneManager, ZoneRef

__all__ = [
    # 卡牌系统
    'CardCatalog', 'CardDefinition', 'CardInstance', 'CardType', 'normalize_card_id',
    # 状态
    'DuelState', 'PlayerKey', 'create_duel_state',
    # 区域与增益
    'Zone', 'ZoneManager', 'ZoneRef', 'BuffStore', 'DamageOverTime', 'ModifierBag',
    # 结算
    'CardResolver', 'DamageSystem', 'change_hp',
    # 事件系统
    'DuelEvent', 'EventBus', 'EventRecorder', 'EventType',
    # 对决引擎
    'ActionResult', 'DuelEngine', 'create_duel',
    # 配置
    'DuelConfig', 'get_config', 'reset_config',
]

__version__ = '1.0.0'
