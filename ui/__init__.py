# -*- coding: utf-8 -*-
"""
UI模块
提供对决快照的只读终端显示
"""

from .spectator import SpectatorView, field_cues

__all__ = ['SpectatorView', 'field_cues']
