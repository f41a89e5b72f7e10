"""对决消息的多语言表

每种语言对应一个模块，模块内的 ``STRINGS`` 字典把消息键映射到
``str.format`` 模板。引擎的日志、异常消息和命令行提示都通过 ``t()`` 取文本::

    from i18n import t, set_locale

    set_locale("zh_CN")
    t("exc.capacity_exceeded", zone="hand", limit=4)
    zone_name("discard")   # "弃牌堆"

查找顺序：当前语言 → en_US → ``[key]``。
"""

from __future__ import annotations

import importlib
import logging

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"

# locale → 子模块名
_LOCALE_MODULES: dict[str, str] = {
    "en_US": ".en_US",
    "zh_CN": ".zh_CN",
}

_locale: str = DEFAULT_LOCALE
_tables: dict[str, dict[str, str]] = {}


def _table(locale: str) -> dict[str, str]:
    table = _tables.get(locale)
    if table is None:
        module_name = _LOCALE_MODULES.get(locale)
        if module_name is None:
            raise ValueError(f"Unsupported locale: {locale}")
        table = importlib.import_module(module_name, __name__).STRINGS
        _tables[locale] = table
    return table


def set_locale(locale: str) -> None:
    """切换当前语言（未知语言抛出 ValueError，当前语言不变）"""
    global _locale
    _table(locale)
    _locale = locale


def get_locale() -> str:
    return _locale


def get_available_locales() -> list[str]:
    return sorted(_LOCALE_MODULES)


def _template(key: str) -> str | None:
    template = _table(_locale).get(key)
    if template is None and _locale != DEFAULT_LOCALE:
        template = _table(DEFAULT_LOCALE).get(key)
        if template is not None:
            logger.debug("Message %s missing in %s, using %s", key, _locale, DEFAULT_LOCALE)
    return template


def t(key: str, **kwargs: object) -> str:
    """取当前语言的消息文本并填充占位符

    占位符缺失时返回未填充的模板，键不存在时返回 ``[key]``。
    """
    template = _template(key)
    if template is None:
        logger.warning("Unknown message key %s (locale=%s)", key, _locale)
        return f"[{key}]"
    if not kwargs:
        return template
    try:
        return template.format_map(kwargs)
    except KeyError as e:
        logger.warning("Message %s is missing placeholder %s", key, e)
        return template


_ = t


def zone_name(zone: str) -> str:
    """区域显示名；没有翻译的区域原样返回"""
    template = _template(f"zone.{zone}")
    return zone if template is None else template
