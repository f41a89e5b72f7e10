"""对决日志配置

- 日志写入按大小轮转的 UTF-8 文件（中文消息安全）
- 默认不向控制台输出，避免打乱 rich 观战视图
- 每条记录带上当前对决 ID（``duel_log_context``），多场对决共用一个日志文件时可按 ID 过滤
- 重复调用 ``setup_logging()`` 不会叠加处理器

环境变量:
    DUEL_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR
    DUEL_LOG_FILE=path/to/duel.log
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator

DEFAULT_LOG_PATH = Path("logs") / "duel.log"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(duel_id)s] %(name)s:%(lineno)d | %(message)s"

_HANDLER_PREFIX = "duel_"

# 调试模式之外保持安静的第三方 logger
_QUIET_LOGGERS = ("websockets", "asyncio")

_current_duel: ContextVar[str] = ContextVar("current_duel", default="-")


class DuelIdFilter(logging.Filter):
    """为日志记录注入 duel_id 字段"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "duel_id"):
            record.duel_id = _current_duel.get()
        return True


@contextmanager
def duel_log_context(duel_id: str) -> Iterator[None]:
    """在此上下文内产生的日志都标记为 duel_id"""
    token = _current_duel.set(duel_id)
    try:
        yield
    finally:
        _current_duel.reset(token)


def parse_level(level: str | int | None, default: int = logging.INFO) -> int:
    if isinstance(level, int):
        return level
    # 已知级别名返回 int，未知名返回 "Level X" 字符串
    value = logging.getLevelName((level or "").strip().upper())
    return value if isinstance(value, int) else default


def _install(root: logging.Logger, name: str, factory, level: int,
             formatter: logging.Formatter) -> logging.Handler:
    handler = next((h for h in root.handlers if h.name == _HANDLER_PREFIX + name), None)
    if handler is None:
        handler = factory()
        handler.name = _HANDLER_PREFIX + name
        handler.addFilter(DuelIdFilter())
        root.addHandler(handler)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(
    *,
    level: str | int = "INFO",
    log_file: str | None = None,
    enable_file: bool = True,
    enable_console: bool = False,
    console_level: str | int = "WARNING",
    debug: bool = False,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """配置根 logger，返回根 logger

    环境变量优先于参数；``debug=True`` 时文件级别固定为 DEBUG。
    """
    level = os.environ.get("DUEL_LOG_LEVEL") or level
    log_file = os.environ.get("DUEL_LOG_FILE") or log_file
    file_level = logging.DEBUG if debug else parse_level(level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    log_path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    if enable_file:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _install(root, "file",
                 lambda: RotatingFileHandler(log_path, maxBytes=max_bytes,
                                             backupCount=backup_count, encoding="utf-8"),
                 file_level, formatter)
    if enable_console:
        _install(root, "console", logging.StreamHandler,
                 parse_level(console_level, logging.WARNING), formatter)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging ready: level=%s file=%s console=%s",
        logging.getLevelName(file_level), log_path if enable_file else None, enable_console,
    )
    return root
