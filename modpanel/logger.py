"""
日志模块

日志统一输出到 stderr，stdout 只留给命令输出（搜索结果、通知）。
"""

import os
import sys
from typing import Optional

from loguru import logger


def resolve_level(level: Optional[str] = None) -> str:
    """显式级别优先，否则由 MODPANEL_DEBUG 决定 DEBUG / INFO"""
    if level:
        return level.upper()
    return "DEBUG" if os.environ.get("MODPANEL_DEBUG", "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stderr,
    enqueue: bool = True,
    colorize: Optional[bool] = None,
) -> str:
    """
    设置日志记录器

    Args:
        level: 日志级别，为空时读取 MODPANEL_DEBUG
        sink: 输出目标，默认 stderr，以免混入可被管道处理的命令输出
        enqueue: 是否启用队列
        colorize: 是否启用颜色，为空时由 loguru 根据终端判断

    Returns:
        实际使用的日志级别
    """
    level = resolve_level(level)
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
        enqueue=enqueue,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )
    logger.debug("调试日志已开启")
    return level


__all__ = ["logger", "setup_logger", "resolve_level"]
