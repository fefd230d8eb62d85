"""
File: app/core/logging.py
Description: 全局日志配置模块 (Loguru)

本模块负责：
1. 替代 Python 标准库 logging，接管 Uvicorn/FastAPI/httpx 日志
2. 配置 Loguru 的输出格式（开发环境文本，生产环境 JSON）
3. 设置日志轮转 (Rotation) 和保留 (Retention) 策略
4. 确保所有日志包含 request_id（由中间件注入）
5. 脱敏：
   - patcher 处理 extra 上下文 (wallet / trade_url / api_key / openid.sig)
   - InterceptHandler 处理第三方消息文本 (httpx 会打印带 ?key= 的完整 URL)

Created: 2025-11-24
Updated: 2026-03-02 (extra 与第三方消息脱敏，httpx 默认降级为 WARNING)
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from app.core.config import settings
from app.utils.masking import mask_sensitive_data, mask_url_secrets

# 需要一并接管的第三方 logger 前缀
INTERCEPTED_LOGGER_PREFIXES = ("uvicorn.", "fastapi.", "httpx", "httpcore")

# 出站请求日志 (每次 Steam 调用一条)，仅调试模式下保留 INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """
    将 Python 标准库 logging 拦截并转发到 Loguru 的 Handler。
    转发前对消息文本中的 URL 机密参数脱敏。
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 查找调用者的栈帧，以确保日志行号正确
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            if frame.f_back:
                frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, mask_url_secrets(record.getMessage())
        )


def mask_record(record: Any) -> None:
    """Loguru patcher：对 extra 中的敏感字段脱敏。"""
    record["extra"].update(mask_sensitive_data(dict(record["extra"])))


def format_record(record: dict[str, Any]) -> str:
    """
    文本格式。
    上下文中存在 request_id / wallet 时追加到行尾。
    """
    format_string = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    extra = record["extra"]
    if extra.get("request_id"):
        format_string += " | <magenta>req_id={extra[request_id]}</magenta>"
    if extra.get("wallet"):
        format_string += " | <yellow>wallet={extra[wallet]}</yellow>"

    format_string += "\n{exception}"
    return format_string


def _sink_options(**overrides: Any) -> dict[str, Any]:
    options: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE,
    }
    if settings.LOG_JSON_FORMAT:
        options["serialize"] = True
    else:
        options["format"] = format_record
    options.update(overrides)
    return options


def _intercept_stdlib() -> None:
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    # 移除第三方默认的 handlers，避免重复打印
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(INTERCEPTED_LOGGER_PREFIXES):
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True

    noisy_level = logging.INFO if settings.is_debug else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def setup_logging() -> None:
    """
    初始化日志配置。
    应在 main.py 启动时调用。
    """
    _intercept_stdlib()

    logger.remove()
    logger.configure(patcher=mask_record)

    # Sink 1: 控制台
    logger.add(
        sys.stdout,
        **_sink_options(colorize=None if settings.LOG_JSON_FORMAT else True),
    )

    # Sink 2: 文件 (按配置启用)
    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_dir / "steam_link_{time:YYYY-MM-DD_HH}.log"),
            **_sink_options(
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                compression=settings.LOG_COMPRESSION,
            ),
        )

    logger.bind(environment=settings.ENVIRONMENT, json=settings.LOG_JSON_FORMAT).info(
        "Logging configured"
    )
