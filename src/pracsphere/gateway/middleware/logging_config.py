"""structlog 配置模块

PRACSPHERE_LOG_FORMAT=json 输出结构化 JSON（生产），默认 dev 可读输出。
标准库 logging（uvicorn、httpx、aiosqlite）经 ProcessorFormatter 走同一套渲染。
Logfire APM 由 LOGFIRE_SEND_TO_LOGFIRE 控制，默认关闭。
"""

import logging
import os

import structlog
from fastapi import FastAPI
from structlog.typing import EventDict, WrappedLogger

SERVICE_NAME = "pracsphere-tasks"

# 第三方库日志默认级别：逐请求的连接/SQL 细节对排障价值不大
_QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def add_service_name(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置，可重复调用

    Args:
        log_format: "json" 或 "dev"，默认读取 PRACSPHERE_LOG_FORMAT
        log_level: 日志级别名，默认读取 PRACSPHERE_LOG_LEVEL（INFO）
    """
    log_format = (log_format or os.environ.get("PRACSPHERE_LOG_FORMAT", "dev")).lower()
    log_level = (log_level or os.environ.get("PRACSPHERE_LOG_LEVEL", "INFO")).upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def setup_logfire(app: FastAPI) -> bool:
    """按需启用 Logfire APM

    需要 LOGFIRE_SEND_TO_LOGFIRE=true、LOGFIRE_TOKEN 以及 apm extra。

    Returns:
        是否成功启用
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return False
    try:
        import logfire

        logfire.configure(service_name=SERVICE_NAME)
        logfire.instrument_fastapi(app)
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
            message="Logfire 初始化失败，仅输出本地日志",
        )
        return False
    return True
