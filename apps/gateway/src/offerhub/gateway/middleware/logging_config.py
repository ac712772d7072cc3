"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出
Logfire APM：LOGFIRE_SEND_TO_LOGFIRE 环境变量控制，false 时仅保留本地日志。
"""

import logging
import os

import structlog


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    参数缺省时读取环境变量：
    - OFFERHUB_LOG_FORMAT: "json"（生产）或 "dev"（默认）
    - OFFERHUB_LOG_LEVEL: 日志级别，默认 INFO
    """
    log_format = log_format or os.environ.get("OFFERHUB_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("OFFERHUB_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
        # JSON 模式下异常栈需要先格式化为字符串
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
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # aiosqlite 的 DEBUG 日志过于冗长
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def setup_logfire() -> None:
    """Logfire 可选初始化

    LOGFIRE_SEND_TO_LOGFIRE 环境变量控制：
    - "true": 启用 Logfire APM（需要安装 logfire extra 并配置 LOGFIRE_TOKEN）
    - "false" (默认): 仅本地日志
    """
    send_to_logfire = os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower()
    if send_to_logfire != "true":
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi()
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
            message="Logfire 初始化失败，仅保留本地日志",
        )
