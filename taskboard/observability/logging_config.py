"""
结构化日志配置：structlog + contextvars 自动注入 trace_id
- 开发环境：彩色文本输出
- 生产环境：JSON 输出
"""

import logging
import sys

import structlog


def setup_logging(env: str = "development", level: int = logging.INFO) -> None:
    """初始化结构化日志"""

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env == "production":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # 请求日志已由 RequestLoggerMiddleware 输出，关掉 uvicorn 自带的 access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
