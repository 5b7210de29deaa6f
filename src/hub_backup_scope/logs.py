from __future__ import annotations

import logging

import structlog

from .config import AppConfig


def setup_logging(
    log_level: str | None = None,
    *,
    json_output: bool | None = None,
    app_config: AppConfig | None = None,
) -> None:
    """Route structlog through stdlib logging.

    Explicit arguments win; anything left unset comes from ``app_config``
    (``HUB_BACKUP_LOG_LEVEL`` and ``HUB_BACKUP_LOG_JSON`` by default).
    """
    app_config = app_config or AppConfig()
    log_level = log_level or app_config.log_level
    json_output = app_config.log_json if json_output is None else json_output

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{log_level}'")

    logging.basicConfig(
        level=level,
        format="%(message)s",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
