"""Structured logging configuration — structlog on top of stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

_ENV_LOG_LEVEL = "USERHUB_LOG_LEVEL"
_ENV_LOG_FORMAT = "USERHUB_LOG_FORMAT"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = {
    "uvicorn.access": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "asyncpg": "WARNING",
}


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _level(raw: str) -> str:
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{_ENV_LOG_LEVEL}={raw!r} is not a logging level")
    return level


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Route structlog and stdlib records through one stdout handler.

    Arguments win over the environment:
        USERHUB_LOG_LEVEL  — level for the ``userhub`` loggers (default: INFO)
        USERHUB_LOG_FORMAT — console | json (default: console)
    """
    log_level = _level(level or os.environ.get(_ENV_LOG_LEVEL, "INFO"))
    fmt = (log_format or os.environ.get(_ENV_LOG_FORMAT, "console")).lower()
    shared = _shared_processors()

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {"userhub": {"level": log_level}}
    loggers.update({name: {"level": lvl} for name, lvl in _QUIET_LOGGERS.items()})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(fmt),
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["default"], "level": log_level},
            "loggers": loggers,
        }
    )
