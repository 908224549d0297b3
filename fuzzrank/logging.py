import logging
import sys

import structlog

_NOISY_LOGGERS = ("httpx", "asyncio", "multipart")


def _renderer(colors: bool) -> structlog.dev.ConsoleRenderer:
    return structlog.dev.ConsoleRenderer(colors=colors)


def _shared_processors() -> list:
    return [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
    ]


def configure_logging(level: str = "INFO", colors: bool | None = None):
    """Route structlog output to stderr at `level` (a stdlib level name)."""
    if colors is None:
        colors = sys.stderr.isatty()
    structlog.configure(
        processors=[*_shared_processors(), _renderer(colors)],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None):
    return structlog.get_logger(name or "fuzzrank")


def uvicorn_log_config(level: str = "INFO", colors: bool | None = None) -> dict:
    """dictConfig for uvicorn that renders its records like fuzzrank's own logs.

    The access log never goes below INFO; it emits nothing at DEBUG anyway.
    """
    if colors is None:
        colors = sys.stderr.isatty()
    level = level.upper()
    access_level = level if logging.getLevelName(level) >= logging.INFO else "INFO"
    formatter = {
        "()": structlog.stdlib.ProcessorFormatter,
        "processor": _renderer(colors),
        "foreign_pre_chain": _shared_processors(),
    }
    handler = {"formatter": "default", "class": "logging.StreamHandler", "stream": "ext://sys.stderr"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {"default": handler},
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"handlers": ["default"], "level": access_level, "propagate": False},
        },
    }
