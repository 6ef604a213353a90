# Standard library imports
from collections.abc import MutableMapping
from functools import lru_cache
import logging
import sys
from typing import Any

# Local application imports
from civiclink.settings import settings


class CustomFormatter(logging.Formatter):
    """
    Console formatter that colours records by level.
    """

    # ANSI color codes
    GREY = "\x1b[38;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    FORMATS = {
        logging.DEBUG: GREY + CONSOLE_FORMAT + RESET,
        logging.INFO: GREY + CONSOLE_FORMAT + RESET,
        logging.WARNING: YELLOW + CONSOLE_FORMAT + RESET,
        logging.ERROR: RED + CONSOLE_FORMAT + RESET,
        logging.CRITICAL: BOLD_RED + CONSOLE_FORMAT + RESET,
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        log_fmt = self.FORMATS.get(record.levelno) if self.use_colors else self.CONSOLE_FORMAT
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


@lru_cache
def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger with the given name and a console handler attached.

    Loggers are cached per name so handlers are only attached once. In
    production, records at ERROR and above also reach Sentry through the
    logging integration configured in ``civiclink.core.monitoring.sentry``.

    Args:
        name: The name of the logger
        level: Optional logging level override

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = logging.DEBUG if settings.DEBUG_MODE else logging.INFO

    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(CustomFormatter(use_colors=sys.stdout.isatty()))
    logger.addHandler(console_handler)
    # Records are printed here; parents would print them again
    logger.propagate = False

    return logger


class LoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """
    Appends bound context (issue_id=..., user_id=...) to every message.
    """

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        context = {k: v for k, v in (self.extra or {}).items() if v is not None}
        if context:
            context_str = " ".join(f"{k}={v}" for k, v in context.items())
            msg = f"{msg} [{context_str}]"
        return msg, kwargs

    def bind(self, **context: Any) -> "LoggerAdapter":
        return LoggerAdapter(self.logger, {**(self.extra or {}), **context})


def get_contextual_logger(name: str, **context: Any) -> LoggerAdapter:
    """
    Get a logger whose messages carry the given context.

    Args:
        name: The name of the logger
        **context: Context values rendered after each message

    Returns:
        A configured logger adapter
    """
    logger = get_logger(name)
    return LoggerAdapter(logger, context)
