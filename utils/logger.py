"""
Logging configuration for the service.
"""
import logging
import os
import sys


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, datefmt: str, use_color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)

        # Restored afterwards so other handlers see the plain level name
        original = record.levelname
        color = self.COLORS.get(original, self.RESET)
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _resolve_level(level: int | str | None) -> int:
    """Turn LOG_LEVEL style names into logging constants, defaulting to INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    Set up the root service logger.

    Args:
        name: Logger name
        level: Logging level or level name (defaults to the LOG_LEVEL env var)

    Returns:
        Configured logger instance
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved)
    logger.propagate = False

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(ColoredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        use_color=sys.stdout.isatty()
    ))

    logger.addHandler(handler)
    return logger


app_logger = setup_logger("promptforge")


def get_logger(component: str) -> logging.Logger:
    """Child logger sharing the service handler, e.g. ``promptforge.usage``."""
    return app_logger.getChild(component)
