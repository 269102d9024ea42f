"""
Logging setup for the console.

The package logs under the "security_console" logger; modules obtain
children with logging.getLogger(__name__).
"""

import logging


def setup_logging(level: str | int = logging.INFO, name: str = "security_console") -> logging.Logger:
    """
    Configure the package logger with a single console handler.

    Args:
        level: Level name (e.g. "DEBUG") or number; unknown names fall back to INFO
        name: Logger name

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
