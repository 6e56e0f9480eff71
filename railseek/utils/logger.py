"""
Logger module - Centralized logging configuration for railseek.
"""

import logging
import os
import sys
from typing import Optional


def _env_level() -> Optional[int]:
    name = os.getenv("RAILSEEK_LOG_LEVEL")
    if not name:
        return None
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else None


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance.
    
    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional logging level (defaults to RAILSEEK_LOG_LEVEL, then INFO)
    
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    if level is None:
        level = _env_level()
    
    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    
    return logger


def set_level(level: int) -> None:
    """Apply a level to every railseek logger created so far."""
    for name, existing in logging.Logger.manager.loggerDict.items():
        if name.startswith("railseek") and isinstance(existing, logging.Logger):
            existing.setLevel(level)


