"""
================================================================================
Logging Setup
================================================================================

Centralized Loguru configuration for the suite and the runner script.

Author: Automation Team
License: MIT
================================================================================
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config_loader import UIConfig


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    config: Optional[UIConfig] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: str = DEFAULT_FORMAT,
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        config: Run configuration supplying level and optional log file
        level: Explicit level, wins over config
        log_file: Explicit file path, wins over config
        format_string: Log format string
        force: Reconfigure even if already initialized

    Example:
        init_logger(load_config())
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    level = (level or (config.log_level if config else "INFO")).upper()
    log_file = log_file or (config.log_file if config else None)

    logger.remove()
    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


__all__ = [
    "init_logger",
]
