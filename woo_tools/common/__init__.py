"""
================================================================================
Common Utilities
================================================================================

Configuration loading and logging setup shared by the suite and runner.

Exports:
    - UIConfig: Immutable run configuration
    - ConfigLoader / load_config: Build a UIConfig from YAML, dotenv and env vars
    - init_logger: Configure loguru sinks

Usage:
    from woo_tools.common import load_config, init_logger

    config = load_config()
    init_logger(config)

================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError, UIConfig, load_config
from .log_config import init_logger

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "UIConfig",
    "load_config",
    "init_logger",
]
