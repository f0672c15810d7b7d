"""
================================================================================
Woo Tools
================================================================================

Support utilities for the WooCommerce end-to-end suite.

Modules:
    - common: Run configuration (UIConfig) and loguru setup
    - report_tools: Allure attachments and report processing

Example:
    from woo_tools.common import load_config, init_logger

    config = load_config()
    init_logger(config)

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
