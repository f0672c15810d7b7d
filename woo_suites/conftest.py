"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and gates the end-to-end tests.

================================================================================
"""

from pathlib import Path

import pytest

from woo_tools.common import load_config


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests against the live site"
    )
    config.addinivalue_line(
        "markers", "unit: Offline tests that need no browser"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "checkout: Tests related to cart and checkout"
    )
    config.addinivalue_line(
        "markers", "orders: Tests related to order history"
    )


def pytest_collection_modifyitems(config, items):
    """
    Add directory markers and skip e2e tests unless they are enabled.
    """
    run_e2e = config.getoption("--run-e2e") or load_config().e2e_enabled
    skip_e2e = pytest.mark.skip(reason="e2e disabled: pass --run-e2e or set E2E_ENABLED=true")

    for item in items:
        parts = Path(str(item.fspath)).parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "WooCommerce End-to-End Suite",
        "=" * 60,
        "",
    ]
