"""
Repository-level pytest configuration.

Why this exists:
  - Register command-line options used by the suites (--run-e2e)
  - Build the run configuration once per session and hand it to fixtures
  - Configure loguru before any test logs

Important:
  Credentials are never stored in the repository. Provide TEST_USERNAME and
  TEST_PASSWORD through env/.env.<ENV> (git-ignored) or the CI secret store.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from woo_tools.common import UIConfig, init_logger, load_config


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests against the live site (also enabled by E2E_ENABLED=true)",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def ui_config() -> UIConfig:
    """Run configuration, built once and passed explicitly to page objects."""
    config = load_config()
    init_logger(config)
    return config
