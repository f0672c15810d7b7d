"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser lifecycle, session state and page objects.

Key Features:
- One browser per test (tests never share a page or context)
- Saved session state restored into authenticated contexts
- Screenshot, trace, video and locator health attached to Allure on failure

================================================================================
"""

import re
from pathlib import Path
from typing import AsyncGenerator, List

import pytest
from loguru import logger
from playwright.async_api import BrowserContext, Error as PlaywrightError, Page

from woo_suites.ui_testing.framework.browser_manager import BrowserManager, ensure_auth_state
from woo_suites.ui_testing.framework.page_base import BasePage
from woo_suites.ui_testing.pages import (
    BillingDetails,
    CheckoutPage,
    HomePage,
    LoginPage,
    MarketplacePage,
    OrdersPage,
)
from woo_tools.common import UIConfig
from woo_tools.report_tools.allure_utils import attach_artifact, attach_png, attach_text


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Store each phase's report on the item (rep_setup / rep_call / rep_teardown)
    so fixtures can tell during teardown whether the test failed.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def _test_failed(request) -> bool:
    report = getattr(request.node, "rep_call", None)
    return report is not None and report.failed


def _artifact_name(request) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", request.node.name)[:120]


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(ui_config: UIConfig) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager.

    Each test gets its own browser, so parallel workers never share state.
    """
    manager = BrowserManager(ui_config)
    await manager.start()
    yield manager
    await manager.close()


@pytest.fixture
def page_registry() -> List[BasePage]:
    """Page objects created for the current test (for locator health reports)."""
    return []


async def _open_traced_context(
    manager: BrowserManager,
    request,
    ui_config: UIConfig,
    restore_auth: bool,
) -> BrowserContext:
    video_dir = Path(ui_config.artifacts_dir) / "videos" / _artifact_name(request)
    context = await manager.new_context(restore_auth=restore_auth, record_video_dir=video_dir)
    await BrowserManager.start_tracing(context)
    return context


async def _close_traced_page(
    request,
    ui_config: UIConfig,
    context: BrowserContext,
    page: Page,
    registry: List[BasePage],
) -> None:
    """Attach failure artifacts, then close page and stop tracing."""
    failed = _test_failed(request)
    name = _artifact_name(request)

    if failed:
        try:
            if registry:
                # Screenshot, URL, HTTP errors and health of the first page object
                await registry[0].capture_failure(name)
            else:
                attach_png(await page.screenshot(full_page=True), name="failure_screenshot")
                attach_text(page.url, name="Current URL")
        except PlaywrightError as e:
            logger.warning(f"Failed to capture screenshot on failure: {e}")
        for page_object in registry[1:]:
            attach_text(
                page_object.get_locator_health_report(),
                name=f"Locator Health ({type(page_object).__name__})",
            )

    video = page.video
    await page.close()

    trace_path = Path(ui_config.artifacts_dir) / "traces" / f"{name}.zip" if failed else None
    await BrowserManager.stop_tracing(context, trace_path)

    if failed:
        if trace_path is not None:
            attach_artifact(trace_path, name="trace")
        if video is not None:
            attach_artifact(Path(await video.path()), name="video")


@pytest.fixture
async def page(
    request,
    browser_manager: BrowserManager,
    ui_config: UIConfig,
    page_registry: List[BasePage],
) -> AsyncGenerator[Page, None]:
    """
    Page in a fresh, signed-out context (saved session state is not loaded).
    """
    context = await _open_traced_context(browser_manager, request, ui_config, restore_auth=False)
    page = await context.new_page()
    yield page
    await _close_traced_page(request, ui_config, context, page, page_registry)


# ================================================================================
# Authentication Fixtures
# ================================================================================

async def _login(page: Page, config: UIConfig) -> None:
    await LoginPage(page, config).login()


@pytest.fixture
async def auth_state(browser_manager: BrowserManager, ui_config: UIConfig) -> Path:
    """
    Path to a valid session-state file, logging in first if none is saved.
    """
    if not browser_manager.has_auth_state() and not ui_config.has_credentials:
        pytest.skip("No saved session state and TEST_USERNAME / TEST_PASSWORD not configured")
    return await ensure_auth_state(browser_manager, lambda p: _login(p, ui_config))


@pytest.fixture
async def authenticated_page(
    request,
    auth_state: Path,
    browser_manager: BrowserManager,
    ui_config: UIConfig,
    page_registry: List[BasePage],
) -> AsyncGenerator[Page, None]:
    """Page in a context restored from the saved session state."""
    context = await _open_traced_context(browser_manager, request, ui_config, restore_auth=True)
    page = await context.new_page()
    yield page
    await _close_traced_page(request, ui_config, context, page, page_registry)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, ui_config: UIConfig, page_registry: List[BasePage]) -> LoginPage:
    """LoginPage on an unauthenticated page."""
    page_object = LoginPage(page, ui_config)
    page_registry.append(page_object)
    return page_object


@pytest.fixture
def home_page(authenticated_page: Page, ui_config: UIConfig, page_registry: List[BasePage]) -> HomePage:
    """HomePage on an authenticated page."""
    page_object = HomePage(authenticated_page, ui_config)
    page_registry.append(page_object)
    return page_object


@pytest.fixture
def marketplace_page(
    authenticated_page: Page, ui_config: UIConfig, page_registry: List[BasePage]
) -> MarketplacePage:
    page_object = MarketplacePage(authenticated_page, ui_config)
    page_registry.append(page_object)
    return page_object


@pytest.fixture
def checkout_page(
    authenticated_page: Page, ui_config: UIConfig, page_registry: List[BasePage]
) -> CheckoutPage:
    page_object = CheckoutPage(authenticated_page, ui_config)
    page_registry.append(page_object)
    return page_object


@pytest.fixture
def orders_page(
    authenticated_page: Page, ui_config: UIConfig, page_registry: List[BasePage]
) -> OrdersPage:
    page_object = OrdersPage(authenticated_page, ui_config)
    page_registry.append(page_object)
    return page_object


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def billing_details() -> BillingDetails:
    """
    Billing data used when the account has no saved address.
    """
    return BillingDetails(
        first_name="John",
        last_name="Doe",
        street_address="123 Main Street",
        town_city="Dhaka",
        district="Bagerhat",
        product_usage="Other",
    )
