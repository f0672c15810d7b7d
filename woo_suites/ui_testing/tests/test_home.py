"""
================================================================================
Home Page UI Tests (Async / Playwright)
================================================================================

Signed-in vs signed-out header state on the landing page.

================================================================================
"""

import allure
import pytest

from woo_suites.ui_testing.pages import HomePage


@allure.epic("UI Testing")
@allure.feature("Home")
@pytest.mark.e2e
class TestHome:
    """Home page UI test suite (async)."""

    @allure.story("Session")
    @allure.title("Restored session shows no login control")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_restored_session_is_signed_in(self, home_page: HomePage):
        await home_page.open()
        await home_page.verify_user_logged_in()

    @allure.story("Session")
    @allure.title("Fresh context shows the login control")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.asyncio
    async def test_signed_out_shows_login(self, page, ui_config):
        home_page = HomePage(page, ui_config)
        await home_page.open()
        assert await home_page.is_login_button_visible()
