"""
================================================================================
Login Page Object (WooCommerce SSO)
================================================================================

Two-step login:
  1. woocommerce.com/sso: email + password, "Continue"
  2. WordPress.com authorization: "Log In"
  3. Redirect back to woocommerce.com/my-dashboard

After a successful login the caller persists the context's storage state so
later runs skip this page entirely.

================================================================================
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

import allure
from loguru import logger

from woo_suites.ui_testing.framework.page_base import PageBase
from woo_suites.ui_testing.framework.smart_locator import LocatorSpec, css, role
from woo_tools.common.config_loader import ConfigurationError


def is_dashboard_url(url: str) -> bool:
    """True for a woocommerce.com URL whose path contains my-dashboard."""
    parsed = urlparse(url)
    return "woocommerce.com" in (parsed.hostname or "") and "my-dashboard" in parsed.path


class LoginPage(PageBase):
    """SSO login page object (async)."""

    EMAIL_INPUT = LocatorSpec.of(
        "email input",
        css('input[name="email"]'),
        css('input[type="email"]'),
        css('input[id="usernameOrEmail"]'),
    )
    PASSWORD_INPUT = LocatorSpec.of(
        "password input",
        css('input[name="password"]'),
        css('input[type="password"]'),
        css('input[id="password"]'),
    )
    CONTINUE_BUTTON = LocatorSpec.of(
        "continue button",
        css('button[type="submit"]:has-text("Continue")'),
        role("button", name=re.compile(r"^continue$", re.I)),
    )
    WPCOM_LOGIN_BUTTON = LocatorSpec.of(
        "wordpress.com log in button",
        css('button:has-text("Log In")'),
        role("button", name=re.compile(r"log in", re.I)),
    )

    @property
    def url(self) -> str:
        return self.config.sso_url

    @allure.step("Open SSO login page")
    async def open(self) -> "LoginPage":
        await self.navigate_to(self.config.sso_url)
        return self

    @allure.step("Verify login form is displayed")
    async def verify_form_displayed(self) -> bool:
        email_ok = await self.is_visible(self.EMAIL_INPUT, timeout=5000)
        password_ok = await self.is_visible(self.PASSWORD_INPUT, timeout=5000)
        return email_ok and password_ok

    @allure.step("Login (username={username})")
    async def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """
        Perform the full SSO login and wait for the dashboard redirect.

        Args:
            username: Account email. Defaults to the configured TEST_USERNAME.
            password: Account password. Defaults to the configured TEST_PASSWORD.

        Raises:
            ConfigurationError: No credentials given or configured
            NavigationFailureError: Dashboard redirect never happened
        """
        username = username if username is not None else self.config.username
        password = password if password is not None else self.config.password
        if not username or not password:
            raise ConfigurationError("TEST_USERNAME / TEST_PASSWORD are not configured")

        logger.info(f"Authenticating user on: {self.config.base_url}")
        await self.open()

        await self.fill(self.EMAIL_INPUT, username)
        await self.fill(self.PASSWORD_INPUT, password)
        await self.click(self.CONTINUE_BUTTON)

        await self.wait_for_page_load("networkidle")
        await self.click(self.WPCOM_LOGIN_BUTTON)

        await self.wait_for_url(is_dashboard_url)
        await self.wait_for_page_load("load")
        logger.info(f"Current URL after login: {self.page.url}")
