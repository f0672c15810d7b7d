"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation with NavigationFailureError on failure
    - Element interactions over LocatorSpecs (resolve -> wait for state -> act)
    - State-based wait helpers (no fixed sleeps)
    - Assertions via playwright `expect`
    - Screenshot and failure capture for Allure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Pattern, TypeVar, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page, Response, expect
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from woo_tools.common.config_loader import UIConfig
from woo_tools.report_tools.allure_utils import attach_json, attach_png, attach_text

from .errors import ElementNotFoundError, NavigationFailureError, TimeoutExceededError
from .smart_locator import LocatorSpec, SmartLocator


T = TypeVar("T")

UrlMatcher = Union[str, Pattern[str], Callable[[str], bool]]


class BasePage:
    """
    Base class for all page objects.

    Every element action follows the same sequence:
        1. wait (bounded) until any strategy of the spec is attached
        2. resolve the spec to one element (first matching strategy wins)
        3. wait for the element state the action needs
        4. interact

    Usage:
        class CartPage(BasePage):
            URL_PATH = "/cart"
            CHECKOUT = LocatorSpec.of("checkout", css("a.checkout"), role("link", name="Checkout"))

            async def checkout(self):
                await self.click(self.CHECKOUT)
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(self, page: Page, config: UIConfig):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            config: Run configuration (base URL, timeouts, artifacts dir)
        """
        self.page = page
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.default_timeout
        self.smart = SmartLocator(page)

        self._failed_responses: List[Dict[str, Any]] = []
        self.page.on("response", self._capture_response)

    def _capture_response(self, response: Response) -> None:
        """Keep the last 20 HTTP error responses for failure reports."""
        if response.status < 400:
            return
        self._failed_responses.append({
            "timestamp": datetime.now().isoformat(),
            "url": response.url,
            "status": response.status,
        })
        if len(self._failed_responses) > 20:
            self._failed_responses.pop(0)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return self.config.url_for(self.URL_PATH)

    @property
    def current_url(self) -> str:
        return self.page.url

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        await self.navigate_to(self.URL_PATH, wait_for=wait_for)

    async def navigate_to(
        self,
        path: str = "",
        wait_for: str = "domcontentloaded",
    ) -> None:
        """
        Navigate to a base-relative path or an absolute URL.

        Raises:
            NavigationFailureError: When the browser cannot load the URL
        """
        full_url = self.config.url_for(path)
        with allure.step(f"Navigate to {full_url}"):
            try:
                response = await self.page.goto(
                    full_url,
                    wait_until=wait_for,
                    timeout=self.config.navigation_timeout,
                )
            except PlaywrightError as e:
                raise NavigationFailureError(f"Failed to open {full_url}: {e}") from e

        if response is not None and response.status >= 400:
            logger.warning(f"Navigated to {full_url} with HTTP {response.status}")
        else:
            logger.debug(f"Navigated to: {full_url}")

    async def wait_for_url(
        self,
        url: UrlMatcher,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for URL to match a glob, regex or predicate.

        Raises:
            NavigationFailureError: When the URL never matches
        """
        timeout = timeout or self.config.navigation_timeout
        with allure.step(f"Wait for URL: {url}"):
            try:
                await self.page.wait_for_url(url, timeout=timeout)
            except PlaywrightTimeoutError as e:
                raise NavigationFailureError(
                    f"URL did not match {url} within {timeout}ms (current: {self.page.url})"
                ) from e

    async def wait_for_page_load(
        self,
        state: str = "networkidle",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds
        """
        timeout = timeout or self.config.navigation_timeout
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise TimeoutExceededError(
                f"Page did not reach '{state}' within {timeout}ms"
            ) from e

    async def wait_for_dom_content_loaded(self) -> None:
        await self.wait_for_page_load("domcontentloaded")

    async def reload(self) -> None:
        await self.page.reload(wait_until="domcontentloaded")

    async def go_back(self) -> None:
        await self.page.go_back(wait_until="domcontentloaded")

    async def get_title(self) -> str:
        return await self.page.title()

    # =========================================================================
    # Resolution
    # =========================================================================

    async def locate(
        self,
        spec: LocatorSpec,
        state: Optional[str] = "visible",
        timeout: Optional[int] = None,
    ) -> Locator:
        """
        Resolve `spec` and wait for the chosen element to reach `state`.

        Args:
            spec: Element declaration
            state: 'visible', 'attached', 'hidden' or None to skip the wait
            timeout: Timeout in milliseconds (defaults to config)

        Returns:
            Locator of the single resolved element

        Raises:
            ElementNotFoundError: No strategy matched
            TimeoutExceededError: Element never reached `state`
        """
        timeout = timeout or self.timeout
        await self._wait_until_any_attached(spec, timeout)
        element = await self.smart.resolve(spec)

        if state is not None:
            try:
                await element.locator.wait_for(state=state, timeout=timeout)
            except PlaywrightTimeoutError as e:
                raise TimeoutExceededError(
                    f"'{spec.name}' ({element.strategy.describe()}) did not become "
                    f"{state} within {timeout}ms"
                ) from e
        return element.locator

    async def _wait_until_any_attached(self, spec: LocatorSpec, timeout: int) -> None:
        """Give the page up to `timeout` for any strategy to attach."""
        try:
            await self.smart.any_of(spec).wait_for(state="attached", timeout=timeout)
        except PlaywrightTimeoutError:
            # resolve() raises ElementNotFoundError with per-strategy details
            logger.debug(f"No strategy for '{spec.name}' attached within {timeout}ms")

    async def _act(
        self,
        spec: LocatorSpec,
        description: str,
        action: Callable[[Locator], Awaitable[T]],
        state: Optional[str] = "visible",
        timeout: Optional[int] = None,
    ) -> T:
        timeout = timeout or self.timeout
        with allure.step(description):
            locator = await self.locate(spec, state=state, timeout=timeout)
            try:
                return await action(locator)
            except PlaywrightTimeoutError as e:
                raise TimeoutExceededError(
                    f"{description} timed out after {timeout}ms"
                ) from e

    # =========================================================================
    # Element Interactions
    # =========================================================================

    async def click(
        self,
        spec: LocatorSpec,
        timeout: Optional[int] = None,
        state: Optional[str] = "visible",
        **kwargs: Any,
    ) -> None:
        """
        Click element.

        Args:
            spec: Element to click
            timeout: Timeout in milliseconds
            state: Element state required before clicking
            **kwargs: Additional click options (force, position, ...)
        """
        timeout = timeout or self.timeout
        await self._act(
            spec,
            f"Click: {spec.name}",
            lambda loc: loc.click(timeout=timeout, **kwargs),
            state=state,
            timeout=timeout,
        )

    async def fill(
        self,
        spec: LocatorSpec,
        value: str,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Fill input element.

        Args:
            spec: Input element
            value: Value to fill
            timeout: Timeout in milliseconds
        """
        timeout = timeout or self.timeout
        shown = "*" * len(value) if "password" in spec.name.lower() else value
        await self._act(
            spec,
            f"Fill {spec.name}: {shown}",
            lambda loc: loc.fill(value, timeout=timeout),
            timeout=timeout,
        )

    async def hover(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        timeout = timeout or self.timeout
        await self._act(spec, f"Hover: {spec.name}", lambda loc: loc.hover(timeout=timeout), timeout=timeout)

    async def select_option(
        self,
        spec: LocatorSpec,
        value: str,
        timeout: Optional[int] = None,
    ) -> None:
        """Select an option of a native <select> element by value or label."""
        timeout = timeout or self.timeout
        await self._act(
            spec,
            f"Select '{value}' in {spec.name}",
            lambda loc: loc.select_option(value, timeout=timeout),
            timeout=timeout,
        )

    async def check(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        timeout = timeout or self.timeout
        await self._act(spec, f"Check: {spec.name}", lambda loc: loc.check(timeout=timeout), timeout=timeout)

    async def uncheck(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        timeout = timeout or self.timeout
        await self._act(spec, f"Uncheck: {spec.name}", lambda loc: loc.uncheck(timeout=timeout), timeout=timeout)

    async def scroll_to(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        timeout = timeout or self.timeout
        await self._act(
            spec,
            f"Scroll to: {spec.name}",
            lambda loc: loc.scroll_into_view_if_needed(timeout=timeout),
            state="attached",
            timeout=timeout,
        )

    async def press_key(self, key: str) -> None:
        await self.page.keyboard.press(key)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_text(self, spec: LocatorSpec, timeout: Optional[int] = None) -> str:
        """Text content of element ('' when empty)."""
        locator = await self.locate(spec, timeout=timeout)
        return await locator.text_content() or ""

    async def get_inner_text(self, spec: LocatorSpec, timeout: Optional[int] = None) -> str:
        locator = await self.locate(spec, timeout=timeout)
        return await locator.inner_text()

    async def get_attribute(
        self,
        spec: LocatorSpec,
        attribute: str,
        timeout: Optional[int] = None,
    ) -> Optional[str]:
        locator = await self.locate(spec, state="attached", timeout=timeout)
        return await locator.get_attribute(attribute)

    async def count(self, spec: LocatorSpec) -> int:
        """
        Number of matches of the winning strategy (0 when nothing matches).

        Does not wait.
        """
        try:
            element = await self.smart.resolve(spec)
        except ElementNotFoundError:
            return 0
        return element.match_count

    async def is_visible(self, spec: LocatorSpec, timeout: int = 2000) -> bool:
        """
        Check if element is visible within `timeout`.

        Returns:
            True if visible, False when missing or not visible in time
        """
        try:
            await self.locate(spec, state="visible", timeout=timeout)
        except (ElementNotFoundError, TimeoutExceededError):
            return False
        return True

    async def is_enabled(self, spec: LocatorSpec, timeout: Optional[int] = None) -> bool:
        locator = await self.locate(spec, timeout=timeout)
        return await locator.is_enabled()

    # =========================================================================
    # Assertions
    # =========================================================================

    async def verify_visible(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        locator = await self.locate(spec, timeout=timeout)
        await expect(locator).to_be_visible()

    async def verify_hidden(self, spec: LocatorSpec, timeout: Optional[int] = None) -> None:
        """Pass when the element is absent or becomes hidden within `timeout`."""
        try:
            element = await self.smart.resolve(spec)
        except ElementNotFoundError:
            return
        await expect(element.locator).to_be_hidden(timeout=timeout or self.timeout)

    async def verify_has_text(self, spec: LocatorSpec, text: str, timeout: Optional[int] = None) -> None:
        locator = await self.locate(spec, timeout=timeout)
        await expect(locator).to_have_text(text)

    async def verify_contains_text(self, spec: LocatorSpec, text: str, timeout: Optional[int] = None) -> None:
        locator = await self.locate(spec, timeout=timeout)
        await expect(locator).to_contain_text(text)

    async def verify_url_contains(self, url_part: str) -> None:
        await expect(self.page).to_have_url(re.compile(re.escape(url_part)))

    async def verify_title(self, title: str) -> None:
        await expect(self.page).to_have_title(title)

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    @property
    def screenshot_dir(self) -> Path:
        return Path(self.config.artifacts_dir) / "screenshots"

    async def screenshot(
        self,
        name: str,
        full_page: bool = True,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.screenshot_dir / f"{name}_{timestamp}.png"

        png = await self.page.screenshot(path=str(filepath), full_page=full_page)
        if attach_to_allure:
            attach_png(png, name=name)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Attach debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Locator health report
            - Recent HTTP error responses
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}")
            attach_text(self.page.url, name="Current URL")
            attach_text(self.get_locator_health_report(), name="Locator Health")
            if self._failed_responses:
                attach_json(self._failed_responses[-10:], name="Recent HTTP Errors")

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
    "PageBase",
]

# Alias kept for page objects that prefer the PageBase naming
PageBase = BasePage
