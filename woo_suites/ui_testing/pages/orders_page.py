"""
================================================================================
Orders Page Object
================================================================================

My Account -> Orders -> first order's details.

================================================================================
"""

from __future__ import annotations

import re

import allure

from woo_suites.ui_testing.framework.page_base import PageBase
from woo_suites.ui_testing.framework.smart_locator import LocatorSpec, css, role, xpath


class OrdersPage(PageBase):
    """Orders list page object (async)."""

    URL_PATH = "/my-account/orders/"

    ORDERS_BUTTON = LocatorSpec.of(
        "orders link",
        role("link", name="Orders", exact=True),
        css('a[href*="/my-account/orders"]'),
        xpath('//span[normalize-space(text())="Orders"]/..'),
    )
    FIRST_VIEW_BUTTON = LocatorSpec.of(
        "first order view button",
        xpath('//a[contains(@class,"wccom-button view")]'),
        css("a.wccom-button.view"),
        role("link", name="View", exact=True),
    )

    @allure.step("Open Orders")
    async def click_orders_button(self) -> None:
        """
        The Orders link can be covered by the account menu overlay, so it is
        clicked once attached rather than once visible.
        """
        await self.click(self.ORDERS_BUTTON, state="attached", timeout=10000, force=True)
        await self.wait_for_url(re.compile(r"/orders"))
        await self.wait_for_dom_content_loaded()

    @allure.step("View first order")
    async def click_first_view_button(self) -> None:
        orders_url = self.page.url
        await self.scroll_to(self.FIRST_VIEW_BUTTON)
        await self.click(self.FIRST_VIEW_BUTTON)
        await self.wait_for_url(lambda url: url != orders_url)
        await self.wait_for_dom_content_loaded()
