"""
================================================================================
Marketplace Page Object
================================================================================

Browsing the extensions marketplace: Extensions menu, Free category, a
product page, adding it to the cart and opening the cart.

================================================================================
"""

from __future__ import annotations

import re

import allure
from loguru import logger

from woo_suites.ui_testing.framework.page_base import PageBase
from woo_suites.ui_testing.framework.smart_locator import LocatorSpec, css, role, xpath


class MarketplacePage(PageBase):
    """Marketplace browsing page object (async)."""

    URL_PATH = "/products/"

    EXTENSIONS_BUTTON = LocatorSpec.of(
        "extensions menu",
        xpath('//button[@data-tracks-key="extensions"]//span'),
        css('button[data-tracks-key="extensions"] span'),
        role("button", name=re.compile(r"extensions", re.I)),
    )
    FREE_BUTTON = LocatorSpec.of(
        "free category",
        xpath('//a[@data-tracks-key="free"]'),
        css('a[data-tracks-key="free"]'),
        role("link", name=re.compile(r"free", re.I)),
    )
    WOOPAYMENTS_LINK = LocatorSpec.of(
        "WooPayments product link",
        xpath('//a[normalize-space(text())="WooPayments"]'),
        role("link", name="WooPayments", exact=True),
        css('a[href*="woopayments"]'),
    )
    # The first matching control sits in the sticky header; the second is on the page body.
    ADD_TO_CART_BUTTON = LocatorSpec.of(
        "add to cart button",
        xpath('//a[@aria-controls="cart-added-popover"]'),
        css('a[aria-controls="cart-added-popover"]'),
        role("link", name=re.compile(r"add to cart", re.I)),
        nth=1,
    )
    CART_ADDED_POPOVER = LocatorSpec.of(
        "cart added popover",
        css("#cart-added-popover"),
        css('[id*="cart-added"]'),
        role("dialog", name=re.compile(r"added to (your )?cart", re.I)),
    )
    CART_ICON = LocatorSpec.of(
        "cart icon",
        xpath('//a[@data-tracks-placement="header-cart"]'),
        css('a[data-tracks-placement="header-cart"]'),
        css('[data-testid="cart-icon"]'),
    )

    @allure.step("Open Extensions menu")
    async def click_extension_button(self) -> None:
        await self.click(self.EXTENSIONS_BUTTON)
        await self.wait_for_dom_content_loaded()

    @allure.step("Open Free category")
    async def click_free_button(self) -> None:
        await self.click(self.FREE_BUTTON)
        await self.wait_for_dom_content_loaded()

    @allure.step("Open WooPayments product")
    async def click_woopayments_link(self) -> None:
        await self.scroll_to(self.WOOPAYMENTS_LINK)
        await self.click(self.WOOPAYMENTS_LINK)
        await self.wait_for_dom_content_loaded()

    @allure.step("Add product to cart")
    async def click_add_to_cart(self) -> None:
        """Click Add to cart and wait for the cart popover instead of a fixed delay."""
        await self.scroll_to(self.ADD_TO_CART_BUTTON)
        await self.click(self.ADD_TO_CART_BUTTON)
        await self.locate(self.CART_ADDED_POPOVER, state="visible")
        logger.debug("Cart popover shown after add to cart")

    @allure.step("Open cart")
    async def click_cart_icon(self) -> None:
        await self.click(self.CART_ICON)
        await self.wait_for_dom_content_loaded()

    async def browse_to_free_woopayments(self) -> None:
        """Extensions -> Free -> WooPayments."""
        await self.click_extension_button()
        await self.click_free_button()
        await self.click_woopayments_link()
