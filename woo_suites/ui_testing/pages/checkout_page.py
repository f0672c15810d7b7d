"""
================================================================================
Checkout Page Object
================================================================================

Cart -> checkout -> free order confirmation.

The billing form is only shown when the account has no saved billing
address; `complete_billing_if_required` handles both cases.

================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import allure
from loguru import logger

from woo_suites.ui_testing.framework.page_base import PageBase
from woo_suites.ui_testing.framework.smart_locator import LocatorSpec, css, role, xpath


ORDER_SUCCESS_TEXT = "Thanks for your order!"


@dataclass(frozen=True)
class BillingDetails:
    """Billing form input for a free order."""
    first_name: str
    last_name: str
    street_address: str
    town_city: str
    district: str
    product_usage: str


def _dropdown_option(kind: str, option: str) -> LocatorSpec:
    return LocatorSpec.of(
        f"{kind} option '{option}'",
        xpath(f'//li[normalize-space(text())="{option}"]'),
        css(f'li:has-text("{option}")'),
        css(f'option:has-text("{option}")'),
    )


class CheckoutPage(PageBase):
    """Cart and checkout page object (async)."""

    URL_PATH = "/checkout/"

    PROCEED_TO_CHECKOUT_BUTTON = LocatorSpec.of(
        "proceed to checkout button",
        xpath('//div[normalize-space(text())="Proceed to Checkout"]'),
        role("link", name=re.compile(r"proceed to checkout", re.I)),
        css('a:has-text("Proceed to checkout")'),
        css('button:has-text("Proceed to checkout")'),
    )
    FIRST_NAME_INPUT = LocatorSpec.of(
        "first name input",
        xpath('//label[contains(.,"First name *")]/following::input'),
        css('label:has-text("First name") + input'),
        css('input[name="firstName"]'),
    )
    LAST_NAME_INPUT = LocatorSpec.of(
        "last name input",
        xpath('//label[contains(.,"Last name *")]/following::input'),
        css('label:has-text("Last name") + input'),
        css('input[name="lastName"]'),
    )
    STREET_ADDRESS_INPUT = LocatorSpec.of(
        "street address input",
        xpath('//label[contains(.,"Street address *")]/following::input'),
        css('label:has-text("Street address") + input'),
        css('input[name="streetAddress"]'),
    )
    TOWN_CITY_INPUT = LocatorSpec.of(
        "town / city input",
        xpath('//label[contains(.,"Town / City *")]/following::input'),
        css('label:has-text("Town") + input'),
        css('input[name="city"]'),
    )
    DISTRICT_DROPDOWN = LocatorSpec.of(
        "district dropdown",
        xpath('//span[@aria-label="District"]'),
        css('span[aria-label="District"]'),
        css('[data-testid="district-dropdown"]'),
    )
    # Third combobox on the form (after country and district).
    PRODUCT_USE_DROPDOWN = LocatorSpec.of(
        "product use dropdown",
        xpath('//span[@role="combobox"]'),
        css('span[role="combobox"]'),
        nth=2,
    )
    PLACE_ORDER_BUTTON = LocatorSpec.of(
        "place order button",
        xpath('//button[normalize-space(text())="Place free order"]'),
        xpath('//div[@class="form-row place-order"]//button[1]'),
        role("button", name=re.compile(r"place free order", re.I)),
        css('button:has-text("Place free order")'),
    )
    ORDER_SUCCESS_HEADING = LocatorSpec.of(
        "order success heading",
        xpath(f'//h1[normalize-space(text())="{ORDER_SUCCESS_TEXT}"]'),
        role("heading", name=re.compile(r"thanks for your order", re.I)),
        css('[data-testid="order-success"]'),
    )
    # Either control means the checkout form finished rendering.
    CHECKOUT_READY = LocatorSpec.of(
        "checkout form",
        *PLACE_ORDER_BUTTON.strategies,
        *FIRST_NAME_INPUT.strategies,
    )

    @staticmethod
    def district_option(district_name: str) -> LocatorSpec:
        return _dropdown_option("district", district_name)

    @staticmethod
    def product_use_option(option_name: str) -> LocatorSpec:
        return _dropdown_option("product use", option_name)

    @allure.step("Proceed to checkout")
    async def click_proceed_to_checkout(self) -> None:
        await self.scroll_to(self.PROCEED_TO_CHECKOUT_BUTTON)
        await self.click(self.PROCEED_TO_CHECKOUT_BUTTON)
        await self.wait_for_dom_content_loaded()

    @allure.step("Wait for checkout form")
    async def wait_for_checkout_ready(self) -> None:
        await self.locate(self.CHECKOUT_READY, state="visible", timeout=self.config.navigation_timeout)

    @allure.step("Fill billing form")
    async def fill_checkout_form(self, details: BillingDetails) -> None:
        await self.fill(self.FIRST_NAME_INPUT, details.first_name)
        await self.fill(self.LAST_NAME_INPUT, details.last_name)
        await self.fill(self.STREET_ADDRESS_INPUT, details.street_address)
        await self.fill(self.TOWN_CITY_INPUT, details.town_city)

    async def _choose(self, dropdown: LocatorSpec, option: LocatorSpec) -> None:
        await self.scroll_to(dropdown)
        await self.click(dropdown)
        # The option list renders after the click; click() waits for it to be visible.
        await self.click(option)

    @allure.step("Select district: {district_name}")
    async def select_district(self, district_name: str) -> None:
        await self._choose(self.DISTRICT_DROPDOWN, self.district_option(district_name))

    @allure.step("Select product usage: {usage_option}")
    async def select_product_usage(self, usage_option: str) -> None:
        await self._choose(self.PRODUCT_USE_DROPDOWN, self.product_use_option(usage_option))

    async def is_place_order_button_visible(self) -> bool:
        return await self.is_visible(self.PLACE_ORDER_BUTTON, timeout=5000)

    @allure.step("Complete billing details if required")
    async def complete_billing_if_required(self, details: BillingDetails) -> bool:
        """
        Fill the billing form unless the saved address is already applied.

        Returns:
            True if the form was filled, False if it was pre-filled
        """
        if await self.is_place_order_button_visible():
            logger.info("Checkout page loaded with pre-filled billing address")
            return False

        await self.fill_checkout_form(details)
        await self.select_district(details.district)
        await self.select_product_usage(details.product_usage)
        logger.info("Filled billing information")
        return True

    @allure.step("Place free order")
    async def click_place_order(self) -> None:
        await self.scroll_to(self.PLACE_ORDER_BUTTON)
        await self.click(self.PLACE_ORDER_BUTTON)

    @allure.step("Verify order success")
    async def verify_order_success(self) -> None:
        await self.verify_has_text(
            self.ORDER_SUCCESS_HEADING,
            ORDER_SUCCESS_TEXT,
            timeout=self.config.navigation_timeout,
        )

    async def is_order_success_visible(self) -> bool:
        return await self.is_visible(self.ORDER_SUCCESS_HEADING)
