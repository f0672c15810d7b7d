"""
================================================================================
Home Page Object
================================================================================

Site header, search, featured products, footer and newsletter on the
marketplace landing page, plus the signed-in / signed-out checks used after
restoring a saved session.

================================================================================
"""

from __future__ import annotations

import re

import allure

from woo_suites.ui_testing.framework.page_base import PageBase
from woo_suites.ui_testing.framework.smart_locator import LocatorSpec, css, role, xpath


class HomePage(PageBase):
    """Home page object (async)."""

    URL_PATH = "/"

    LOGO = LocatorSpec.of(
        "logo",
        css('[data-testid="logo"]'),
        css("header a.custom-logo-link"),
        role("link", name=re.compile(r"woocommerce", re.I)),
    )
    NAVIGATION_MENU = LocatorSpec.of(
        "main navigation",
        css('nav[data-testid="main-navigation"]'),
        role("navigation"),
    )
    SEARCH_INPUT = LocatorSpec.of(
        "search input",
        css('input[placeholder="Search..."]'),
        role("searchbox"),
        css('input[type="search"]'),
    )
    SEARCH_BUTTON = LocatorSpec.of(
        "search button",
        css('button[data-testid="search-button"]'),
        role("button", name=re.compile(r"^search$", re.I)),
    )
    HEADER_TITLE = LocatorSpec.of(
        "header title",
        css('h1[data-testid="header-title"]'),
        css("h1"),
    )
    LOGIN_BUTTON = LocatorSpec.of(
        "login control",
        css('button[data-testid="login-button"]'),
        css('a[href*="/sso"]'),
        role("link", name=re.compile(r"^log ?in$", re.I)),
    )
    PROFILE_MENU = LocatorSpec.of(
        "profile menu",
        css('[data-testid="profile-menu"]'),
        css('a[href*="my-dashboard"]'),
        role("link", name=re.compile(r"my dashboard", re.I)),
    )
    FEATURED_SECTION = LocatorSpec.of(
        "featured section",
        css('section[data-testid="featured-section"]'),
        xpath('//section[.//h2[contains(normalize-space(.), "Featured")]]'),
    )
    PRODUCT_CARDS = LocatorSpec.of(
        "product cards",
        css('[data-testid="product-card"]'),
        css("li.product"),
    )
    FOOTER_LINKS = LocatorSpec.of(
        "footer links",
        css("footer a"),
    )
    NEWSLETTER_INPUT = LocatorSpec.of(
        "newsletter email input",
        css('input[name="newsletter-email"]'),
        css('footer input[type="email"]'),
    )
    SUBSCRIBE_BUTTON = LocatorSpec.of(
        "subscribe button",
        css('button[data-testid="subscribe-button"]'),
        role("button", name=re.compile(r"subscribe", re.I)),
    )

    @staticmethod
    def menu_item(item: str) -> LocatorSpec:
        return LocatorSpec.of(
            f"menu item '{item}'",
            css(f'nav[data-testid="main-navigation"] >> text="{item}"'),
            role("link", name=item, exact=True),
        )

    @classmethod
    def product_card(cls, index: int) -> LocatorSpec:
        return LocatorSpec.of(
            f"product card #{index}",
            *cls.PRODUCT_CARDS.strategies,
            nth=index,
        )

    @staticmethod
    def product_card_title(index: int) -> LocatorSpec:
        return LocatorSpec.of(
            f"product card #{index} title",
            css(f'[data-testid="product-card"] >> nth={index} >> h3'),
            css(f'[data-testid="product-card"] >> nth={index} >> [data-testid="product-title"]'),
            css(f"li.product >> nth={index} >> h2"),
        )

    @classmethod
    def footer_link(cls, link_text: str) -> LocatorSpec:
        return LocatorSpec.of(
            f"footer link '{link_text}'",
            *cls.FOOTER_LINKS.strategies,
            has_text=link_text,
        )

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        await self.navigate()
        await self.wait_for_page_load("load")
        return self

    @allure.step("Search for product: {product_name}")
    async def search_for_product(self, product_name: str) -> None:
        await self.fill(self.SEARCH_INPUT, product_name)
        await self.click(self.SEARCH_BUTTON)
        await self.wait_for_page_load("load")

    async def click_logo(self) -> None:
        await self.click(self.LOGO)

    async def is_logo_visible(self) -> bool:
        return await self.is_visible(self.LOGO)

    async def get_header_title(self) -> str:
        return await self.get_inner_text(self.HEADER_TITLE)

    async def click_login_button(self) -> None:
        await self.click(self.LOGIN_BUTTON)

    async def is_login_button_visible(self) -> bool:
        return await self.is_visible(self.LOGIN_BUTTON)

    async def is_profile_menu_visible(self) -> bool:
        return await self.is_visible(self.PROFILE_MENU)

    async def click_profile_menu(self) -> None:
        await self.click(self.PROFILE_MENU)

    @allure.step("Navigate to menu item: {menu_item}")
    async def navigate_to_menu_item(self, menu_item: str) -> None:
        await self.click(self.menu_item(menu_item))
        await self.wait_for_page_load("load")

    async def is_featured_section_visible(self) -> bool:
        return await self.is_visible(self.FEATURED_SECTION)

    async def get_product_cards_count(self) -> int:
        return await self.count(self.PRODUCT_CARDS)

    async def click_product_card_by_index(self, index: int) -> None:
        await self.click(self.product_card(index))
        await self.wait_for_page_load("load")

    async def get_product_card_title(self, index: int) -> str:
        return await self.get_inner_text(self.product_card_title(index))

    @allure.step("Subscribe to newsletter")
    async def subscribe_to_newsletter(self, email: str) -> None:
        await self.scroll_to(self.NEWSLETTER_INPUT)
        await self.fill(self.NEWSLETTER_INPUT, email)
        await self.click(self.SUBSCRIBE_BUTTON)

    async def get_footer_links_count(self) -> int:
        return await self.count(self.FOOTER_LINKS)

    async def click_footer_link(self, link_text: str) -> None:
        link = self.footer_link(link_text)
        await self.scroll_to(link)
        await self.click(link)

    @allure.step("Verify home page loaded")
    async def verify_home_page_loaded(self) -> None:
        await self.verify_visible(self.LOGO)
        await self.verify_visible(self.NAVIGATION_MENU)
        await self.verify_visible(self.SEARCH_INPUT)

    @allure.step("Verify user is logged in")
    async def verify_user_logged_in(self) -> None:
        """Signed in means no login control is shown."""
        await self.verify_hidden(self.LOGIN_BUTTON)

    async def verify_featured_section_displayed(self) -> None:
        await self.verify_visible(self.FEATURED_SECTION)
