"""
================================================================================
Orders UI Tests (Async / Playwright)
================================================================================

Order history: Orders link -> first order's View page.

================================================================================
"""

import allure
import pytest

from woo_suites.ui_testing.pages import HomePage, OrdersPage


@allure.epic("UI Testing")
@allure.feature("Orders")
@pytest.mark.e2e
@pytest.mark.orders
class TestOrders:
    """Orders UI test suite (async)."""

    @allure.story("Order History")
    @allure.title("Navigate to Orders and view first order")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.timeout(60)
    @pytest.mark.asyncio
    async def test_view_first_order(self, home_page: HomePage, orders_page: OrdersPage):
        await home_page.open()

        await orders_page.click_orders_button()
        assert "/orders" in orders_page.current_url

        orders_url = orders_page.current_url
        await orders_page.click_first_view_button()
        assert orders_page.current_url != orders_url
