"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the WooCommerce marketplace.

Each page class encapsulates:
    - Element declarations (LocatorSpec class attributes / factories)
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage
from .home_page import HomePage
from .marketplace_page import MarketplacePage
from .checkout_page import BillingDetails, CheckoutPage, ORDER_SUCCESS_TEXT
from .orders_page import OrdersPage

__all__ = [
    "LoginPage",
    "HomePage",
    "MarketplacePage",
    "CheckoutPage",
    "BillingDetails",
    "ORDER_SUCCESS_TEXT",
    "OrdersPage",
]
