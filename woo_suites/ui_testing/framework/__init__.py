"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework with healing fallback locators.

Components:
    - smart_locator: Ordered-fallback element resolution (LocatorSpec -> element)
    - page_base: Base page object for navigation, waits and interactions
    - browser_manager: Browser lifecycle and session-state persistence
    - errors: ElementNotFound / TimeoutExceeded / NavigationFailure

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    ElementNotFoundError,
    NavigationFailureError,
    TimeoutExceededError,
    UITestError,
)
from .smart_locator import LocatorSpec, Pick, ResolvedElement, SelectorStrategy, SmartLocator
from .page_base import BasePage
from .browser_manager import BrowserManager, ensure_auth_state

__all__ = [
    "SmartLocator",
    "LocatorSpec",
    "SelectorStrategy",
    "Pick",
    "ResolvedElement",
    "UITestError",
    "ElementNotFoundError",
    "TimeoutExceededError",
    "NavigationFailureError",
    "BasePage",
    "BrowserManager",
    "ensure_auth_state",
]
