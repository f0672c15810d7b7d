"""
================================================================================
UI Test Errors
================================================================================

Exception taxonomy shared by the locator resolver, page objects and fixtures.

    UITestError
      ├── ElementNotFoundError    no locator strategy matched
      ├── TimeoutExceededError    element found, required state never reached
      └── NavigationFailureError  page never reached the expected URL/state

Author: Automation Team
License: MIT
================================================================================
"""


class UITestError(Exception):
    """Base class for all UI automation failures."""
    pass


class ElementNotFoundError(UITestError):
    """Raised when all locator strategies fail to find element."""
    pass


class TimeoutExceededError(UITestError):
    """Raised when an element never reaches the required state in time."""
    pass


class NavigationFailureError(UITestError):
    """Raised when navigation fails or the expected URL never loads."""
    pass


__all__ = [
    "UITestError",
    "ElementNotFoundError",
    "TimeoutExceededError",
    "NavigationFailureError",
]
