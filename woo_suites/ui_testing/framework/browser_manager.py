"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per manager, isolated contexts per test
    - Session-state persistence (cookies + origins) to skip re-login
    - Trace and video capture for failure diagnostics
    - Launch/context options derived from UIConfig

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from woo_tools.common.config_loader import UIConfig


class BrowserManager:
    """
    Manages a browser instance and its contexts for one test.

    Usage:
        async with BrowserManager(config) as manager:
            context = await manager.new_context()
            page = await context.new_page()

        # Restore a saved login
        async with BrowserManager(config) as manager:
            page = await manager.new_page(restore_auth=True)
    """

    # Default browser launch arguments
    DEFAULT_LAUNCH_ARGS: List[str] = [
        "--ignore-certificate-errors",
        "--disable-blink-features=AutomationControlled",
    ]

    def __init__(self, config: UIConfig):
        """
        Initialize browser manager.

        Args:
            config: Run configuration (browser, headless, timeouts, paths)
        """
        self.config = config

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    @property
    def auth_state_file(self) -> Path:
        return Path(self.config.storage_state_path)

    def has_auth_state(self) -> bool:
        return self.auth_state_file.exists()

    def launch_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "headless": self.config.headless,
            "slow_mo": self.config.slow_mo,
        }
        if self.config.browser == "chromium":
            options["args"] = list(self.DEFAULT_LAUNCH_ARGS)
        return options

    def context_options(
        self,
        restore_auth: bool = True,
        record_video_dir: Optional[Path] = None,
        **overrides: Any,
    ) -> Dict[str, Any]:
        """
        Build options for `browser.new_context`.

        Args:
            restore_auth: Load the saved session state when the file exists
            record_video_dir: Directory for video recording (None = off)
            **overrides: Explicit context options, applied last
        """
        options: Dict[str, Any] = {
            "base_url": self.config.base_url,
            "viewport": self.config.viewport,
            "ignore_https_errors": True,
        }
        if restore_auth and self.has_auth_state():
            options["storage_state"] = str(self.auth_state_file)
        if record_video_dir is not None:
            options["record_video_dir"] = str(record_video_dir)
            options["record_video_size"] = self.config.viewport
        options.update(overrides)
        return options

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self.config.browser)
        self._browser = await browser_launcher.launch(**self.launch_options())
        logger.debug(
            f"Browser started: {self.config.browser} "
            f"(headless={self.config.headless})"
        )

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.warning(f"Failed to close browser context: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(
        self,
        restore_auth: bool = True,
        record_video_dir: Optional[Path] = None,
        **options: Any,
    ) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.

        Args:
            restore_auth: Restore the saved session state if present
            record_video_dir: Record video into this directory
            **options: Additional context options

        Returns:
            New BrowserContext with configured default timeouts
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = self.context_options(
            restore_auth=restore_auth,
            record_video_dir=record_video_dir,
            **options,
        )
        if "storage_state" in context_options:
            logger.debug(f"Restoring session state from {context_options['storage_state']}")

        context = await self._browser.new_context(**context_options)
        context.set_default_timeout(self.config.default_timeout)
        context.set_default_navigation_timeout(self.config.navigation_timeout)
        self._contexts.append(context)
        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """
        Create new page in new or existing context.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context

        Returns:
            New Page
        """
        if context is None:
            context = await self.new_context(**context_options)

        return await context.new_page()

    async def save_auth_state(self, context: BrowserContext) -> Path:
        """
        Save authentication state for reuse.

        Writes cookies and localStorage origins to the configured file.

        Args:
            context: Context with authentication to save

        Returns:
            Path of the written session-state file
        """
        self.auth_state_file.parent.mkdir(parents=True, exist_ok=True)
        await context.storage_state(path=str(self.auth_state_file))
        logger.info(f"Authentication state saved to: {self.auth_state_file}")
        return self.auth_state_file

    @staticmethod
    async def start_tracing(context: BrowserContext) -> None:
        await context.tracing.start(screenshots=True, snapshots=True, sources=True)

    @staticmethod
    async def stop_tracing(context: BrowserContext, path: Optional[Path] = None) -> Optional[Path]:
        """
        Stop tracing; keep the trace zip only when `path` is given.
        """
        if path is None:
            await context.tracing.stop()
            return None
        path.parent.mkdir(parents=True, exist_ok=True)
        await context.tracing.stop(path=str(path))
        return path

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


# =============================================================================
# Convenience Functions
# =============================================================================

async def ensure_auth_state(
    manager: BrowserManager,
    login_func: Callable[[Page], Awaitable[None]],
    force: bool = False,
) -> Path:
    """
    Make sure a saved session state exists.

    If the state file is present (and `force` is False) it is reused;
    otherwise a fresh context performs the login and the state is saved.

    Args:
        manager: Started browser manager
        login_func: Async function performing the login on a page
        force: Log in again even if a state file exists

    Returns:
        Path to the session-state file
    """
    if manager.has_auth_state() and not force:
        logger.info(f"Reusing saved authentication state: {manager.auth_state_file}")
        return manager.auth_state_file

    logger.info("No saved auth state, performing login...")
    context = await manager.new_context(restore_auth=False)
    page = await context.new_page()
    await login_func(page)
    return await manager.save_auth_state(context)


__all__ = [
    "BrowserManager",
    "ensure_auth_state",
]
