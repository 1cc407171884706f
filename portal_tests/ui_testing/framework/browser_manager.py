"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser instance per manager
    - One isolated context per session (separate cookies, storage, cart)
    - Launch and context options driven by SuiteSettings
    - Playwright trace per session on re-runs of failed tests

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    Playwright,
)

from .config_loader import SuiteSettings
from .driver import PlaywrightDriver


class BrowserManager:
    """
    Manages the browser and hands out isolated sessions.

    Each session is a fresh browser context with one page, wrapped in a
    `PlaywrightDriver`. Sessions are never shared between scenarios.

    Usage:
        async with BrowserManager(settings) as manager:
            driver = await manager.new_session()
            base = BasePage(driver, settings)
            ...
            await manager.close_session(driver)
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "ignore_https_errors": True,
    }

    def __init__(self, settings: Optional[SuiteSettings] = None):
        """
        Args:
            settings: Run settings (browser type, headless flag, viewport, timeouts)
        """
        self.settings = settings or SuiteSettings()

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._sessions: List[PlaywrightDriver] = []

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the configured browser."""
        self._playwright = await async_playwright().start()

        if self.settings.browser == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.settings.browser == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.settings.headless,
        }
        if self.settings.browser != "chromium":
            launch_options.pop("args")

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.settings.browser} "
            f"(headless={self.settings.headless})"
        )

    async def new_session(self, **context_options: Any) -> PlaywrightDriver:
        """
        Create an isolated session (new context + page).

        Args:
            **context_options: Extra Playwright context options

        Returns:
            Driver bound to the new page
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "base_url": self.settings.base_url,
            "viewport": {
                "width": self.settings.viewport_width,
                "height": self.settings.viewport_height,
            },
            **context_options,
        }
        context = await self._browser.new_context(**options)
        context.set_default_timeout(self.settings.action_timeout_ms)
        context.set_default_navigation_timeout(self.settings.navigation_timeout_ms)

        if self.settings.tracing:
            await context.tracing.start(screenshots=True, snapshots=True, sources=True)
            logger.debug(f"Tracing session (attempt {self.settings.attempt})")

        page = await context.new_page()
        driver = PlaywrightDriver(page, context)
        self._sessions.append(driver)
        logger.debug(f"Session opened ({len(self._sessions)} active)")
        return driver

    async def close_session(self, driver: PlaywrightDriver, name: str = "session") -> Optional[Path]:
        """
        Close one session; unknown or already closed sessions are ignored.

        Args:
            driver: Session to close
            name: Trace file name when the session is traced

        Returns:
            Path of the saved trace zip, or None when not tracing
        """
        if driver not in self._sessions:
            return None
        self._sessions.remove(driver)

        trace_path = None
        if self.settings.tracing and driver.context is not None:
            trace_path = await self._save_trace(driver, name)
        try:
            await driver.close()
        except Exception as e:
            logger.warning(f"Failed to close session cleanly: {e}")
        return trace_path

    async def _save_trace(self, driver: PlaywrightDriver, name: str) -> Optional[Path]:
        safe_name = re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "session"
        path = self.settings.trace_dir / f"{safe_name}_attempt{self.settings.attempt}.zip"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await driver.context.tracing.stop(path=str(path))
        except Exception as e:
            logger.warning(f"Failed to save trace {path.name}: {e}")
            return None
        logger.info(f"Trace saved: {path}")
        return path

    async def close(self) -> None:
        """Close all sessions and the browser."""
        for driver in list(self._sessions):
            await self.close_session(driver)

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)


__all__ = [
    "BrowserManager",
]
