"""
================================================================================
Base Page
================================================================================

Shared capability set for Page Object Model implementation.

Page objects do not inherit from this class; they hold a `BasePage` and
call its primitives. A `BasePage` wraps one browser session (any
`BrowserDriver`) and the run settings.

Provides:
    - Bounded polling with a typed result (`WaitResult`)
    - Click / fill / select / check with an exactly-one-element contract
    - Visibility and text assertions carrying the last observed value
    - Navigation waits on URL predicates and load states
    - Best-effort screenshots attached to Allure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

import allure
from loguru import logger

from .config_loader import SuiteSettings
from .driver import LOAD_STATES, ActionKind, BrowserDriver
from .errors import (
    AssertionTimeout,
    ConfigurationError,
    ElementNotInteractable,
    NavigationTimeout,
)
from .locator import LocatorSpec


UrlPredicate = Union[str, Callable[[str], bool]]

# Field names whose values never reach logs or report steps
SENSITIVE_MARKERS = ("password", "card_number", "cvv")


@dataclass
class WaitResult:
    """
    Outcome of a bounded wait.

    Attributes:
        ok: Condition held before the timeout
        value: Last value returned by the probe
        elapsed_ms: Time spent waiting
        attempts: Number of probe calls
    """

    ok: bool
    value: Any
    elapsed_ms: int
    attempts: int

    def __bool__(self) -> bool:
        return self.ok


def url_matcher(predicate: UrlPredicate) -> Callable[[str], bool]:
    """
    Normalize a URL predicate.

    Strings containing '*' are glob patterns, other strings are substrings.
    """
    if callable(predicate):
        return predicate
    if "*" in predicate:
        return lambda url: fnmatch(url, predicate)
    return lambda url: predicate in url


def _mask(field: str, value: str) -> str:
    if any(marker in field.lower() for marker in SENSITIVE_MARKERS):
        return "*" * len(value)
    return value


class BasePage:
    """
    Capability set composed by every page object.

    Usage:
        base = BasePage(driver, settings)
        await base.navigate("/login")
        await base.fill(LocatorSpec.label("Email"), "user@example.com")
        await base.click(LocatorSpec.role("button", "Login"))
        await base.wait_for_navigation("/account")
    """

    def __init__(self, driver: BrowserDriver, settings: Optional[SuiteSettings] = None):
        """
        Args:
            driver: Browser session the page objects act on (not owned)
            settings: Run settings; defaults are used when omitted
        """
        self.driver = driver
        self.settings = settings or SuiteSettings()
        self.artifacts: List[Path] = []

    @property
    def url(self) -> str:
        """Current document URL."""
        return self.driver.url

    def _timeout(self, timeout_ms: Optional[int]) -> int:
        return self.settings.action_timeout_ms if timeout_ms is None else timeout_ms

    # =========================================================================
    # Polling
    # =========================================================================

    async def poll(
        self,
        probe: Callable[[], Awaitable[Any]],
        condition: Callable[[Any], bool],
        timeout_ms: Optional[int] = None,
        interval_ms: Optional[int] = None,
    ) -> WaitResult:
        """
        Call `probe` until `condition(value)` holds or the timeout expires.

        The probe runs at least once, so a zero timeout is a single check.

        Returns:
            WaitResult with the last probed value
        """
        timeout_ms = self._timeout(timeout_ms)
        interval = (interval_ms or self.settings.poll_interval_ms) / 1000
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + timeout_ms / 1000
        attempts = 0

        while True:
            attempts += 1
            value = await probe()
            if condition(value):
                return WaitResult(True, value, int((loop.time() - started) * 1000), attempts)
            remaining = deadline - loop.time()
            if remaining <= 0:
                return WaitResult(False, value, int((loop.time() - started) * 1000), attempts)
            await asyncio.sleep(min(interval, remaining))

    async def _element_state(self, spec: LocatorSpec, editable: bool = False) -> Tuple[int, bool, bool]:
        count = await self.driver.count(spec)
        if count != 1:
            return count, False, False
        visible = await self.driver.is_visible(spec)
        if editable:
            ready = visible and await self.driver.is_editable(spec)
        else:
            ready = visible and await self.driver.is_enabled(spec)
        return count, visible, ready

    async def _wait_interactable(
        self,
        spec: LocatorSpec,
        timeout_ms: Optional[int],
        editable: bool = False,
    ) -> None:
        timeout_ms = self._timeout(timeout_ms)
        result = await self.poll(
            lambda: self._element_state(spec, editable),
            lambda state: state[0] == 1 and state[2],
            timeout_ms,
        )
        if result.ok:
            return

        count, visible, _ = result.value
        if count == 0:
            observed = "no matching element"
        elif count > 1:
            observed = f"{count} matching elements"
        elif not visible:
            observed = "element hidden"
        else:
            observed = "element not editable" if editable else "element disabled"
        raise ElementNotInteractable(
            f"Element never became {'fillable' if editable else 'clickable'}",
            last_observed=observed,
            locator=spec.describe(),
            timeout_ms=timeout_ms,
        )

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, path: str = "/", wait_until: str = "load") -> None:
        """
        Open `path` relative to the configured base URL.

        Raises:
            NavigationTimeout: When the page does not reach `wait_until`
        """
        url = self.settings.url_for(path)
        timeout_ms = self.settings.navigation_timeout_ms
        with allure.step(f"Navigate to {path}"):
            if not await self.driver.open(url, wait_until, timeout_ms):
                raise NavigationTimeout(
                    f"Navigation to {url} did not complete",
                    last_observed=self.driver.url,
                    timeout_ms=timeout_ms,
                )
            logger.debug(f"Navigated to: {url}")

    async def wait_for_navigation(
        self,
        predicate: UrlPredicate,
        timeout_ms: Optional[int] = None,
        load_state: Optional[str] = None,
    ) -> str:
        """
        Suspend until the current URL satisfies `predicate`.

        Args:
            predicate: Callable on the URL, glob pattern or substring
            timeout_ms: Wait bound (defaults to the navigation timeout)
            load_state: Optional load state awaited after the URL matches

        Returns:
            The matching URL

        Raises:
            NavigationTimeout: When the URL or load state is never reached
        """
        if load_state is not None and load_state not in LOAD_STATES:
            raise ConfigurationError(f"Unknown load state '{load_state}', expected one of {LOAD_STATES}")

        timeout_ms = self.settings.navigation_timeout_ms if timeout_ms is None else timeout_ms
        matches = url_matcher(predicate)
        label = predicate if isinstance(predicate, str) else getattr(predicate, "__name__", "predicate")

        with allure.step(f"Wait for URL: {label}"):
            result = await self.poll(self._current_url, matches, timeout_ms)
            if not result.ok:
                raise NavigationTimeout(
                    f"URL never matched {label}",
                    last_observed=result.value,
                    timeout_ms=timeout_ms,
                )

            if load_state is not None:
                remaining = max(timeout_ms - result.elapsed_ms, 0)
                if not await self.driver.wait_for_load_state(load_state, remaining):
                    raise NavigationTimeout(
                        f"Page never reached load state '{load_state}'",
                        last_observed=self.driver.url,
                        timeout_ms=timeout_ms,
                    )
            return result.value

    async def _current_url(self) -> str:
        return self.driver.url

    # =========================================================================
    # Element Interactions
    # =========================================================================

    async def click(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> None:
        """
        Click the single visible, enabled element matching `spec`.

        Raises:
            ElementNotInteractable: When the wait expires
        """
        with allure.step(f"Click: {spec.describe()}"):
            await self._wait_interactable(spec, timeout_ms)
            await self.driver.act(spec, ActionKind.CLICK, timeout_ms=self._timeout(timeout_ms))
            logger.debug(f"Clicked: {spec.describe()}")

    async def fill(
        self,
        spec: LocatorSpec,
        value: str,
        timeout_ms: Optional[int] = None,
        field: str = "",
    ) -> None:
        """
        Clear and fill the single visible, editable element matching `spec`.

        Args:
            spec: Input descriptor
            value: Text to enter
            timeout_ms: Wait bound
            field: Semantic field name, used to mask sensitive values in logs

        Raises:
            ElementNotInteractable: When the wait expires
        """
        value = str(value)
        shown = _mask(field or spec.describe(), value)
        with allure.step(f"Fill {field or spec.describe()}: {shown}"):
            await self._wait_interactable(spec, timeout_ms, editable=True)
            await self.driver.act(spec, ActionKind.CLEAR, timeout_ms=self._timeout(timeout_ms))
            await self.driver.act(spec, ActionKind.FILL, value, timeout_ms=self._timeout(timeout_ms))
            logger.debug(f"Filled {field or spec.describe()} with '{shown[:50]}'")

    async def select(self, spec: LocatorSpec, option: str, timeout_ms: Optional[int] = None) -> None:
        """Select a dropdown option by its visible label."""
        with allure.step(f"Select '{option}' in {spec.describe()}"):
            await self._wait_interactable(spec, timeout_ms)
            await self.driver.act(spec, ActionKind.SELECT, option, timeout_ms=self._timeout(timeout_ms))

    async def check(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> None:
        """Tick a checkbox or radio button."""
        with allure.step(f"Check: {spec.describe()}"):
            await self._wait_interactable(spec, timeout_ms)
            await self.driver.act(spec, ActionKind.CHECK, timeout_ms=self._timeout(timeout_ms))

    async def press(self, spec: LocatorSpec, key: str, timeout_ms: Optional[int] = None) -> None:
        """Press a keyboard key with the element focused."""
        with allure.step(f"Press {key} in {spec.describe()}"):
            await self._wait_interactable(spec, timeout_ms)
            await self.driver.act(spec, ActionKind.PRESS, key, timeout_ms=self._timeout(timeout_ms))

    # =========================================================================
    # Reads
    # =========================================================================

    async def count(self, spec: LocatorSpec) -> int:
        return await self.driver.count(spec)

    async def is_visible(self, spec: LocatorSpec, timeout_ms: int = 0) -> bool:
        """Non-raising visibility probe (single check by default)."""
        result = await self.poll(lambda: self.driver.is_visible(spec), bool, timeout_ms)
        return result.ok

    async def read_text(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> str:
        """Wait for `spec` to be visible and return its text."""
        await self.assert_visible(spec, timeout_ms)
        return await self.driver.read_text(spec) or ""

    async def read_value(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> str:
        """Wait for `spec` to be visible and return its input value."""
        await self.assert_visible(spec, timeout_ms)
        return await self.driver.read_value(spec) or ""

    async def read_all_texts(self, spec: LocatorSpec) -> List[str]:
        """Texts of every element matching `spec` (no waiting)."""
        return await self.driver.read_all_texts(spec)

    # =========================================================================
    # Assertions
    # =========================================================================

    async def assert_visible(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> None:
        """
        Raises:
            AssertionTimeout: When the element never becomes visible
        """
        timeout_ms = self._timeout(timeout_ms)
        with allure.step(f"Assert visible: {spec.describe()}"):
            result = await self.poll(lambda: self.driver.is_visible(spec), bool, timeout_ms)
            if not result.ok:
                raise AssertionTimeout(
                    "Element never became visible",
                    last_observed=f"{await self.driver.count(spec)} matching element(s), none visible",
                    locator=spec.describe(),
                    timeout_ms=timeout_ms,
                )

    async def assert_hidden(self, spec: LocatorSpec, timeout_ms: Optional[int] = None) -> None:
        """
        Raises:
            AssertionTimeout: When the element stays visible
        """
        timeout_ms = self._timeout(timeout_ms)
        with allure.step(f"Assert hidden: {spec.describe()}"):
            result = await self.poll(lambda: self.driver.is_visible(spec), lambda visible: not visible, timeout_ms)
            if not result.ok:
                raise AssertionTimeout(
                    "Element stayed visible",
                    last_observed=await self.driver.read_text(spec),
                    locator=spec.describe(),
                    timeout_ms=timeout_ms,
                )

    async def assert_text(
        self,
        spec: LocatorSpec,
        expected: str,
        timeout_ms: Optional[int] = None,
        exact: bool = False,
    ) -> str:
        """
        Poll until the element text equals (exact) or contains `expected`.

        Returns:
            The matching text

        Raises:
            AssertionTimeout: Carrying the last observed text
        """
        timeout_ms = self._timeout(timeout_ms)

        def matches(text: Optional[str]) -> bool:
            if text is None:
                return False
            return text == expected if exact else expected in text

        with allure.step(f"Assert text of {spec.describe()}: '{expected}'"):
            result = await self.poll(lambda: self.driver.read_text(spec), matches, timeout_ms)
            if not result.ok:
                raise AssertionTimeout(
                    f"Expected text {'==' if exact else 'containing'} '{expected}'",
                    last_observed=result.value,
                    locator=spec.describe(),
                    timeout_ms=timeout_ms,
                )
            return result.value

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Optional[Path]:
        """
        Capture a screenshot; never raises.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to the saved screenshot, or None when capture failed
        """
        try:
            screenshot_dir = Path(self.settings.screenshot_dir)
            screenshot_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            filepath = screenshot_dir / f"{name}_{timestamp}.png"

            await self.driver.screenshot(filepath, full_page=full_page)

            if attach_to_allure:
                allure.attach.file(
                    str(filepath),
                    name=name,
                    attachment_type=allure.attachment_type.PNG,
                )
        except Exception as e:
            logger.warning(f"Screenshot '{name}' failed: {e}")
            return None

        self.artifacts.append(filepath)
        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> Optional[Path]:
        """Capture a failure screenshot plus the current URL; never raises."""
        path = await self.screenshot(f"failure_{test_name}", full_page=True)
        try:
            allure.attach(
                self.driver.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )
        except Exception as e:
            logger.warning(f"Could not attach current URL: {e}")
        return path


__all__ = [
    "BasePage",
    "WaitResult",
    "url_matcher",
]
