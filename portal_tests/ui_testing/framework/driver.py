"""
================================================================================
Browser Driver
================================================================================

The capability interface the Base Page is written against, plus its
Playwright implementation.

Any engine that can count, probe, read, act on and screenshot elements
described by a `LocatorSpec` can back the page objects. The unit tests use
an in-memory driver; real runs use `PlaywrightDriver`.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

from loguru import logger
from playwright.async_api import BrowserContext, Locator, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import ElementNotInteractable, NavigationTimeout
from .locator import LocatorSpec


class ActionKind(str, Enum):
    """Element actions a driver must support."""

    CLICK = "click"
    FILL = "fill"
    CLEAR = "clear"
    CHECK = "check"
    SELECT = "select"
    HOVER = "hover"
    PRESS = "press"


# Load states understood by `wait_for_load_state`
LOAD_STATES = ("load", "domcontentloaded", "networkidle")


class BrowserDriver(Protocol):
    """
    Engine capability interface bound to one browser session.

    Probe methods (`count`, `is_visible`, ...) never wait and never raise
    for a missing element; waiting is the Base Page's job. `open` returns
    False on a timeout and raises NavigationTimeout when the engine rejects
    the navigation outright.
    """

    @property
    def url(self) -> str: ...

    async def open(self, url: str, wait_until: str, timeout_ms: int) -> bool: ...

    async def count(self, spec: LocatorSpec) -> int: ...

    async def is_visible(self, spec: LocatorSpec) -> bool: ...

    async def is_enabled(self, spec: LocatorSpec) -> bool: ...

    async def is_editable(self, spec: LocatorSpec) -> bool: ...

    async def read_text(self, spec: LocatorSpec) -> Optional[str]: ...

    async def read_value(self, spec: LocatorSpec) -> Optional[str]: ...

    async def read_all_texts(self, spec: LocatorSpec) -> List[str]: ...

    async def act(
        self,
        spec: LocatorSpec,
        action: ActionKind,
        payload: Any = None,
        timeout_ms: Optional[int] = None,
    ) -> None: ...

    async def wait_for_load_state(self, state: str, timeout_ms: int) -> bool: ...

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None: ...

    async def close(self) -> None: ...


class PlaywrightDriver:
    """
    `BrowserDriver` backed by a Playwright async Page.

    The driver owns the page's browser context: closing the driver closes
    the context, which ends the session.
    """

    def __init__(self, page: Page, context: Optional[BrowserContext] = None):
        self.page = page
        self.context = context

    @property
    def url(self) -> str:
        return self.page.url or ""

    # =========================================================================
    # Locator Resolution
    # =========================================================================

    def resolve(self, spec: LocatorSpec, scope: Optional[Locator] = None) -> Locator:
        """Translate a LocatorSpec into a Playwright Locator."""
        root: Union[Page, Locator] = scope if scope is not None else self.page

        if spec.kind == "css":
            locator = root.locator(spec.value)
        elif spec.kind == "role":
            if spec.name is not None:
                locator = root.get_by_role(spec.value, name=spec.name, exact=spec.exact)
            else:
                locator = root.get_by_role(spec.value)
        elif spec.kind == "test_id":
            locator = root.get_by_test_id(spec.value)
        elif spec.kind == "text":
            locator = root.get_by_text(spec.value, exact=spec.exact)
        elif spec.kind == "label":
            locator = root.get_by_label(spec.value, exact=spec.exact)
        else:
            locator = root.get_by_placeholder(spec.value, exact=spec.exact)

        if spec.has_text:
            locator = locator.filter(has_text=spec.has_text)
        if spec.nth is not None:
            locator = locator.nth(spec.nth)
        if spec.child is not None:
            locator = self.resolve(spec.child, scope=locator)
        return locator

    # =========================================================================
    # Navigation
    # =========================================================================

    async def open(self, url: str, wait_until: str = "load", timeout_ms: int = 30000) -> bool:
        try:
            await self.page.goto(url, wait_until=wait_until, timeout=timeout_ms)
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"Navigation to {url} did not reach '{wait_until}' in {timeout_ms}ms")
            return False
        except PlaywrightError as e:
            reason = str(e).splitlines()[0]
            logger.error(f"Navigation to {url} failed: {reason}")
            raise NavigationTimeout(
                f"Navigation to {url} failed: {reason}",
                last_observed=self.url,
                timeout_ms=timeout_ms,
            ) from e

    async def wait_for_load_state(self, state: str, timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_load_state(state, timeout=timeout_ms)
            return True
        except PlaywrightError as e:
            logger.warning(f"Load state '{state}' not reached: {str(e).splitlines()[0]}")
            return False

    # =========================================================================
    # Probes
    # =========================================================================

    async def count(self, spec: LocatorSpec) -> int:
        return await self.resolve(spec).count()

    async def is_visible(self, spec: LocatorSpec) -> bool:
        locator = self.resolve(spec)
        if await locator.count() == 0:
            return False
        return await locator.first.is_visible()

    async def is_enabled(self, spec: LocatorSpec) -> bool:
        locator = self.resolve(spec)
        if await locator.count() == 0:
            return False
        return await locator.first.is_enabled()

    async def is_editable(self, spec: LocatorSpec) -> bool:
        locator = self.resolve(spec)
        if await locator.count() == 0:
            return False
        return await locator.first.is_editable()

    async def read_text(self, spec: LocatorSpec) -> Optional[str]:
        locator = self.resolve(spec)
        if await locator.count() == 0:
            return None
        return (await locator.first.inner_text()).strip()

    async def read_value(self, spec: LocatorSpec) -> Optional[str]:
        locator = self.resolve(spec)
        if await locator.count() == 0:
            return None
        return await locator.first.input_value()

    async def read_all_texts(self, spec: LocatorSpec) -> List[str]:
        texts = await self.resolve(spec).all_inner_texts()
        return [text.strip() for text in texts]

    # =========================================================================
    # Actions
    # =========================================================================

    async def act(
        self,
        spec: LocatorSpec,
        action: ActionKind,
        payload: Any = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        locator = self.resolve(spec)
        try:
            if action is ActionKind.CLICK:
                await locator.click(timeout=timeout_ms)
            elif action is ActionKind.FILL:
                await locator.fill(str(payload), timeout=timeout_ms)
            elif action is ActionKind.CLEAR:
                await locator.clear(timeout=timeout_ms)
            elif action is ActionKind.CHECK:
                await locator.check(timeout=timeout_ms)
            elif action is ActionKind.SELECT:
                await locator.select_option(label=str(payload), timeout=timeout_ms)
            elif action is ActionKind.HOVER:
                await locator.hover(timeout=timeout_ms)
            elif action is ActionKind.PRESS:
                await locator.press(str(payload), timeout=timeout_ms)
            else:
                raise ValueError(f"Unsupported action: {action}")
        except PlaywrightError as e:
            raise ElementNotInteractable(
                f"{action.value} failed: {str(e).splitlines()[0]}",
                locator=spec.describe(),
                timeout_ms=timeout_ms,
            ) from e

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None:
        await self.page.screenshot(path=str(path), full_page=full_page)

    async def close(self) -> None:
        if self.context is not None:
            await self.context.close()
        else:
            await self.page.close()


__all__ = [
    "ActionKind",
    "LOAD_STATES",
    "BrowserDriver",
    "PlaywrightDriver",
]
