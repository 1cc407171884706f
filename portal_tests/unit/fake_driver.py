"""
In-memory `BrowserDriver` used by the unit tests.

Elements are registered per `LocatorSpec`; a spec nobody registered
matches nothing. Action handlers let a test script how the "page" reacts
to a click (badge changes, toast appears, URL moves on).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from portal_tests.ui_testing.framework.driver import ActionKind
from portal_tests.ui_testing.framework.locator import LocatorSpec

BASE_URL = "https://portal.test"

Handler = Callable[["FakeDriver", Any], None]


@dataclass
class FakeElement:
    text: str = ""
    value: str = ""
    visible: bool = True
    enabled: bool = True
    editable: bool = True
    checked: bool = False


class FakeDriver:
    """Scriptable stand-in for a browser session."""

    def __init__(self, url: str = "about:blank"):
        self._url = url
        self.elements: Dict[LocatorSpec, List[FakeElement]] = {}
        self.handlers: Dict[Tuple[LocatorSpec, ActionKind], Handler] = {}
        self.routes: Dict[str, Handler] = {}
        self.actions: List[Tuple[ActionKind, LocatorSpec, Any]] = []
        self.opened: List[str] = []
        self.navigation_ok = True
        self.load_state_ok = True
        self.screenshot_error: Optional[Exception] = None
        self.closed = False

    # Scripting helpers

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, value: str) -> None:
        self._url = value

    def add(self, spec: LocatorSpec, count: int = 1, **state: Any) -> FakeElement:
        """Register `count` identical elements for `spec`; returns the first."""
        self.elements[spec] = [FakeElement(**state) for _ in range(count)]
        return self.elements[spec][0]

    def add_many(self, spec: LocatorSpec, texts: List[str]) -> None:
        self.elements[spec] = [FakeElement(text=text) for text in texts]

    def element(self, spec: LocatorSpec) -> FakeElement:
        return self.elements[spec][0]

    def remove(self, spec: LocatorSpec) -> None:
        self.elements.pop(spec, None)

    def on(self, spec: LocatorSpec, action: ActionKind, handler: Handler) -> None:
        self.handlers[(spec, action)] = handler

    def on_open(self, path: str, handler: Handler) -> None:
        """Run `handler` when a URL ending with `path` is opened."""
        self.routes[path] = handler

    def performed(self, action: ActionKind) -> List[LocatorSpec]:
        return [spec for kind, spec, _ in self.actions if kind is action]

    # BrowserDriver

    async def open(self, url: str, wait_until: str = "load", timeout_ms: int = 30000) -> bool:
        self.opened.append(url)
        if not self.navigation_ok:
            return False
        self._url = url
        for path, handler in self.routes.items():
            if url.rstrip("/").endswith(path.rstrip("/")):
                handler(self, url)
        return True

    async def count(self, spec: LocatorSpec) -> int:
        return len(self.elements.get(spec, []))

    async def is_visible(self, spec: LocatorSpec) -> bool:
        found = self.elements.get(spec)
        return bool(found) and found[0].visible

    async def is_enabled(self, spec: LocatorSpec) -> bool:
        found = self.elements.get(spec)
        return bool(found) and found[0].enabled

    async def is_editable(self, spec: LocatorSpec) -> bool:
        found = self.elements.get(spec)
        return bool(found) and found[0].enabled and found[0].editable

    async def read_text(self, spec: LocatorSpec) -> Optional[str]:
        found = self.elements.get(spec)
        return found[0].text if found else None

    async def read_value(self, spec: LocatorSpec) -> Optional[str]:
        found = self.elements.get(spec)
        return found[0].value if found else None

    async def read_all_texts(self, spec: LocatorSpec) -> List[str]:
        return [element.text for element in self.elements.get(spec, [])]

    async def act(
        self,
        spec: LocatorSpec,
        action: ActionKind,
        payload: Any = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        self.actions.append((action, spec, payload))
        found = self.elements.get(spec)
        if found:
            if action is ActionKind.FILL:
                found[0].value = str(payload)
            elif action is ActionKind.CLEAR:
                found[0].value = ""
            elif action is ActionKind.CHECK:
                found[0].checked = True
        handler = self.handlers.get((spec, action))
        if handler is not None:
            handler(self, payload)

    async def wait_for_load_state(self, state: str, timeout_ms: int) -> bool:
        return self.load_state_ok

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        Path(path).write_bytes(b"\x89PNG\r\n\x1a\n")

    async def close(self) -> None:
        self.closed = True
