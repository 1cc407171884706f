"""
================================================================================
Locator Descriptors
================================================================================

Engine-neutral element references.

A `LocatorSpec` says *how* to find an element (CSS selector, ARIA role +
accessible name, test id, visible text, label or placeholder) without
binding to a concrete automation library. Drivers translate specs into
their own locator objects.

`PageLocators` is the per-page map of semantic field name -> spec. Asking
for a name the page never declared is a configuration error, not a
runtime lookup miss.

Locator Priority (recommended):
    1. data-testid
    2. role + accessible name
    3. label / placeholder
    4. visible text
    5. CSS selectors

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Optional

from .errors import ConfigurationError


# Strategies every driver must understand
LOCATOR_KINDS = ("css", "role", "test_id", "text", "label", "placeholder")


@dataclass(frozen=True)
class LocatorSpec:
    """
    Immutable element descriptor.

    Attributes:
        kind: Resolution strategy, one of LOCATOR_KINDS
        value: Selector, role, test id, text, label or placeholder
        name: Accessible name (role strategy only)
        exact: Exact text/name match instead of substring
        has_text: Keep only matches containing this text
        child: Nested descriptor resolved inside this one
        nth: Pick the n-th match (0-based)
    """

    kind: str
    value: str
    name: Optional[str] = None
    exact: bool = False
    has_text: Optional[str] = None
    child: Optional["LocatorSpec"] = None
    nth: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in LOCATOR_KINDS:
            raise ConfigurationError(
                f"Unknown locator kind '{self.kind}', expected one of {LOCATOR_KINDS}"
            )
        if not self.value:
            raise ConfigurationError(f"Empty {self.kind} locator")

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def css(cls, selector: str, has_text: Optional[str] = None) -> "LocatorSpec":
        return cls("css", selector, has_text=has_text)

    @classmethod
    def role(cls, role: str, name: Optional[str] = None, exact: bool = False) -> "LocatorSpec":
        return cls("role", role, name=name, exact=exact)

    @classmethod
    def test_id(cls, test_id: str) -> "LocatorSpec":
        return cls("test_id", test_id)

    @classmethod
    def text(cls, text: str, exact: bool = False) -> "LocatorSpec":
        return cls("text", text, exact=exact)

    @classmethod
    def label(cls, label: str, exact: bool = False) -> "LocatorSpec":
        return cls("label", label, exact=exact)

    @classmethod
    def placeholder(cls, placeholder: str, exact: bool = False) -> "LocatorSpec":
        return cls("placeholder", placeholder, exact=exact)

    # =========================================================================
    # Refinement
    # =========================================================================

    def filter(self, has_text: str) -> "LocatorSpec":
        """Narrow matches to those containing `has_text`."""
        return replace(self, has_text=has_text)

    def inner(self, child: "LocatorSpec") -> "LocatorSpec":
        """Resolve `child` inside this element (appends to an existing chain)."""
        if self.child is not None:
            return replace(self, child=self.child.inner(child))
        return replace(self, child=child)

    def at(self, index: int) -> "LocatorSpec":
        """Pick the match at `index`."""
        return replace(self, nth=index)

    def describe(self) -> str:
        """Human-readable form used in logs, errors and report steps."""
        if self.kind == "role":
            text = f"role={self.value}"
            if self.name:
                text += f"[name={self.name!r}]"
        else:
            text = f"{self.kind}={self.value}"
        if self.has_text:
            text += f" >> has_text={self.has_text!r}"
        if self.nth is not None:
            text += f" >> nth={self.nth}"
        if self.child is not None:
            text += f" >> {self.child.describe()}"
        return text

    def __str__(self) -> str:
        return self.describe()


class PageLocators:
    """
    Semantic field name -> LocatorSpec mapping for one page.

    Usage:
        LOCATORS = PageLocators(
            "LoginPage",
            email=LocatorSpec.label("Email"),
            submit=LocatorSpec.role("button", "Login"),
        )
        spec = LOCATORS["email"]
    """

    def __init__(self, page_name: str, **locators: LocatorSpec):
        self.page_name = page_name
        self._locators: Dict[str, LocatorSpec] = dict(locators)

    def __getitem__(self, field_name: str) -> LocatorSpec:
        try:
            return self._locators[field_name]
        except KeyError:
            raise ConfigurationError(
                f"{self.page_name} has no locator for '{field_name}'. "
                f"Known fields: {sorted(self._locators)}"
            ) from None

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._locators

    def __iter__(self) -> Iterator[str]:
        return iter(self._locators)

    def __len__(self) -> int:
        return len(self._locators)


__all__ = [
    "LOCATOR_KINDS",
    "LocatorSpec",
    "PageLocators",
]
