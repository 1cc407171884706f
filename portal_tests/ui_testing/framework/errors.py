"""
================================================================================
UI Framework Errors
================================================================================

Typed failures raised by the Base Page and Page Objects.

Every bounded wait converts an expired timeout into one of these errors so
the Scenario Runner can record *what* never happened and *what* was last
seen instead of hanging or failing with a bare engine timeout.

Hierarchy:
    PortalTestError
        ├── ElementNotInteractable   (locator never became clickable/fillable)
        ├── AssertionTimeout         (expected state never observed)
        ├── NavigationTimeout        (URL / load state never reached)
        ├── ActionNotConfirmed       (action performed, post-condition absent)
        └── ConfigurationError       (missing/invalid test data or locator map)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional


class PortalTestError(Exception):
    """
    Base class for all suite failures.

    Attributes:
        last_observed: Last value seen while polling (text, count, URL, ...)
        locator: Human-readable description of the element involved
        timeout_ms: Wait bound that expired, if any
    """

    def __init__(
        self,
        message: str,
        last_observed: Any = None,
        locator: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.last_observed = last_observed
        self.locator = locator
        self.timeout_ms = timeout_ms

    @property
    def kind(self) -> str:
        """Error kind as reported in scenario results."""
        return type(self).__name__

    def __str__(self) -> str:
        details = []
        if self.locator:
            details.append(f"locator={self.locator}")
        if self.timeout_ms is not None:
            details.append(f"timeout={self.timeout_ms}ms")
        if self.last_observed is not None:
            details.append(f"last_observed={self.last_observed!r}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class ElementNotInteractable(PortalTestError):
    """Locator never resolved to exactly one visible, enabled element."""
    pass


class AssertionTimeout(PortalTestError, AssertionError):
    """Expected element state was never observed within the timeout."""
    pass


class NavigationTimeout(PortalTestError):
    """Expected URL or load state was never reached."""
    pass


class ActionNotConfirmed(PortalTestError):
    """Action was dispatched but its observable post-condition never appeared."""
    pass


class ConfigurationError(PortalTestError):
    """Missing or invalid configuration, test data or locator mapping."""
    pass


__all__ = [
    "PortalTestError",
    "ElementNotInteractable",
    "AssertionTimeout",
    "NavigationTimeout",
    "ActionNotConfirmed",
    "ConfigurationError",
]
