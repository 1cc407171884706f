"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based page-object framework for the Ecommerce Practice Portal.

Components:
    - locator: Engine-neutral element descriptors and per-page locator maps
    - driver: Browser capability interface and its Playwright implementation
    - page_base: Shared capability set (click, fill, assert, wait, screenshot)
    - browser_manager: Browser and session lifecycle management
    - test_data: Test Data Provider and immutable records
    - scenario_runner: Ordered multi-step journeys with per-step results
    - config_loader: YAML + environment configuration
    - errors: Typed failures

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import ConfigLoader, SuiteSettings, load_settings
from .driver import ActionKind, BrowserDriver, PlaywrightDriver
from .errors import (
    ActionNotConfirmed,
    AssertionTimeout,
    ConfigurationError,
    ElementNotInteractable,
    NavigationTimeout,
    PortalTestError,
)
from .locator import LocatorSpec, PageLocators
from .page_base import BasePage, WaitResult
from .scenario_runner import ScenarioResult, ScenarioRunner, Step, StepResult, StepStatus
from .test_data import Address, PaymentMethod, Product, TestDataProvider, UserCredentials

__all__ = [
    "ActionKind",
    "ActionNotConfirmed",
    "Address",
    "AssertionTimeout",
    "BasePage",
    "BrowserDriver",
    "BrowserManager",
    "ConfigLoader",
    "ConfigurationError",
    "ElementNotInteractable",
    "LocatorSpec",
    "NavigationTimeout",
    "PageLocators",
    "PaymentMethod",
    "PlaywrightDriver",
    "PortalTestError",
    "Product",
    "ScenarioResult",
    "ScenarioRunner",
    "Step",
    "StepResult",
    "StepStatus",
    "SuiteSettings",
    "TestDataProvider",
    "UserCredentials",
    "WaitResult",
    "load_settings",
]
