"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser tests against the Ecommerce Practice Portal.

Key Features:
- One browser session per test (no shared cookies, cart or login)
- Page Object fixtures built on a shared `BasePage`
- Screenshot capture on failure, attached to Allure
- Playwright trace on re-runs of failed tests, attached to Allure

================================================================================
"""

from typing import AsyncGenerator

import allure
import pytest
from loguru import logger

from portal_tests.ui_testing.framework.browser_manager import BrowserManager
from portal_tests.ui_testing.framework.config_loader import SuiteSettings, load_settings
from portal_tests.ui_testing.framework.driver import PlaywrightDriver
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import TestDataProvider
from portal_tests.ui_testing.pages import (
    CartPage,
    CategoryPage,
    CheckoutPage,
    HomePage,
    LoginPage,
    ProductPage,
    RegisterPage,
)


# ================================================================================
# Run Configuration
# ================================================================================

@pytest.fixture(scope="session")
def settings() -> SuiteSettings:
    """Frozen run settings (config/config.yaml + environment)."""
    settings = load_settings()
    logger.info(
        f"E2E target {settings.base_url} ({settings.browser}, "
        f"headless={settings.headless}, action timeout {settings.action_timeout_ms}ms)"
    )
    return settings


@pytest.fixture(scope="session")
def data() -> TestDataProvider:
    """Test data catalogs, loaded once per worker."""
    return TestDataProvider.load()


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="function")
async def browser_manager(settings: SuiteSettings) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager fixture.

    Each test gets its own browser so journeys never share state.
    """
    async with BrowserManager(settings) as manager:
        yield manager


@pytest.fixture(scope="function")
async def driver(request, browser_manager: BrowserManager) -> AsyncGenerator[PlaywrightDriver, None]:
    """Fresh browser context + page for the test; re-runs also keep a trace."""
    driver = await browser_manager.new_session()
    yield driver
    trace = await browser_manager.close_session(driver, request.node.name)
    if trace is not None:
        allure.attach.file(str(trace), name="Playwright Trace", extension="zip")


@pytest.fixture(scope="function")
async def base(request, driver: PlaywrightDriver, settings: SuiteSettings) -> AsyncGenerator[BasePage, None]:
    """
    Shared capability set for the test's page objects.

    Captures a failure screenshot before the session closes.
    """
    base = BasePage(driver, settings)
    yield base

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed and settings.screenshot_on_failure:
        await base.capture_failure(request.node.name)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def home_page(base: BasePage, data: TestDataProvider) -> HomePage:
    return HomePage(base, data)


@pytest.fixture
def login_page(base: BasePage, data: TestDataProvider) -> LoginPage:
    return LoginPage(base, data)


@pytest.fixture
def register_page(base: BasePage, data: TestDataProvider) -> RegisterPage:
    return RegisterPage(base, data)


@pytest.fixture
def category_page(base: BasePage, data: TestDataProvider) -> CategoryPage:
    return CategoryPage(base, data)


@pytest.fixture
def product_page(base: BasePage, data: TestDataProvider) -> ProductPage:
    return ProductPage(base, data)


@pytest.fixture
def cart_page(base: BasePage, data: TestDataProvider) -> CartPage:
    return CartPage(base, data)


@pytest.fixture
def checkout_page(base: BasePage, data: TestDataProvider) -> CheckoutPage:
    return CheckoutPage(base, data)


# ================================================================================
# Authentication Fixtures
# ================================================================================

@pytest.fixture
async def logged_in(login_page: LoginPage, data: TestDataProvider) -> LoginPage:
    """
    Session signed in as the valid demo user.
    """
    user = data.valid_user()
    await login_page.open()
    await login_page.login(user.email, user.password)
    await login_page.assert_logged_in()
    return login_page


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase's report on the item.

    The `base` fixture reads `rep_call` during teardown to decide whether a
    failure screenshot is needed.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
