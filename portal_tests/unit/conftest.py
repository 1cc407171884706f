"""
Fixtures for framework unit tests.

Every test gets a fresh in-memory driver and short timeouts so failure
paths finish in milliseconds.
"""

import pytest

from portal_tests.ui_testing.framework.config_loader import SuiteSettings
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import TestDataProvider
from portal_tests.unit.fake_driver import BASE_URL, FakeDriver


@pytest.fixture
def settings(tmp_path) -> SuiteSettings:
    return SuiteSettings(
        base_url=BASE_URL,
        action_timeout_ms=200,
        navigation_timeout_ms=300,
        poll_interval_ms=10,
        screenshot_dir=str(tmp_path / "screenshots"),
    )


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver(url=BASE_URL + "/")


@pytest.fixture
def base(driver: FakeDriver, settings: SuiteSettings) -> BasePage:
    return BasePage(driver, settings)


@pytest.fixture(scope="session")
def data() -> TestDataProvider:
    return TestDataProvider.load(seed=7)
