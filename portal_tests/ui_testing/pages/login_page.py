"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Email/password sign-in form.

`login()` only submits the form. Whether the attempt should succeed is the
caller's decision: follow it with `assert_logged_in()` or
`assert_login_error()`.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from portal_tests.ui_testing.framework.errors import AssertionTimeout
from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import TestDataProvider
from portal_tests.ui_testing.pages.header import SiteHeader


class LoginPage:
    """Login page object (async)."""

    URL_PATH = "/login"
    PAGE_TITLE = "Login"

    LOCATORS = PageLocators(
        "LoginPage",
        heading=LocatorSpec.role("heading", "Login"),
        email=LocatorSpec.label("Email"),
        password=LocatorSpec.label("Password"),
        submit=LocatorSpec.css("form").inner(LocatorSpec.role("button", "Login")),
        error_message=LocatorSpec.css(".error-message, form [role='alert']"),
        register_link=LocatorSpec.css("form").inner(LocatorSpec.role("link", "Register")),
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.header = SiteHeader(base)
        self.loc = self.LOCATORS

    @allure.step("Open login page")
    async def open(self) -> "LoginPage":
        """Navigate to the login page."""
        await self.base.navigate(self.URL_PATH)
        await self.verify_loaded()
        return self

    @allure.step("Verify login form is displayed")
    async def verify_loaded(self) -> None:
        await self.base.assert_visible(self.loc["email"])
        await self.base.assert_visible(self.loc["password"])
        await self.base.assert_visible(self.loc["submit"])

    @allure.step("Login (email={email})")
    async def login(self, email: str, password: str) -> None:
        """
        Fill both fields and submit.

        Args:
            email: Account email
            password: Account password
        """
        await self.base.fill(self.loc["email"], email, field="email")
        await self.base.fill(self.loc["password"], password, field="password")
        await self.base.click(self.loc["submit"])
        logger.info(f"Login submitted for {email}")

    @allure.step("Verify user is logged in")
    async def assert_logged_in(self, timeout_ms: Optional[int] = None) -> None:
        """
        Raises:
            AssertionTimeout: When no authenticated header appears
        """
        result = await self.base.poll(self.header.is_logged_in, bool, timeout_ms)
        if not result.ok:
            raise AssertionTimeout(
                "User never reached an authenticated state",
                last_observed=self.base.url,
                timeout_ms=timeout_ms or self.base.settings.action_timeout_ms,
            )

    @allure.step("Verify login error is displayed")
    async def assert_login_error(self, expected: Optional[str] = None) -> str:
        """
        Assert the inline error is shown and the user stayed anonymous.

        Args:
            expected: Message fragment (defaults to the `login_failed` message)

        Returns:
            The displayed error text
        """
        expected = expected or self.data.message("login_failed")
        text = await self.base.assert_text(self.loc["error_message"], expected)
        assert not await self.header.is_logged_in(), "User must not be authenticated after a failed login"
        return text

    async def error_message(self) -> Optional[str]:
        if not await self.base.is_visible(self.loc["error_message"]):
            return None
        return await self.base.driver.read_text(self.loc["error_message"])
