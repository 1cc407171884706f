"""
================================================================================
Register Page Object (Async / Playwright)
================================================================================

Account creation form with client-side field validation.

================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

import allure

from portal_tests.ui_testing.framework.errors import ConfigurationError
from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import TestDataProvider, UserCredentials


class RegisterPage:
    """Registration page object (async)."""

    URL_PATH = "/register"
    PAGE_TITLE = "Register"

    LOCATORS = PageLocators(
        "RegisterPage",
        first_name=LocatorSpec.label("First Name"),
        last_name=LocatorSpec.label("Last Name"),
        email=LocatorSpec.label("Email"),
        password=LocatorSpec.label("Password", exact=True),
        confirm_password=LocatorSpec.label("Confirm Password"),
        submit=LocatorSpec.css("form").inner(LocatorSpec.role("button", "Register")),
        success_message=LocatorSpec.css(".success-message, [role='status']"),
        form_error=LocatorSpec.css("form .error-message"),
    )

    # Inline validation message shown under each input
    FIELD_ERRORS: Dict[str, LocatorSpec] = {
        name: LocatorSpec.css(f"[data-error-for='{name}']")
        for name in ("first_name", "last_name", "email", "password", "confirm_password")
    }

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.loc = self.LOCATORS

    @allure.step("Open register page")
    async def open(self) -> "RegisterPage":
        await self.base.navigate(self.URL_PATH)
        await self.verify_loaded()
        return self

    @allure.step("Verify registration form is displayed")
    async def verify_loaded(self) -> None:
        await self.base.assert_visible(self.loc["email"])
        await self.base.assert_visible(self.loc["submit"])

    async def register(self, user: UserCredentials, confirm_password: Optional[str] = None) -> None:
        """
        Fill the form and submit. Outcome is asserted by the caller.

        Args:
            user: Identity to register
            confirm_password: Confirmation value (defaults to user.password)
        """
        confirm = user.password if confirm_password is None else confirm_password
        with allure.step(f"Register (email={user.email})"):
            await self.base.fill(self.loc["first_name"], user.first_name, field="first_name")
            await self.base.fill(self.loc["last_name"], user.last_name, field="last_name")
            await self.base.fill(self.loc["email"], user.email, field="email")
            await self.base.fill(self.loc["password"], user.password, field="password")
            await self.base.fill(self.loc["confirm_password"], confirm, field="confirm_password")
            await self.base.click(self.loc["submit"])

    @allure.step("Verify registration succeeded")
    async def assert_registered(self) -> str:
        return await self.base.assert_text(
            self.loc["success_message"],
            self.data.message("registration_success"),
        )

    @allure.step("Verify field error for '{field}'")
    async def assert_field_error(self, field: str, expected: Optional[str] = None) -> str:
        """
        Assert the inline validation message of `field`.

        Args:
            field: Form field name (first_name, email, password, ...)
            expected: Message fragment (defaults to the `required_field` message)
        """
        spec = self.FIELD_ERRORS.get(field)
        if spec is None:
            raise ConfigurationError(f"RegisterPage has no validation message for field '{field}'")
        return await self.base.assert_text(spec, expected or self.data.message("required_field"))
