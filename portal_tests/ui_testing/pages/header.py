"""
================================================================================
Site Header Component
================================================================================

Navigation bar shared by every portal page: cart badge, search box,
account links and logout. Page objects compose it instead of redefining
these locators.

================================================================================
"""

from __future__ import annotations

import re
from typing import Optional

import allure

from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage


class SiteHeader:
    """Header component (async)."""

    LOCATORS = PageLocators(
        "SiteHeader",
        cart_link=LocatorSpec.css("header").inner(LocatorSpec.role("link", "Cart")),
        cart_badge=LocatorSpec.css("header .cart-count"),
        search_input=LocatorSpec.css("header").inner(LocatorSpec.placeholder("Search")),
        login_link=LocatorSpec.css("header").inner(LocatorSpec.role("link", "Login")),
        register_link=LocatorSpec.css("header").inner(LocatorSpec.role("link", "Register")),
        account_menu=LocatorSpec.css("header").inner(LocatorSpec.role("button", "Account")),
        logout_button=LocatorSpec.css("header").inner(LocatorSpec.role("button", "Logout")),
        toast_success=LocatorSpec.css(".toast.success, [role='status']"),
        toast_error=LocatorSpec.css(".toast.error, [role='alert']"),
    )

    def __init__(self, base: BasePage):
        self.base = base
        self.loc = self.LOCATORS

    async def cart_count(self) -> int:
        """Number on the cart badge; a missing or empty badge means 0."""
        if not await self.base.is_visible(self.loc["cart_badge"]):
            return 0
        text = await self.base.driver.read_text(self.loc["cart_badge"]) or ""
        match = re.search(r"\d+", text)
        return int(match.group()) if match else 0

    async def toast_text(self, kind: str = "success") -> Optional[str]:
        """Text of the visible toast of `kind`, or None."""
        spec = self.loc[f"toast_{kind}"]
        if not await self.base.is_visible(spec):
            return None
        return await self.base.driver.read_text(spec)

    async def is_logged_in(self) -> bool:
        if await self.base.is_visible(self.loc["logout_button"]):
            return True
        return await self.base.is_visible(self.loc["account_menu"])

    @allure.step("Search for '{term}'")
    async def search(self, term: str) -> None:
        await self.base.fill(self.loc["search_input"], term, field="search")
        await self.base.press(self.loc["search_input"], "Enter")

    @allure.step("Open cart from header")
    async def go_to_cart(self) -> None:
        await self.base.click(self.loc["cart_link"])
        await self.base.wait_for_navigation("/cart")

    @allure.step("Logout")
    async def logout(self) -> None:
        if not await self.base.is_visible(self.loc["logout_button"]):
            await self.base.click(self.loc["account_menu"])
        await self.base.click(self.loc["logout_button"])
        await self.base.assert_visible(self.loc["login_link"])
