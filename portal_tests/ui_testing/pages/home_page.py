"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Landing page of the portal: hero banner, category navigation, featured
products and the shared header.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import TestDataProvider
from portal_tests.ui_testing.pages.header import SiteHeader


class HomePage:
    """Home page object (async)."""

    URL_PATH = "/"
    PAGE_TITLE = "Home"

    LOCATORS = PageLocators(
        "HomePage",
        hero=LocatorSpec.css("main .hero"),
        category_nav=LocatorSpec.role("navigation", "Categories"),
        featured_names=LocatorSpec.css(".featured-products .product-card .product-name"),
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.header = SiteHeader(base)
        self.loc = self.LOCATORS

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        await self.base.navigate(self.URL_PATH)
        await self.verify_loaded()
        return self

    @allure.step("Verify home page loaded")
    async def verify_loaded(self) -> None:
        await self.base.assert_visible(self.loc["hero"])
        await self.base.assert_visible(self.loc["category_nav"])

    async def featured_product_names(self) -> List[str]:
        return await self.base.read_all_texts(self.loc["featured_names"])

    @allure.step("Open category '{name}' from navigation")
    async def open_category(self, name: str) -> None:
        link = self.loc["category_nav"].inner(LocatorSpec.role("link", name, exact=True))
        await self.base.click(link)
        await self.base.wait_for_navigation("/category/")

    async def search(self, term: str) -> None:
        await self.header.search(term)
        await self.base.wait_for_navigation("search")

    async def go_to_cart(self) -> None:
        await self.header.go_to_cart()

    @allure.step("Go to login")
    async def go_to_login(self) -> None:
        await self.base.click(self.header.loc["login_link"])
        await self.base.wait_for_navigation("/login")

    @allure.step("Go to register")
    async def go_to_register(self) -> None:
        await self.base.click(self.header.loc["register_link"])
        await self.base.wait_for_navigation("/register")
