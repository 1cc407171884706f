"""
================================================================================
Category Page Object (Async / Playwright)
================================================================================

Product listing for one category with sorting and quick add-to-cart.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure
from loguru import logger

from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import Product, TestDataProvider
from portal_tests.ui_testing.pages.header import SiteHeader
from portal_tests.ui_testing.pages.product_page import confirm_cart_change


def category_path(category: str) -> str:
    return f"/category/{category.lower().replace(' ', '-')}"


class CategoryPage:
    """Category listing page object (async)."""

    PAGE_TITLE = "Category"

    LOCATORS = PageLocators(
        "CategoryPage",
        heading=LocatorSpec.css("main h1"),
        product_card=LocatorSpec.css(".product-card"),
        product_name=LocatorSpec.css(".product-card .product-name"),
        sort_select=LocatorSpec.label("Sort by"),
        add_button=LocatorSpec.role("button", "Add to Cart"),
        empty_state=LocatorSpec.css(".no-products"),
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.header = SiteHeader(base)
        self.loc = self.LOCATORS

    def card(self, product: Product) -> LocatorSpec:
        """Listing card of `product`."""
        return self.loc["product_card"].filter(product.name)

    @allure.step("Open category '{category}'")
    async def open(self, category: str) -> "CategoryPage":
        await self.base.navigate(category_path(category))
        await self.base.assert_text(self.loc["heading"], category)
        return self

    async def product_names(self) -> List[str]:
        return await self.base.read_all_texts(self.loc["product_name"])

    async def assert_product_listed(self, product: Product) -> None:
        with allure.step(f"Verify '{product.name}' is listed"):
            await self.base.assert_visible(self.card(product))

    @allure.step("Sort by '{option}'")
    async def sort_by(self, option: str) -> None:
        await self.base.select(self.loc["sort_select"], option)

    async def open_product(self, product: Product) -> None:
        with allure.step(f"Open product '{product.name}' from listing"):
            await self.base.click(self.card(product).inner(LocatorSpec.role("link", product.name)))
            await self.base.wait_for_navigation(product.path)

    async def add_to_cart(self, product: Product) -> int:
        """
        Click the card's add button and confirm the cart changed.

        Returns:
            Cart count after the change

        Raises:
            ActionNotConfirmed: When neither the badge nor a success toast changes
        """
        with allure.step(f"Add '{product.name}' to cart from listing"):
            before = await self.header.cart_count()
            await self.base.click(self.card(product).inner(self.loc["add_button"]))
            count = await confirm_cart_change(
                self.base, self.header, before, product, self.data.message("added_to_cart")
            )
        logger.info(f"Added {product.name} from listing, cart count {before} -> {count}")
        return count
