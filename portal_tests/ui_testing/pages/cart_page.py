"""
================================================================================
Cart Page Object (Async / Playwright)
================================================================================

Shopping cart: line items, quantities, subtotal and the checkout entry point.

================================================================================
"""

from __future__ import annotations

import re
from typing import List

import allure

from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import Product, TestDataProvider
from portal_tests.ui_testing.pages.header import SiteHeader


class CartPage:
    """Cart page object (async)."""

    URL_PATH = "/cart"
    PAGE_TITLE = "Cart"

    LOCATORS = PageLocators(
        "CartPage",
        heading=LocatorSpec.role("heading", "Shopping Cart"),
        line_item=LocatorSpec.css(".cart-item"),
        item_name=LocatorSpec.css(".cart-item .item-name"),
        quantity_input=LocatorSpec.label("Quantity"),
        remove_button=LocatorSpec.role("button", "Remove"),
        subtotal=LocatorSpec.css(".cart-summary .subtotal"),
        empty_message=LocatorSpec.css(".cart-empty"),
        checkout_button=LocatorSpec.role("button", "Proceed to Checkout"),
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.header = SiteHeader(base)
        self.loc = self.LOCATORS

    def line_item(self, product: Product) -> LocatorSpec:
        return self.loc["line_item"].filter(product.name)

    @allure.step("Open cart")
    async def open(self) -> "CartPage":
        await self.base.navigate(self.URL_PATH)
        await self.base.assert_visible(self.loc["heading"])
        return self

    async def line_item_names(self) -> List[str]:
        return await self.base.read_all_texts(self.loc["item_name"])

    async def item_count(self) -> int:
        """Number of distinct line items."""
        return await self.base.count(self.loc["line_item"])

    async def quantity_of(self, product: Product) -> int:
        """Quantity of `product`, 0 when it is not in the cart."""
        if not await self.base.is_visible(self.line_item(product)):
            return 0
        value = await self.base.read_value(self.line_item(product).inner(self.loc["quantity_input"]))
        match = re.search(r"\d+", value or "")
        return int(match.group()) if match else 0

    async def subtotal(self) -> float:
        text = await self.base.read_text(self.loc["subtotal"])
        match = re.search(r"\d+(?:\.\d+)?", text.replace(",", ""))
        return float(match.group()) if match else 0.0

    async def update_quantity(self, product: Product, quantity: int) -> None:
        spec = self.line_item(product).inner(self.loc["quantity_input"])
        with allure.step(f"Set quantity of '{product.name}' to {quantity}"):
            await self.base.fill(spec, str(quantity), field="quantity")
            await self.base.press(spec, "Enter")

    async def remove(self, product: Product) -> None:
        with allure.step(f"Remove '{product.name}' from cart"):
            await self.base.click(self.line_item(product).inner(self.loc["remove_button"]))
            await self.base.assert_hidden(self.line_item(product))

    @allure.step("Verify cart is empty")
    async def assert_empty(self) -> None:
        await self.base.assert_text(self.loc["empty_message"], self.data.message("cart_empty"))

    @allure.step("Proceed to checkout")
    async def proceed_to_checkout(self) -> None:
        await self.base.click(self.loc["checkout_button"])
        await self.base.wait_for_navigation("/checkout")
