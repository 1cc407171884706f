"""
================================================================================
Product Page Object (Async / Playwright)
================================================================================

Product detail page: title, price, quantity picker and add-to-cart.

Adding to cart is confirmed by an observable change: the header badge
count moves or the "added to cart" toast appears. A click that changes
nothing (e.g. the product is already at its maximum quantity) raises
`ActionNotConfirmed`.

================================================================================
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

import allure
from loguru import logger

from portal_tests.ui_testing.framework.errors import ActionNotConfirmed
from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import Product, TestDataProvider
from portal_tests.ui_testing.pages.header import SiteHeader


async def confirm_cart_change(
    base: BasePage,
    header: SiteHeader,
    before: int,
    product: Product,
    toast_text: str,
    timeout_ms: Optional[int] = None,
) -> int:
    """
    Wait for the cart badge to change or a matching success toast.

    Args:
        base: Session capability set
        header: Header component holding the badge
        before: Badge count read before the click
        product: Product being added (for error reporting)
        toast_text: Fragment of the confirmation toast

    Returns:
        Cart count observed when the change was confirmed

    Raises:
        ActionNotConfirmed: When nothing changes within the timeout
    """
    async def observe() -> Tuple[int, Optional[str]]:
        return await header.cart_count(), await header.toast_text("success")

    def changed(state: Tuple[int, Optional[str]]) -> bool:
        count, toast = state
        return count != before or (toast is not None and toast_text.lower() in toast.lower())

    timeout_ms = base.settings.action_timeout_ms if timeout_ms is None else timeout_ms
    result = await base.poll(observe, changed, timeout_ms)
    if not result.ok:
        count, _ = result.value
        error = await header.toast_text("error")
        raise ActionNotConfirmed(
            f"Adding '{product.name}' to cart had no visible effect",
            last_observed=f"cart count {count}" + (f", error toast '{error}'" if error else ""),
            timeout_ms=timeout_ms,
        )
    return result.value[0]


class ProductPage:
    """Product detail page object (async)."""

    PAGE_TITLE = "Product"

    LOCATORS = PageLocators(
        "ProductPage",
        title=LocatorSpec.css("main h1"),
        price=LocatorSpec.css("main .product-price"),
        quantity=LocatorSpec.label("Quantity"),
        add_to_cart=LocatorSpec.css("main").inner(LocatorSpec.role("button", "Add to Cart")),
        out_of_stock=LocatorSpec.css("main .out-of-stock"),
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.header = SiteHeader(base)
        self.loc = self.LOCATORS

    async def open(self, product: Product) -> "ProductPage":
        with allure.step(f"Open product '{product.name}'"):
            await self.base.navigate(product.path)
            await self.verify_loaded(product)
        return self

    async def verify_loaded(self, product: Product) -> None:
        with allure.step(f"Verify product page for '{product.name}'"):
            await self.base.assert_text(self.loc["title"], product.name)
            await self.base.assert_visible(self.loc["add_to_cart"])

    async def price(self) -> float:
        """Displayed price as a number."""
        text = await self.base.read_text(self.loc["price"])
        match = re.search(r"\d+(?:[.,]\d+)?", text.replace(",", ""))
        return float(match.group()) if match else 0.0

    @allure.step("Set quantity to {quantity}")
    async def set_quantity(self, quantity: int) -> None:
        await self.base.fill(self.loc["quantity"], str(quantity), field="quantity")

    async def add_to_cart(self, product: Product) -> int:
        """
        Add `product` to the cart from its detail page.

        Opens the detail page first when the browser is elsewhere.

        Returns:
            Cart count after the change

        Raises:
            ActionNotConfirmed: When neither the badge nor a success toast changes
        """
        with allure.step(f"Add '{product.name}' to cart"):
            if product.path not in self.base.url:
                await self.open(product)

            before = await self.header.cart_count()
            await self.base.click(self.loc["add_to_cart"])
            count = await confirm_cart_change(
                self.base, self.header, before, product, self.data.message("added_to_cart")
            )
        logger.info(f"Added {product.name}, cart count {before} -> {count}")
        return count
