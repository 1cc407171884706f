"""
================================================================================
Checkout Page Object (Async / Playwright)
================================================================================

Guest checkout: billing address, payment method, order placement and the
confirmation screen.

Composite operations are not atomic. If a fill fails halfway the form is
left partially filled; reload the page or abort the test.

================================================================================
"""

from __future__ import annotations

from typing import Dict, List, Optional

import allure
from loguru import logger

from portal_tests.ui_testing.framework.errors import ConfigurationError
from portal_tests.ui_testing.framework.locator import LocatorSpec, PageLocators
from portal_tests.ui_testing.framework.page_base import BasePage
from portal_tests.ui_testing.framework.test_data import Address, PaymentMethod, TestDataProvider


# Address field -> form label
BILLING_LABELS: Dict[str, str] = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "street": "Address",
    "city": "City",
    "state": "State",
    "postal_code": "ZIP Code",
    "country": "Country",
}

# Card field -> form label
CARD_LABELS: Dict[str, str] = {
    "card_number": "Card Number",
    "card_holder": "Name on Card",
    "expiry": "Expiry Date",
    "cvv": "CVV",
}


class CheckoutPage:
    """Checkout page object (async)."""

    URL_PATH = "/checkout"
    PAGE_TITLE = "Checkout"

    LOCATORS = PageLocators(
        "CheckoutPage",
        heading=LocatorSpec.role("heading", "Checkout"),
        place_order=LocatorSpec.role("button", "Place Order"),
        field_error=LocatorSpec.css("form .field-error"),
        confirmation=LocatorSpec.css(".order-confirmation"),
        order_number=LocatorSpec.css(".order-confirmation .order-number"),
        **{f"billing_{name}": LocatorSpec.label(label, exact=True) for name, label in BILLING_LABELS.items()},
        **{name: LocatorSpec.label(label, exact=True) for name, label in CARD_LABELS.items()},
    )

    def __init__(self, base: BasePage, data: TestDataProvider):
        self.base = base
        self.data = data
        self.loc = self.LOCATORS

    @allure.step("Open checkout")
    async def open(self) -> "CheckoutPage":
        await self.base.navigate(self.URL_PATH)
        await self.verify_loaded()
        return self

    @allure.step("Verify checkout page loaded")
    async def verify_loaded(self) -> None:
        await self.base.assert_visible(self.loc["heading"])
        await self.base.assert_visible(self.loc["place_order"])

    @allure.step("Fill billing address")
    async def fill_billing(self, address: Address) -> None:
        for name in BILLING_LABELS:
            value = getattr(address, name)
            if value:
                await self.base.fill(self.loc[f"billing_{name}"], value, field=name)

    async def select_payment(self, payment: PaymentMethod) -> None:
        with allure.step(f"Select payment '{payment.label}'"):
            await self.base.check(LocatorSpec.role("radio", payment.label))
            if payment.is_card:
                for name in CARD_LABELS:
                    await self.base.fill(self.loc[name], getattr(payment, name), field=name)

    @allure.step("Place order")
    async def place_order(self) -> None:
        await self.base.click(self.loc["place_order"])

    @allure.step("Complete guest checkout")
    async def complete_guest_checkout(self, billing: Address, payment: PaymentMethod) -> None:
        """
        Fill billing and payment details and place the order.

        Required fields are checked before the browser is touched.

        Raises:
            ConfigurationError: When a required billing or payment field is empty
        """
        missing = [f"billing.{name}" for name in billing.missing_fields()]
        missing.extend(f"payment.{name}" for name in payment.missing_fields())
        if missing:
            raise ConfigurationError(f"Checkout data is missing required fields: {', '.join(missing)}")

        await self.verify_loaded()
        await self.fill_billing(billing)
        await self.select_payment(payment)
        await self.place_order()
        logger.info(f"Order placed for {billing.email} with {payment.label}")

    @allure.step("Verify order confirmation")
    async def assert_order_confirmed(self, timeout_ms: Optional[int] = None) -> str:
        """
        Returns:
            The displayed order number
        """
        timeout_ms = self.base.settings.navigation_timeout_ms if timeout_ms is None else timeout_ms
        await self.base.assert_text(
            self.loc["confirmation"], self.data.message("order_confirmed"), timeout_ms=timeout_ms
        )
        return await self.base.read_text(self.loc["order_number"])

    async def field_errors(self) -> List[str]:
        """Visible inline validation messages."""
        return [text for text in await self.base.read_all_texts(self.loc["field_error"]) if text]
