"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the Ecommerce Practice Portal.

Each page class composes a `BasePage` and encapsulates:
    - Element locators (`LOCATORS`)
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .cart_page import CartPage
from .category_page import CategoryPage
from .checkout_page import CheckoutPage
from .header import SiteHeader
from .home_page import HomePage
from .login_page import LoginPage
from .product_page import ProductPage
from .register_page import RegisterPage

__all__ = [
    "CartPage",
    "CategoryPage",
    "CheckoutPage",
    "HomePage",
    "LoginPage",
    "ProductPage",
    "RegisterPage",
    "SiteHeader",
]
