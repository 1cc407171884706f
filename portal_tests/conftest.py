"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the suite's markers, tags tests by directory and keeps browser
tests out of the run unless they were explicitly enabled.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests against the in-memory driver"
    )
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Login and registration"
    )
    config.addinivalue_line(
        "markers", "cart: Cart and add-to-cart flows"
    )
    config.addinivalue_line(
        "markers", "checkout: Checkout and order confirmation"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by location and skip browser tests unless enabled.
    """
    skip_e2e = pytest.mark.skip(
        reason="browser tests are opt-in: pass --e2e or set E2E_ENABLED=1"
    )
    enabled = getattr(config, "e2e_enabled", False)

    for item in items:
        parts = item.path.parts

        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.e2e)
            if not enabled:
                item.add_marker(skip_e2e)

        if "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    mode = "unit + e2e" if getattr(config, "e2e_enabled", False) else "unit only (pass --e2e for browser tests)"
    return [
        "",
        "=" * 60,
        "Ecommerce Practice Portal - E2E Test Suite",
        f"Mode: {mode}",
        "=" * 60,
        "",
    ]
