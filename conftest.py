"""
Repository-level pytest configuration.

Why this exists:
  - Register the `--e2e` switch before collection starts
  - Configure Loguru once per session from the `logging` config section
  - Expose the repo root to tests and helpers

Browser tests talk to the public practice portal, so they are opt-in:
pass `--e2e` or set `E2E_ENABLED=1`. Unit tests always run.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from portal_tests.ui_testing.framework.config_loader import ConfigLoader
from portal_tools.common import init_logger_from_config


def pytest_addoption(parser):
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="Run browser tests against the live portal (same as E2E_ENABLED=1)",
    )


def e2e_enabled(config) -> bool:
    if config.getoption("--e2e"):
        return True
    return os.environ.get("E2E_ENABLED", "").lower() in ("1", "true", "yes", "on")


def pytest_configure(config):
    config.e2e_enabled = e2e_enabled(config)
    init_logger_from_config(ConfigLoader().get_section("logging"))


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
