#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Main entry point for executing the portal test suites.
# Worker count, retry count, browser and headless mode default to the run
# settings (config/config.yaml + environment) and can be overridden here.
#
# Features:
#   - Run unit tests, browser e2e tests, or both
#   - Parallel workers (pytest-xdist)
#   - Re-run failed tests up to `retry_count` times (traced when ui.trace_on_retry)
#   - JUnit XML + Allure results, Allure HTML report
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite e2e --tags P0 smoke
#   python run_tests.py --suite all --workers 4 --retries 1 --headed
#
# ================================================================================

import argparse
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from portal_tests.ui_testing.framework.config_loader import SuiteSettings, load_settings
from portal_tests.ui_testing.framework.errors import ConfigurationError
from portal_tools.common import init_logger
from portal_tools.report_tools import generate_allure_report


SUITE_PATHS = {
    "unit": ["portal_tests/unit"],
    "e2e": ["portal_tests/ui_testing/tests"],
    "all": ["portal_tests/"],
}

# pytest exit code for "some tests failed"
TESTS_FAILED = 1


class TestRunner:
    """
    Main test runner class for orchestrating test execution.

    This class handles:
    - Test suite selection and execution
    - Retry of failed tests
    - Report generation
    """

    __test__ = False

    def __init__(
        self,
        settings: SuiteSettings,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        allure_report: bool = True,
        verbose: bool = False,
    ):
        """
        Initialize test runner.

        Args:
            settings: Resolved run settings (workers, retries, browser, ...)
            suite: Test suite to run - "unit", "e2e", "all"
            tags: List of pytest markers to filter tests
            allure_report: Generate Allure report
            verbose: Enable verbose output
        """
        self.settings = settings
        self.suite = suite
        self.tags = tags or []
        self.allure_report = allure_report
        self.verbose = verbose

        # Paths
        self.root_dir = Path(__file__).parent
        self.results_dir = self.root_dir / settings.results_dir
        self.allure_results = self.results_dir / "allure-results"
        self.allure_report_dir = self.results_dir / "allure-report"

    def run(self) -> int:
        """
        Execute the test run, re-running failures up to `retry_count` times.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        logger.info(f"Workers: {self.settings.worker_count}")
        logger.info(f"Retries: {self.settings.retry_count}")
        if self.suite in ["e2e", "all"]:
            logger.info(f"Target: {self.settings.base_url}")
            logger.info(f"Browser: {self.settings.browser}")
            logger.info(f"Headless: {self.settings.headless}")
        logger.info("=" * 60)

        self._prepare_environment()

        exit_code = self._execute(attempt=0)
        for attempt in range(1, self.settings.retry_count + 1):
            if exit_code != TESTS_FAILED:
                break
            logger.warning(f"Re-running failed tests (retry {attempt}/{self.settings.retry_count})")
            exit_code = self._execute(attempt)

        if self.allure_report:
            generate_allure_report(str(self.allure_results), str(self.allure_report_dir))

        self._print_summary(exit_code)
        return exit_code

    def _prepare_environment(self) -> None:
        """Create result directories and drop results of previous runs."""
        if self.allure_results.exists():
            shutil.rmtree(self.allure_results)
        self.allure_results.mkdir(parents=True, exist_ok=True)
        traces = self.results_dir / "traces"
        if traces.exists():
            shutil.rmtree(traces)
        logger.debug("Environment prepared")

    def _execute(self, attempt: int) -> int:
        cmd = self._build_pytest_command(attempt)
        logger.info(f"Executing: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, cwd=str(self.root_dir), env=self._child_env(attempt))
        except OSError as e:
            logger.error(f"Test execution failed: {e}")
            return 1
        return result.returncode

    def _child_env(self, attempt: int = 0) -> Dict[str, str]:
        """Environment that makes the pytest workers resolve the same settings."""
        env = dict(os.environ)
        env.update({
            "UI_BASE_URL": self.settings.base_url,
            "UI_BROWSER": self.settings.browser,
            "UI_HEADLESS": str(self.settings.headless).lower(),
            "RUN_WORKER_COUNT": str(self.settings.worker_count),
            "RUN_RETRY_COUNT": str(self.settings.retry_count),
            "RUN_ATTEMPT": str(attempt),
        })
        if self.suite in ["e2e", "all"]:
            env["E2E_ENABLED"] = "1"
        return env

    def _build_pytest_command(self, attempt: int = 0) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest"]
        cmd.extend(SUITE_PATHS[self.suite])

        # Add tags filter
        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])

        # Add parallel execution
        if self.settings.worker_count > 1:
            cmd.extend(["-n", str(self.settings.worker_count)])

        # Retries only re-run what failed last time
        if attempt > 0:
            cmd.extend(["--last-failed", "--last-failed-no-failures", "none"])

        junit_name = "results.xml" if attempt == 0 else f"results-retry{attempt}.xml"
        cmd.append(f"--junitxml={self.results_dir / junit_name}")

        # Add Allure
        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        # Add verbosity
        cmd.append("-v" if self.verbose else "-q")

        return cmd

    def _print_summary(self, exit_code: int) -> None:
        """Print test execution summary."""
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("✅ TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"❌ TEST EXECUTION FAILED (exit code: {exit_code})")

        logger.info(f"JUnit XML: {self.results_dir / 'results.xml'}")
        if self.allure_report:
            logger.info(f"Summary: {self.results_dir / 'summary.json'}")
            logger.info(f"📊 Report available at: {self.allure_report_dir}")

        logger.info("=" * 60)


def apply_overrides(args: argparse.Namespace) -> None:
    """Expose CLI overrides as environment overrides for the settings loader."""
    overrides = {
        "UI_BASE_URL": args.base_url,
        "UI_BROWSER": args.browser,
        "RUN_WORKER_COUNT": None if args.workers is None else str(args.workers),
        "RUN_RETRY_COUNT": None if args.retries is None else str(args.retries),
        "UI_HEADLESS": "false" if args.headed else None,
    }
    for name, value in overrides.items():
        if value is not None:
            os.environ[name] = value


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Ecommerce Practice Portal Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run framework unit tests only
  python run_tests.py --suite unit

  # Run P0 smoke browser tests
  python run_tests.py --suite e2e --tags P0 smoke

  # Run everything headed in firefox with one retry
  python run_tests.py --suite all --headed --browser firefox --retries 1
        """
    )

    parser.add_argument(
        "--suite",
        choices=list(SUITE_PATHS),
        default="all",
        help="Test suite to run (default: all)"
    )

    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke regression)"
    )

    parser.add_argument(
        "--workers", "-n",
        type=int,
        default=None,
        help="Number of parallel workers (default: run.worker_count)"
    )

    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Times to re-run failed tests (default: run.retry_count)"
    )

    parser.add_argument(
        "--browser",
        choices=["chromium", "firefox", "webkit"],
        default=None,
        help="Browser for e2e tests (default: ui.browser)"
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help="Portal URL (default: ui.base_url)"
    )

    parser.add_argument(
        "--headed",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )

    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Disable Allure results and report generation"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    init_logger(level="DEBUG" if args.verbose else "INFO")
    apply_overrides(args)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    runner = TestRunner(
        settings,
        suite=args.suite,
        tags=args.tags,
        allure_report=not args.no_allure,
        verbose=args.verbose,
    )

    exit_code = runner.run()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
