"""Allure reporting helpers."""

from .allure_utils import (
    AllureReportProcessor,
    RunSummary,
    attach_json,
    attach_scenario_result,
    attach_text,
    generate_allure_report,
    log_summary,
)

__all__ = [
    "AllureReportProcessor",
    "RunSummary",
    "attach_json",
    "attach_scenario_result",
    "attach_text",
    "generate_allure_report",
    "log_summary",
]
