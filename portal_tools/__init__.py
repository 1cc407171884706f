"""
================================================================================
Portal Tools
================================================================================

Infrastructure utilities shared by the portal test suite and its runner.

Modules:
    - common: Loguru logging setup
    - report_tools: Allure attachments and report generation

Example:
    from portal_tools.common import init_logger
    from portal_tools.report_tools import attach_scenario_result

    init_logger(level="DEBUG")
    attach_scenario_result(result)

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
