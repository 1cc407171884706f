"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports with scenario outcomes and for
turning a results directory into an HTML report after a run.

Features:
- JSON / text attachment helpers
- Scenario result attachment (per-step status table)
- Run summary with retries folded in (flaky tests, summary.json)
- HTML report generation with history carry-over

================================================================================
"""

import json
import shutil
import subprocess
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_scenario_result(result: Any, name: Optional[str] = None):
    """
    Attach a ScenarioResult: a readable step table plus the JSON report.

    Artifacts (screenshots) recorded by the scenario are attached as files
    when they still exist on disk.

    Args:
        result: A `ScenarioResult` from the scenario runner
        name: Attachment name prefix (defaults to the scenario name)
    """
    label = name or result.name
    attach_text(result.summary(), name=f"{label} - steps")
    attach_json(result.to_report(), name=f"{label} - result")

    for artifact in result.artifacts:
        path = Path(artifact)
        if path.exists():
            allure.attach.file(
                str(path),
                name=path.name,
                attachment_type=allure.attachment_type.PNG
            )




# ================================================================================
# Run Summary
# ================================================================================

@dataclass
class RunSummary:
    """
    Outcome of one `run_tests.py` invocation, retries folded in.

    A test counts once, with the status of its last attempt. Tests that
    failed first and passed on a re-run are listed as flaky.
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    duration_ms: int = 0
    failures: List[str] = field(default_factory=list)
    flaky: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        executed = self.total - self.skipped
        return (self.passed / executed) * 100 if executed else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["pass_rate"] = round(self.pass_rate, 2)
        return data


class AllureReportProcessor:
    """
    Reads an allure-results directory and renders the HTML report.

    A test re-run by the runner leaves one result file per attempt, all
    sharing the test's `historyId`.
    """

    def __init__(self, results_dir: Path, report_dir: Optional[Path] = None):
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")

    def attempts_by_test(self) -> Dict[str, List[Dict[str, Any]]]:
        """Result dictionaries grouped per test, oldest attempt first."""
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for result_file in self.results_dir.glob("*-result.json"):
            try:
                result = json.loads(result_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable result {result_file.name}: {e}")
                continue
            key = result.get("historyId") or result.get("uuid") or result_file.name
            grouped.setdefault(key, []).append(result)

        for attempts in grouped.values():
            attempts.sort(key=lambda r: r.get("stop", 0))
        return grouped

    def summarize(self) -> RunSummary:
        summary = RunSummary()
        for attempts in self.attempts_by_test().values():
            last = attempts[-1]
            status = last.get("status", "broken")
            name = last.get("fullName") or last.get("name", "?")

            summary.total += 1
            summary.duration_ms += sum(r.get("stop", 0) - r.get("start", 0) for r in attempts)
            if status == "passed":
                summary.passed += 1
                if any(r.get("status") in ("failed", "broken") for r in attempts[:-1]):
                    summary.flaky.append(name)
            elif status == "skipped":
                summary.skipped += 1
            elif status == "failed":
                summary.failed += 1
                summary.failures.append(name)
            else:
                summary.broken += 1
                summary.failures.append(name)
        return summary

    def write_summary(self, summary: RunSummary) -> Path:
        """Write `summary.json` next to the results directory."""
        path = self.results_dir.parent / "summary.json"
        path.write_text(json.dumps(summary.to_dict(), indent=2), encoding="utf-8")
        return path

    def generate_report(self) -> bool:
        """Render the HTML report with the allure CLI, keeping trend history."""
        history = self.report_dir / "history"
        if history.exists():
            shutil.copytree(history, self.results_dir / "history", dirs_exist_ok=True)

        cmd = ["allure", "generate", str(self.results_dir), "-o", str(self.report_dir), "--clean"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.warning("allure CLI not found; skipping HTML report (results are kept)")
            return False

        if result.returncode != 0:
            logger.error(f"Report generation failed: {result.stderr.strip()}")
            return False
        logger.info(f"Report generated at {self.report_dir}")
        return True


def log_summary(summary: RunSummary) -> None:
    logger.info(
        f"Tests: {summary.total} | passed {summary.passed} | failed {summary.failed} | "
        f"broken {summary.broken} | skipped {summary.skipped} | "
        f"pass rate {summary.pass_rate:.1f}% | {summary.duration_ms / 1000:.1f}s"
    )
    for name in summary.failures:
        logger.error(f"  failed: {name}")
    for name in summary.flaky:
        logger.warning(f"  passed on retry: {name}")


def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False,
) -> RunSummary:
    """
    Summarize a run and render its HTML report when the allure CLI is installed.

    Returns:
        The run summary (also written to `summary.json`)
    """
    processor = AllureReportProcessor(Path(results_dir), Path(output_dir) if output_dir else None)
    summary = processor.summarize()
    processor.write_summary(summary)
    log_summary(summary)

    if processor.generate_report() and open_report:
        subprocess.run(["allure", "open", str(processor.report_dir)])
    return summary
