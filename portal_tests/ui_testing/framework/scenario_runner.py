"""
================================================================================
Scenario Runner
================================================================================

Sequences page-object operations into a user journey and records one
outcome per step.

Rules:
    - Steps run strictly in order on one browser session
    - The first failing step halts the journey; every later step is
      recorded as skipped
    - No retries here; re-running a whole scenario is the test runner's call
    - `run()` never raises, so one failed journey cannot affect another

Usage:
    runner = (
        ScenarioRunner("guest checkout", base)
        .step("open product", product_page.open, product)
        .step("add to cart", product_page.add_to_cart, product,
              expect=lambda count: count >= 1)
        .step("checkout", cart_page.proceed_to_checkout)
    )
    result = await runner.run()
    result.assert_passed()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import allure
from loguru import logger

from .errors import PortalTestError
from .page_base import BasePage


class StepStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class Step:
    """
    One journey step.

    Attributes:
        name: Label shown in logs and reports
        action: Page-object method (sync or async)
        args: Positional arguments for `action`
        kwargs: Keyword arguments for `action`
        expect: Optional check on the action's return value; may be async,
            may raise, and fails the step when it returns False
    """
    name: str
    action: Callable[..., Any]
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)
    expect: Optional[Callable[[Any], Any]] = None


@dataclass
class StepResult:
    name: str
    status: StepStatus
    duration_ms: int = 0
    error_kind: Optional[str] = None
    error_detail: Optional[str] = None
    last_observed: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "error_kind": self.error_kind,
            "error_detail": self.error_detail,
            "last_observed": None if self.last_observed is None else str(self.last_observed),
        }


@dataclass
class ScenarioResult:
    """Ordered step outcomes of one journey."""
    name: str
    steps: List[StepResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    duration_ms: int = 0
    artifacts: List[Path] = field(default_factory=list)

    @property
    def executed_count(self) -> int:
        return sum(1 for s in self.steps if s.status is not StepStatus.SKIPPED)

    @property
    def passed_count(self) -> int:
        return sum(1 for s in self.steps if s.status is StepStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return sum(1 for s in self.steps if s.status is StepStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for s in self.steps if s.status is StepStatus.SKIPPED)

    @property
    def passed(self) -> bool:
        return self.failed_count == 0

    @property
    def status(self) -> str:
        return "passed" if self.passed else "failed"

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if step.status is StepStatus.FAILED:
                return step
        return None

    def summary(self) -> str:
        text = (
            f"Scenario '{self.name}' {self.status}: "
            f"{self.executed_count} executed ({self.passed_count} passed, "
            f"{self.failed_count} failed), {self.skipped_count} skipped"
        )
        failed = self.failed_step
        if failed is not None:
            text += f"; step '{failed.name}' -> {failed.error_kind}: {failed.error_detail}"
        return text

    def to_report(self) -> Dict[str, Any]:
        """Structure handed to the reporter."""
        return {
            "name": self.name,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
            "executed": self.executed_count,
            "skipped": self.skipped_count,
            "steps": [step.to_dict() for step in self.steps],
            "artifacts": [str(path) for path in self.artifacts],
        }

    def assert_passed(self) -> None:
        """Hard assertion helper used by tests."""
        assert self.passed, self.summary()


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _slug(text: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower() or "step"


class ScenarioRunner:
    """Executes one journey on one session."""

    def __init__(
        self,
        name: str,
        base: Optional[BasePage] = None,
        steps: Optional[List[Step]] = None,
        screenshot_on_failure: Optional[bool] = None,
    ):
        """
        Args:
            name: Scenario name used in logs and reports
            base: Session capability set, used for failure screenshots
            steps: Initial step list
            screenshot_on_failure: Override of the settings flag
        """
        self.name = name
        self.base = base
        self.steps: List[Step] = list(steps or [])
        if screenshot_on_failure is None:
            screenshot_on_failure = base.settings.screenshot_on_failure if base else False
        self.screenshot_on_failure = screenshot_on_failure

    def step(
        self,
        name: str,
        action: Callable[..., Any],
        *args: Any,
        expect: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> "ScenarioRunner":
        """Append a step; returns self for chaining."""
        self.steps.append(Step(name=name, action=action, args=args, kwargs=kwargs, expect=expect))
        return self

    async def run(self) -> ScenarioResult:
        """
        Execute every step in order.

        Returns:
            ScenarioResult with exactly one entry per defined step
        """
        result = ScenarioResult(name=self.name)
        started = time.perf_counter()
        logger.info(f"▶ Scenario '{self.name}' ({len(self.steps)} steps)")

        halted = False
        for index, step in enumerate(self.steps, start=1):
            if halted:
                result.steps.append(StepResult(step.name, StepStatus.SKIPPED))
                logger.debug(f"  ⏭ [{index}] {step.name} skipped")
                continue

            step_result = await self._run_step(index, step)
            result.steps.append(step_result)

            if step_result.status is StepStatus.FAILED:
                halted = True
                await self._capture_failure(step, result)

        result.duration_ms = int((time.perf_counter() - started) * 1000)
        if result.passed:
            logger.info(f"✅ {result.summary()}")
        else:
            logger.error(f"❌ {result.summary()}")
        return result

    async def _run_step(self, index: int, step: Step) -> StepResult:
        started = time.perf_counter()
        try:
            with allure.step(f"[{index}] {step.name}"):
                value = await _maybe_await(step.action(*step.args, **step.kwargs))
                if step.expect is not None:
                    verdict = await _maybe_await(step.expect(value))
                    if verdict is False:
                        raise AssertionError(f"Expectation failed for value {value!r}")
        except Exception as e:
            duration = int((time.perf_counter() - started) * 1000)
            logger.error(f"  ✗ [{index}] {step.name}: {type(e).__name__}: {e}")
            return StepResult(
                name=step.name,
                status=StepStatus.FAILED,
                duration_ms=duration,
                error_kind=type(e).__name__,
                error_detail=str(e),
                last_observed=e.last_observed if isinstance(e, PortalTestError) else None,
            )

        duration = int((time.perf_counter() - started) * 1000)
        logger.debug(f"  ✓ [{index}] {step.name} ({duration}ms)")
        return StepResult(step.name, StepStatus.PASSED, duration_ms=duration)

    async def _capture_failure(self, step: Step, result: ScenarioResult) -> None:
        if not (self.screenshot_on_failure and self.base is not None):
            return
        path = await self.base.screenshot(f"{_slug(self.name)}_{_slug(step.name)}")
        if path is not None:
            result.artifacts.append(path)


__all__ = [
    "ScenarioResult",
    "ScenarioRunner",
    "Step",
    "StepResult",
    "StepStatus",
]
