"""Minimal saga runner for multi-step record store writes.

The record store has no transactions, so each step that writes pairs its
action with a compensating action. When a step fails, the compensations of
the completed steps run in reverse order and the failure is reported as
WorkflowFailedException.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from app.domain.exceptions import WorkflowFailedException
from app.shared.telemetry.tracing import add_span_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SagaStep:
    """One named step; compensate receives the action's result."""

    name: str
    action: Callable[[], Awaitable[Any]]
    compensate: Callable[[Any], Awaitable[Any]] | None = None


class Saga:
    """Runs steps in order and undoes completed ones on failure.

    Results of completed steps are available by step name in results, so
    later steps can use what earlier ones created.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.steps: list[SagaStep] = []
        self.results: dict[str, Any] = {}

    def step(
        self,
        name: str,
        action: Callable[[], Awaitable[Any]],
        compensate: Callable[[Any], Awaitable[Any]] | None = None,
    ) -> Saga:
        self.steps.append(SagaStep(name, action, compensate))
        return self

    async def run(self) -> dict[str, Any]:
        """Execute all steps.

        Returns:
            Step name -> action result.

        Raises:
            WorkflowFailedException: A step failed after at least one step completed.
            Exception: The original error when the first step fails (nothing to undo).
        """
        completed: list[SagaStep] = []
        for step in self.steps:
            try:
                self.results[step.name] = await step.action()
            except Exception as e:
                if not completed:
                    raise
                logger.warning(
                    "Workflow %s failed at step %s (%s); compensating %s step(s)",
                    self.name, step.name, e, len(completed),
                )
                add_span_event(
                    "workflow.compensating",
                    {"workflow": self.name, "step": step.name, "completed": len(completed)},
                )
                compensated, failures = await self._compensate(completed)
                raise WorkflowFailedException(
                    self.name, step.name, str(e), compensated, failures
                ) from e
            completed.append(step)
        return self.results

    async def _compensate(self, completed: list[SagaStep]) -> tuple[list[str], list[str]]:
        compensated: list[str] = []
        failures: list[str] = []
        for step in reversed(completed):
            if step.compensate is None:
                continue
            try:
                await step.compensate(self.results.get(step.name))
            except Exception:
                # Keep undoing the rest; the original failure is what gets raised.
                logger.exception(
                    "Compensation of step %s in workflow %s failed", step.name, self.name
                )
                failures.append(step.name)
            else:
                compensated.append(step.name)
        return compensated, failures
