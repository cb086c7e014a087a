from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import SetupContext
from .outcome import StepResult

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: SetupContext) -> StepResult:
        ...


@dataclass(frozen=True)
class PipelineResult:
    results: List[StepResult]

    @property
    def ran_steps(self) -> List[str]:
        return [r.step_id for r in self.results]

    def get(self, step_id: str) -> Optional[StepResult]:
        for r in self.results:
            if r.step_id == step_id:
                return r
        return None


def run_pipeline(ctx: SetupContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order. A FatalError from any step stops the run."""

    results: List[StepResult] = []
    for step in steps:
        logger.debug("Running step %s", step.step_id)
        result = step.run(ctx)
        for a in result.failed:
            logger.debug("Step %s: %s failed (%s)", step.step_id, a.name, a.detail)
        results.append(result)
    return PipelineResult(results=results)
