from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence

from .lib.command import CommandError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning step.

    If any of ``markers`` exists when the step is reached, the step is
    considered done and is not run.
    """

    step_id: str
    markers: Sequence[Path]

    def run(self, ctx: Any) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]
    failed_step: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None


def existing_marker(step: Step) -> Optional[Path]:
    for marker in step.markers:
        if marker.exists():
            return marker
    return None


def run_pipeline(*, ctx: Any, steps: Sequence[Step], force: bool = False) -> PipelineResult:
    """Run steps in order, stopping at the first failure."""

    ran: List[str] = []
    skipped: List[str] = []

    for step in steps:
        marker = None if force else existing_marker(step)
        if marker is not None:
            logger.info("Skipping step %s (%s exists)", step.step_id, marker)
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except (CommandError, OSError) as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            return PipelineResult(ran_steps=ran, skipped_steps=skipped, failed_step=step.step_id, error=e)
        ran.append(step.step_id)

    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
