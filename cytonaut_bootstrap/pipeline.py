from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from .context import BootstrapCtx

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step.

    ``run`` returns the (possibly updated) ctx and raises on failure.
    """

    step_id: str
    description: str

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ctx: BootstrapCtx
    ran_steps: List[str]


def step_ids(steps: Sequence[Step]) -> List[str]:
    return [s.step_id for s in steps]


def run_pipeline(
    *,
    ctx: BootstrapCtx,
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
    on_step: Optional[Callable[[str, BootstrapCtx], None]] = None,
) -> PipelineResult:
    """Run steps strictly in order; the first exception aborts the run.

    ``on_step(step_id, ctx)`` is called before each step so callers can record
    which step was in flight (and what was known so far) if it raises.
    """

    if stop_after is not None and stop_after not in step_ids(steps):
        raise ValueError(f"Unknown step id: {stop_after}")

    ran: List[str] = []

    for step in steps:
        if on_step is not None:
            on_step(step.step_id, ctx)

        logger.debug("Running step %s", step.step_id)
        ctx = step.run(ctx)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.debug("Stopping after %s", stop_after)
            break

    return PipelineResult(ctx=ctx, ran_steps=ran)
