from __future__ import annotations

import logging

from ..context import BootstrapCtx
from ..lib.pixi import run_chained_tasks
from ..logging_utils import ok

logger = logging.getLogger(__name__)


class ChainedTasksStep:
    step_id = "40_chained_tasks"
    description = "Run chained setup tasks"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        tasks = list(ctx.cfg.chained_tasks)
        if not tasks:
            logger.warning("No chained tasks configured")
            return ctx

        logger.info("Running setup tasks: %s", " → ".join(tasks))
        run_chained_tasks(
            ctx.pixi,
            tasks,
            cwd=str(ctx.project_dir),
            env=ctx.subprocess_env,
            dry_run=ctx.dry_run,
            on_done=lambda task: ok(logger, "Task %s finished", task),
        )
        return ctx
