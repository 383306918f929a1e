from __future__ import annotations

import logging

from ..context import BootstrapCtx
from ..lib.pixi import pixi_exec
from ..logging_utils import ok

logger = logging.getLogger(__name__)


class ConfirmAuxiliaryToolStep:
    step_id = "60_confirm_auxiliary_tool"
    description = "Confirm quarto"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        argv = list(ctx.cfg.auxiliary_tool)
        tool = argv[0]
        logger.info("Checking %s …", tool)
        pixi_exec(
            ctx.pixi,
            argv,
            cwd=str(ctx.project_dir),
            env=ctx.subprocess_env,
            capture=False,
            dry_run=ctx.dry_run,
        )
        ok(logger, "%s ready", tool.capitalize())
        return ctx
