from __future__ import annotations

import logging
import sys

from ..context import BootstrapCtx
from ..errors import VerificationIncomplete
from ..lib.rlang import check_packages, render_report
from ..logging_utils import ok

logger = logging.getLogger(__name__)


class VerifyPackagesStep:
    step_id = "50_verify_packages"
    description = "Verify installation"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        packages = list(ctx.cfg.packages)
        if not packages:
            logger.warning("No packages configured for verification")
            return ctx

        logger.info("Verifying key packages …")
        result = check_packages(
            ctx.pixi,
            packages,
            rscript=ctx.cfg.rscript,
            cwd=str(ctx.project_dir),
            env=ctx.subprocess_env,
            dry_run=ctx.dry_run,
        )
        sys.stdout.write(render_report(result, color=ctx.color))
        sys.stdout.flush()

        if not result.ok:
            raise VerificationIncomplete(result)

        ok(logger, "All key packages verified")
        return ctx.evolve(verification=result)
