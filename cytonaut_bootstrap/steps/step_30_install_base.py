from __future__ import annotations

import logging

from ..context import BootstrapCtx
from ..lib.pixi import pixi_install
from ..logging_utils import ok

logger = logging.getLogger(__name__)


class InstallBaseDependenciesStep:
    step_id = "30_install_base"
    description = "Install conda-forge dependencies"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        logger.info("Installing conda-forge/bioconda packages via %s …", ctx.cfg.package_manager)
        pixi_install(ctx.pixi, cwd=str(ctx.project_dir), env=ctx.subprocess_env, dry_run=ctx.dry_run)
        ok(logger, "Base environment installed")
        return ctx
