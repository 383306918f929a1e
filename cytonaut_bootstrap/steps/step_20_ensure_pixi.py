from __future__ import annotations

import logging
import os
from typing import Optional

from ..context import BootstrapCtx
from ..lib.pixi import install_pixi, locate_pixi, pixi_version
from ..lib.tools import EnsureOutcome, ensure_tool
from ..logging_utils import ok

logger = logging.getLogger(__name__)


class EnsurePixiStep:
    step_id = "20_ensure_pixi"
    description = "Install pixi (non-interactive)"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        cfg = ctx.cfg
        name = cfg.package_manager
        # The installer drops the binary here; later subprocesses need to see it
        # without a new shell.
        extended = ctx.with_path_prepended(cfg.install_dir_path)

        def recheck() -> Optional[str]:
            found = locate_pixi(search_path=extended.search_path, name=name)
            if found is None and ctx.dry_run:
                return os.path.join(cfg.install_dir_path, name)
            return found

        status = ensure_tool(
            name,
            check_fn=lambda: locate_pixi(search_path=ctx.search_path, name=name),
            install_fn=lambda: install_pixi(cfg.installer_url, dry_run=ctx.dry_run),
            recheck_fn=recheck,
            hint="Check https://pixi.sh for manual install.",
        )

        if status.outcome is EnsureOutcome.ALREADY_PRESENT:
            version = pixi_version(status.location, env=ctx.subprocess_env, dry_run=ctx.dry_run)
            ok(logger, "%s already installed: %s", name, version)
            return ctx.evolve(pixi_exe=status.location)

        version = pixi_version(status.location, env=extended.subprocess_env, dry_run=ctx.dry_run)
        ok(logger, "%s installed: %s", name, version)
        return extended.evolve(pixi_exe=status.location)
