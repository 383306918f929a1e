from __future__ import annotations

import logging

from ..context import BootstrapCtx
from ..errors import MissingManifest

logger = logging.getLogger(__name__)


class LocateManifestStep:
    """Confirm we are at the repo root before anything gets installed."""

    step_id = "10_locate_manifest"
    description = "Locate project manifest"

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        logger.info("Working directory: %s", ctx.project_dir)

        if not (ctx.project_dir / ctx.cfg.manifest).is_file():
            raise MissingManifest(ctx.cfg.manifest, str(ctx.project_dir))
        return ctx
