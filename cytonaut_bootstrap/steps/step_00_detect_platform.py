from __future__ import annotations

import logging
from typing import Optional

from ..context import BootstrapCtx
from ..lib.hostos import detect_platform

logger = logging.getLogger(__name__)


class DetectPlatformStep:
    step_id = "00_detect_platform"
    description = "Detect OS"

    def __init__(self, os_name: Optional[str] = None) -> None:
        # None means "ask the host"; tests pass a fixed identifier.
        self.os_name = os_name

    def run(self, ctx: BootstrapCtx) -> BootstrapCtx:
        tag = detect_platform(self.os_name)
        logger.info("Detected platform: %s", tag.value)
        return ctx.evolve(platform=tag)
