from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

from .config import BootstrapConfig

if TYPE_CHECKING:  # pragma: no cover
    from .lib.hostos import PlatformTag
    from .lib.rlang import PackageCheckResult


@dataclass(frozen=True)
class BootstrapCtx:
    """Everything a step needs, threaded explicitly from step to step.

    Steps never touch os.environ; a step that changes the search path returns
    a new ctx and later subprocesses get ``subprocess_env`` instead.
    """

    cfg: BootstrapConfig
    project_dir: Path
    search_path: str
    dry_run: bool = False
    color: bool = True
    platform: Optional["PlatformTag"] = None
    pixi_exe: Optional[str] = None
    verification: Optional["PackageCheckResult"] = None

    @classmethod
    def create(
        cls,
        cfg: BootstrapConfig,
        *,
        project_dir: str | Path | None = None,
        search_path: str | None = None,
        dry_run: bool = False,
        color: bool = True,
    ) -> "BootstrapCtx":
        return cls(
            cfg=cfg,
            project_dir=Path(project_dir or Path.cwd()).resolve(),
            search_path=os.environ.get("PATH", os.defpath) if search_path is None else search_path,
            dry_run=dry_run,
            color=color,
        )

    @property
    def subprocess_env(self) -> Dict[str, str]:
        return {"PATH": self.search_path}

    def with_path_prepended(self, directory: str) -> "BootstrapCtx":
        parts = self.search_path.split(os.pathsep) if self.search_path else []
        if directory in parts:
            return self
        return replace(self, search_path=os.pathsep.join([directory, *parts]))

    def evolve(self, **changes) -> "BootstrapCtx":
        return replace(self, **changes)

    @property
    def pixi(self) -> str:
        if not self.pixi_exe:
            raise RuntimeError("pixi executable not resolved (ensure step has not run)")
        return self.pixi_exe
