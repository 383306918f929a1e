from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .errors import ConfigError

DEFAULT_PACKAGES: Tuple[str, ...] = (
    "Seurat",
    "tidyverse",
    "ggplot2",
    "patchwork",
    "cowplot",
    "scCustomize",
    "SingleCellExperiment",
    "scater",
    "scran",
    "DESeq2",
    "gprofiler2",
    "here",
    "future",
)

# configure -> bioconductor-install -> github-install
DEFAULT_CHAINED_TASKS: Tuple[str, ...] = (
    "configure",
    "bioconductor-install",
    "github-install",
)

DEFAULT_QUICK_START: Tuple[Tuple[str, str], ...] = (
    ("pixi run start", "launch radian (R console)"),
    ("pixi run preview", "live-preview quarto site"),
    ("pixi run render", "render all notebooks"),
    ("pixi run rstudio", "launch RStudio"),
)


@dataclass(frozen=True)
class BootstrapConfig:
    project_name: str = "cytonaut"
    manifest: str = "pixi.toml"
    package_manager: str = "pixi"
    installer_url: str = "https://pixi.sh/install/install.sh"
    install_dir: str = "~/.pixi/bin"
    chained_tasks: Tuple[str, ...] = DEFAULT_CHAINED_TASKS
    packages: Tuple[str, ...] = DEFAULT_PACKAGES
    rscript: str = "Rscript"
    auxiliary_tool: Tuple[str, ...] = ("quarto", "--version")
    quick_start: Tuple[Tuple[str, str], ...] = field(default=DEFAULT_QUICK_START)

    @property
    def install_dir_path(self) -> str:
        return os.path.expanduser(self.install_dir)


def _str(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string")
    return value.strip()


def _str_list(key: str, value: Any, *, allow_empty: bool = True, dedup: bool = True) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    items: List[str] = []
    for v in value:
        s = _str(f"{key}[]", v)
        # De-dup while preserving order
        if not dedup or s not in items:
            items.append(s)
    if not items and not allow_empty:
        raise ConfigError(f"{key} must not be empty")
    return tuple(items)


def _quick_start(value: Any) -> Tuple[Tuple[str, str], ...]:
    if not isinstance(value, dict):
        raise ConfigError("quick_start must be a mapping of command -> description")
    return tuple((_str("quick_start key", k), str(v or "").strip()) for k, v in value.items())


_PARSERS = {
    "project_name": _str,
    "manifest": _str,
    "package_manager": _str,
    "installer_url": _str,
    "install_dir": _str,
    "rscript": _str,
    # Tasks are an ordered sequence; a repeated task runs again.
    "chained_tasks": lambda k, v: _str_list(k, v, dedup=False),
    "packages": _str_list,
    "auxiliary_tool": lambda k, v: _str_list(k, v, allow_empty=False, dedup=False),
    "quick_start": lambda k, v: _quick_start(v),
}


def config_from_mapping(raw: Dict[str, Any], base: BootstrapConfig | None = None) -> BootstrapConfig:
    """Overlay known keys from ``raw`` on top of ``base`` (defaults)."""

    # YAML keys may be ints as well as strings.
    unknown = [str(k) for k in sorted(set(raw) - set(_PARSERS), key=str)]
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in raw.items():
        overrides[key] = _PARSERS[key](key, value)
    return replace(base or BootstrapConfig(), **overrides)


def load_config(path: str | None) -> BootstrapConfig:
    if not path:
        return BootstrapConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("bootstrap config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the bootstrap config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return config_from_mapping(raw)
