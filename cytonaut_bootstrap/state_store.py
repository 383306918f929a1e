from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def save_report(path: str, report: Dict[str, Any]) -> None:
    """Write the run report (JSON, or YAML for .yaml/.yml paths)."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("YAML report requested but PyYAML is not available.") from e
        p.write_text(yaml.safe_dump(report, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.debug("Run report written to %s", p)


def new_report() -> Dict[str, Any]:
    return {
        "version": 1,
        "platform": None,
        "project_dir": None,
        "execution": {
            "current_step": None,
            "ran_steps": [],
            "errors": [],
        },
        "verification": None,
        "outcome": None,
    }
