from __future__ import annotations

from typing import List

from .config import BootstrapConfig
from .logging_utils import GREEN, NC

WIDTH = 62


def render_banner(cfg: BootstrapConfig, *, color: bool = True) -> str:
    """Final success box listing the follow-up commands."""

    body: List[str] = [f"  {cfg.project_name} environment ready!", ""]
    if cfg.quick_start:
        body.append("  Quick start:")
        cmd_width = max(len(cmd) for cmd, _ in cfg.quick_start)
        for cmd, desc in cfg.quick_start:
            line = f"    {cmd.ljust(cmd_width)}"
            if desc:
                line += f"  # {desc}"
            body.append(line)

    inner = max(WIDTH, *(len(b) + 1 for b in body))
    rows = ["╔" + "═" * inner + "╗"]
    rows += ["║" + b.ljust(inner) + "║" for b in body]
    rows.append("╚" + "═" * inner + "╝")

    if color:
        rows = [f"{GREEN}{r}{NC}" for r in rows]
    return "\n" + "\n".join(rows) + "\n"
