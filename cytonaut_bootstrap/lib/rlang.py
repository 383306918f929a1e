"""Ask R which packages are loadable.

The check itself stays inside R (``requireNamespace``) so it follows the
target runtime's own loading rules. The script only prints one
machine-readable line per package; counting and pass/fail happen here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

from ..errors import ExternalTaskFailed
from .pixi import pixi_exec

logger = logging.getLogger(__name__)

MARKER = "CYTONAUT_PKG"

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"


@dataclass(frozen=True)
class PackageCheckResult:
    statuses: Dict[str, bool] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.statuses)

    @property
    def satisfied(self) -> int:
        return sum(1 for ok in self.statuses.values() if ok)

    @property
    def missing(self) -> List[str]:
        return [name for name, ok in self.statuses.items() if not ok]

    @property
    def ok(self) -> bool:
        return self.satisfied == self.total

    def to_dict(self) -> Dict[str, object]:
        return {
            "packages": dict(self.statuses),
            "satisfied": self.satisfied,
            "total": self.total,
        }


def _r_string(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_check_script(packages: Sequence[str]) -> str:
    pkgs = ", ".join(_r_string(p) for p in packages)
    return (
        f"pkgs <- c({pkgs})\n"
        "for (p in pkgs) {\n"
        "  ok <- suppressWarnings(requireNamespace(p, quietly = TRUE))\n"
        f'  cat(sprintf("{MARKER}\\t%s\\t%s\\n", p, if (isTRUE(ok)) "TRUE" else "FALSE"))\n'
        "}\n"
    )


def parse_check_output(packages: Sequence[str], stdout: str) -> PackageCheckResult:
    """Build a result for exactly ``packages`` from the script's output.

    Packages the script never reported count as missing.
    """

    reported: Dict[str, bool] = {}
    for line in stdout.splitlines():
        parts = line.strip().split("\t")
        if len(parts) != 3 or parts[0] != MARKER:
            continue
        reported[parts[1]] = parts[2].upper() == "TRUE"

    statuses: Dict[str, bool] = {}
    for name in packages:
        statuses[name] = reported.get(name, False)
    return PackageCheckResult(statuses=statuses)


def render_report(result: PackageCheckResult, *, color: bool = True) -> str:
    def mark(ok: bool) -> str:
        sym = "✓" if ok else "✗"
        if not color:
            return sym
        return f"{GREEN if ok else RED}{sym}{RESET}"

    lines = ["", "── Package verification ──────────────────────────"]
    for name, ok in result.statuses.items():
        lines.append(f"  {mark(ok)} {name}")
    lines.append("")
    lines.append(f"  {result.satisfied} / {result.total} packages verified")
    return "\n".join(lines) + "\n"


def check_packages(
    exe: str,
    packages: Iterable[str],
    *,
    rscript: str = "Rscript",
    cwd: str,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> PackageCheckResult:
    names = list(packages)
    if dry_run:
        # Be permissive in dry-run so planning doesn't fail.
        pixi_exec(exe, [rscript, "-e", "<package check>"], cwd=cwd, env=env, dry_run=True)
        return PackageCheckResult(statuses={n: True for n in names})

    r = pixi_exec(
        exe,
        [rscript, "-e", build_check_script(names)],
        cwd=cwd,
        env=env,
        check=False,
    )
    result = parse_check_output(names, r.stdout)
    if not r.ok and not any(line.startswith(MARKER) for line in r.stdout.splitlines()):
        # R never got as far as checking anything (missing Rscript, bad env).
        raise ExternalTaskFailed(r.argv, r.returncode, r.stderr)
    return result
