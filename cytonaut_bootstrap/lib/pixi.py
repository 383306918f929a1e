from __future__ import annotations

import logging
import shlex
from typing import Callable, Mapping, Optional, Sequence

from .command import CmdResult, find_executable, run_cmd

logger = logging.getLogger(__name__)


def locate_pixi(*, search_path: str, name: str = "pixi") -> Optional[str]:
    return find_executable(name, search_path=search_path)


def pixi_version(exe: str, *, env: Mapping[str, str] | None = None, dry_run: bool = False) -> str:
    """Return `pixi --version` output, or "unknown" if the binary won't say."""

    r = run_cmd([exe, "--version"], check=False, env=env, dry_run=dry_run)
    return r.stdout.strip() or "unknown"


def install_pixi(installer_url: str, *, dry_run: bool = False) -> CmdResult:
    """Fetch the official installer over HTTPS and pipe it to bash.

    The caller decides whether the install worked by looking for the binary
    afterwards, so the return code is not checked here.
    """

    script = f"set -o pipefail; curl -fsSL {shlex.quote(installer_url)} | bash"
    r = run_cmd(["bash", "-c", script], check=False, capture=False, dry_run=dry_run)
    if not r.ok:
        logger.warning("Installer exited with status %s", r.returncode)
    return r


def pixi_install(exe: str, *, cwd: str, env: Mapping[str, str] | None = None, dry_run: bool = False) -> None:
    run_cmd([exe, "install"], capture=False, cwd=cwd, env=env, dry_run=dry_run)


def pixi_run_task(
    exe: str,
    task: str,
    *,
    cwd: str,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> None:
    """`pixi run <task>`; raises ExternalTaskFailed with the task's exit code."""
    run_cmd([exe, "run", task], capture=False, cwd=cwd, env=env, dry_run=dry_run)


def pixi_exec(
    exe: str,
    argv: Sequence[str],
    *,
    cwd: str,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture: bool = True,
    dry_run: bool = False,
) -> CmdResult:
    """Run an arbitrary command inside the pixi environment (`pixi run -- ...`)."""
    return run_cmd(
        [exe, "run", "--", *argv],
        check=check,
        capture=capture,
        cwd=cwd,
        env=env,
        dry_run=dry_run,
    )


def run_chained_tasks(
    exe: str,
    tasks: Sequence[str],
    *,
    cwd: str,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
    on_done: Optional[Callable[[str], None]] = None,
) -> None:
    """Run pixi tasks in order, stopping at the first failure.

    The failing task's ExternalTaskFailed propagates unchanged (its return code
    becomes the process exit code). Tasks that already ran are not undone.
    """

    for task in tasks:
        pixi_run_task(exe, task, cwd=cwd, env=env, dry_run=dry_run)
        if on_done is not None:
            on_done(task)
