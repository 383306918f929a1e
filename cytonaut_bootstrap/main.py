from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .banner import render_banner
from .config import BootstrapConfig, load_config
from .context import BootstrapCtx
from .errors import BootstrapError, VerificationIncomplete
from .logging_utils import configure_logging, use_color
from .pipeline import run_pipeline, step_ids
from .state_store import new_report, save_report
from .steps import (
    ChainedTasksStep,
    ConfirmAuxiliaryToolStep,
    DetectPlatformStep,
    EnsurePixiStep,
    InstallBaseDependenciesStep,
    LocateManifestStep,
    VerifyPackagesStep,
)

logger = logging.getLogger(__name__)


def build_steps(os_name: Optional[str] = None):
    # The manifest check comes before any install so a wrong directory has no
    # side effects.
    return [
        DetectPlatformStep(os_name),
        LocateManifestStep(),
        EnsurePixiStep(),
        InstallBaseDependenciesStep(),
        ChainedTasksStep(),
        VerifyPackagesStep(),
        ConfirmAuxiliaryToolStep(),
    ]


def run(
    *,
    cfg: BootstrapConfig,
    project_dir: Optional[str] = None,
    search_path: Optional[str] = None,
    report_path: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    color: bool = True,
    os_name: Optional[str] = None,
) -> BootstrapCtx:
    """Run the bootstrap pipeline; raises the first failure unchanged."""

    ctx = BootstrapCtx.create(
        cfg,
        project_dir=project_dir,
        search_path=search_path,
        dry_run=dry_run,
        color=color,
    )
    report: Dict[str, Any] = new_report()
    report["project_dir"] = str(ctx.project_dir)
    report["dry_run"] = dry_run
    started: List[str] = report["execution"].setdefault("started_steps", [])

    def on_step(step_id: str, current: BootstrapCtx) -> None:
        report["execution"]["current_step"] = step_id
        report["platform"] = current.platform.value if current.platform else None
        started.append(step_id)

    try:
        result = run_pipeline(
            ctx=ctx,
            steps=build_steps(os_name),
            stop_after=stop_after,
            on_step=on_step,
        )
        ctx = result.ctx
        report["platform"] = ctx.platform.value if ctx.platform else None
        report["execution"]["current_step"] = None
        report["execution"]["ran_steps"] = result.ran_steps
        if ctx.verification is not None:
            report["verification"] = ctx.verification.to_dict()
        report["outcome"] = {"ok": True, "exit_code": 0}
        return ctx
    except Exception as e:
        logger.debug("Bootstrap failed in %s", report["execution"]["current_step"], exc_info=True)
        report["execution"]["ran_steps"] = started[:-1]
        report["execution"]["errors"].append(
            {
                "step": report["execution"]["current_step"],
                "type": type(e).__name__,
                "error": str(e),
            }
        )
        if isinstance(e, VerificationIncomplete):
            report["verification"] = e.result.to_dict()
        report["outcome"] = {"ok": False, "exit_code": getattr(e, "exit_code", 1)}
        raise
    finally:
        if report_path:
            save_report(report_path, report)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cytonaut-bootstrap",
        description="Install pixi and every dependency of the project, then verify the R packages.",
    )
    p.add_argument("--project-dir", default=None, help="Repo root containing pixi.toml (default: cwd)")
    p.add_argument("--config", default=None, help="YAML file overriding the default tasks/packages")
    p.add_argument("--log", default=None, help="Also write a detailed log to this file")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument(
        "--stop-after",
        default=None,
        choices=step_ids(build_steps()),
        help="Stop after step_id (e.g. 30_install_base)",
    )
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    p.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    color = use_color(sys.stdout, no_color=bool(args.no_color))
    configure_logging(
        log_path=args.log,
        level=logging.DEBUG if args.verbose else logging.INFO,
        color=color,
    )

    try:
        cfg = load_config(args.config)
        run(
            cfg=cfg,
            project_dir=args.project_dir,
            report_path=args.report,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
            color=color,
        )
    except BootstrapError as e:
        logger.error("%s", e)
        return e.exit_code
    except KeyboardInterrupt:
        logger.error("Interrupted. Re-run to resume provisioning.")
        return 130
    except Exception:
        logger.exception("Bootstrap failed")
        return 1

    if args.stop_after:
        logger.info("Stopped after %s; re-run without --stop-after to finish.", args.stop_after)
        return 0

    sys.stdout.write(render_banner(cfg, color=color))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
