from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from .build_config import load_build_config, resolve_build_mode
from .build_steps import BuildCtx, build_plan
from .logging_utils import configure_logging
from .pipeline import PipelineResult, run_pipeline

logger = logging.getLogger(__name__)


def run(
    *,
    config_path: Optional[str] = None,
    log_path: Optional[str] = None,
    dry_run: bool = False,
    force: bool = False,
    environ: Optional[Mapping[str, str]] = None,
    invocation_dir: Optional[Path] = None,
) -> PipelineResult:
    """Provision the toolchain and build the native image into the invocation directory."""

    cfg = load_build_config(config_path)
    here = (invocation_dir or Path.cwd()).resolve()
    configure_logging(cfg, log_path=log_path, invocation_dir=here, dry_run=dry_run)

    mode = resolve_build_mode(os.environ if environ is None else environ)
    ctx = BuildCtx(cfg=cfg, mode=mode, invocation_dir=here, dry_run=dry_run)

    if not ctx.input_jar.exists() and not dry_run:
        err = FileNotFoundError(f"Input artifact missing: {ctx.input_jar}")
        logger.error("%s", err)
        return PipelineResult(ran_steps=[], skipped_steps=[], failed_step="input", error=err)

    try:
        result = run_pipeline(ctx=ctx, steps=build_plan(ctx), force=force)
    except Exception:
        logger.exception("Build aborted by an unexpected error")
        raise
    if result.ok:
        logger.info("Native image written to %s", ctx.output_path)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="native-image-builder")
    p.add_argument("--config", default=None, help="Optional build config (yaml)")
    p.add_argument("--log", default=None, help="Path to build log (default: inside the workspace)")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--force", action="store_true", help="Re-run steps even if their outputs exist")

    args = p.parse_args(argv)

    result = run(
        config_path=args.config,
        log_path=args.log,
        dry_run=bool(args.dry_run),
        force=bool(args.force),
    )
    if not result.ok:
        logger.error("Build failed at %s: %s", result.failed_step, result.error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
