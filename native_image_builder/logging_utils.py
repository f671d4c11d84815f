from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .build_config import BuildConfig
from .lib.env import PATHS

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(requested: Path, fallback: Path) -> logging.FileHandler:
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested)
    except OSError:
        return logging.FileHandler(fallback)


def configure_logging(
    cfg: BuildConfig,
    *,
    log_path: Optional[str] = None,
    invocation_dir: Optional[Path] = None,
    dry_run: bool = False,
    level: int = logging.INFO,
) -> Optional[str]:
    """Configure the root logger for one build.

    The log file lives in the workspace unless ``log_path`` says otherwise.
    When that location cannot be written the file goes to the invocation
    directory. A dry run touches nothing on disk, so it only logs to the
    console (stderr).

    Returns the log file path in use, or None for console-only logging.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_native_image_builder_configured", False):
        return getattr(root, "_native_image_builder_log_path", None)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    chosen: Optional[str] = None
    if not dry_run:
        requested = Path(log_path) if log_path else cfg.work_dir / PATHS.log_name
        fallback = (invocation_dir or Path.cwd()) / PATHS.log_name
        file_handler = _open_log_file(requested, fallback)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)
        chosen = file_handler.baseFilename

    setattr(root, "_native_image_builder_configured", True)
    setattr(root, "_native_image_builder_log_path", chosen)

    logging.getLogger(__name__).info("Logging initialized (file=%s)", chosen or "<console only>")
    return chosen
