from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_artifact(src: str, dst: str, *, dry_run: bool = False) -> None:
    """Copy a built file or directory tree to dst, overwriting what is there."""

    s = Path(src)
    d = Path(dst)

    if dry_run:
        logger.info("Would copy %s -> %s", str(s), str(d))
        return

    if not s.exists():
        raise FileNotFoundError(src)

    logger.info("Copying %s -> %s", str(s), str(d))
    if s.is_dir():
        d.mkdir(parents=True, exist_ok=True)
        for item in s.rglob("*"):
            rel = item.relative_to(s)
            out = d / rel
            if item.is_dir():
                out.mkdir(parents=True, exist_ok=True)
            else:
                out.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(item, out)
    else:
        d.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(s, d)
