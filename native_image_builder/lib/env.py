from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Paths:
    work_dir: str = str(_PACKAGE_DIR.parent / "temp")
    reflection_config: str = str(_PACKAGE_DIR / "reflection-config.json")
    input_jar: str = "compiler.jar"
    log_name: str = "native-image-builder.log"


PATHS = Paths()
