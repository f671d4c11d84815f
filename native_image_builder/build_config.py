from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .lib.env import PATHS

# Present: compile Graal from source (release builds). Absent: use the prebuilt release.
BUILD_FROM_SOURCE_ENV = "COMPILER_RELEASE"


class BuildMode(enum.Enum):
    SOURCE = "source"
    PREBUILT = "prebuilt"


def resolve_build_mode(environ: Mapping[str, str]) -> BuildMode:
    return BuildMode.SOURCE if BUILD_FROM_SOURCE_ENV in environ else BuildMode.PREBUILT


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def work_dir(self) -> Path:
        return Path(str(((self.raw.get("paths") or {}).get("work_dir")) or PATHS.work_dir)).resolve()

    @property
    def platform(self) -> str:
        return str(self.raw.get("platform") or sys.platform)

    @property
    def reflection_config(self) -> Path:
        value = (self.raw.get("native_image") or {}).get("reflection_config")
        return Path(str(value or PATHS.reflection_config)).resolve()

    @property
    def input_jar(self) -> str:
        return str(((self.raw.get("native_image") or {}).get("input_jar")) or PATHS.input_jar)


def load_build_config(path: Optional[str]) -> BuildConfig:
    if path is None:
        return BuildConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("build config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("build config must contain a mapping/object")

    return BuildConfig(raw=raw)
