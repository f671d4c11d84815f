from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest


@dataclass
class Launch:
    args: Any
    shell: bool
    cwd: Optional[str]
    env: Dict[str, str]

    @property
    def program(self) -> str:
        if self.shell:
            return self.args.split()[0]
        return self.args[0]


@dataclass
class FakeRunner:
    """Stands in for subprocess.run and records every launch."""

    launches: List[Launch] = field(default_factory=list)
    returncodes: Dict[str, int] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
    effects: Dict[str, Callable[[Launch], None]] = field(default_factory=dict)

    def __call__(self, args, *, shell=False, cwd=None, env=None, **kwargs):
        launch = Launch(args=args, shell=shell, cwd=cwd, env=dict(env or {}))
        self.launches.append(launch)
        name = Path(launch.program).name
        if name in self.missing:
            raise FileNotFoundError(2, "No such file or directory", launch.program)
        effect = self.effects.get(name)
        if effect is not None:
            effect(launch)
        return subprocess.CompletedProcess(args, self.returncodes.get(name, 0))

    @property
    def commands(self) -> List[str]:
        return [a.args if a.shell else " ".join(a.args) for a in self.launches]


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    if getattr(root, "_native_image_builder_configured", False):
        for h in list(root.handlers):
            if type(h) in (logging.FileHandler, logging.StreamHandler):
                root.removeHandler(h)
                h.close()
        delattr(root, "_native_image_builder_configured")
        delattr(root, "_native_image_builder_log_path")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An invocation directory holding the input jar."""

    d = tmp_path / "package"
    d.mkdir()
    (d / "compiler.jar").write_bytes(b"PK")
    return d


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    p = tmp_path / "build.yaml"
    p.write_text(
        "paths:\n"
        f"  work_dir: {tmp_path / 'temp'}\n"
        "platform: linux\n",
        encoding="utf-8",
    )
    return p
