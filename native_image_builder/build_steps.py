from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from . import graal_env
from .build_config import BuildConfig, BuildMode
from .lib.assets import copy_artifact
from .lib.command import run_cmd
from .pipeline import Step

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "compiler"


@dataclass(frozen=True)
class BuildCtx:
    cfg: BuildConfig
    mode: BuildMode
    invocation_dir: Path
    dry_run: bool = False

    @property
    def work_dir(self) -> Path:
        return self.cfg.work_dir

    @property
    def graal_src_dir(self) -> Path:
        return self.work_dir / "graal"

    @property
    def mx_src_dir(self) -> Path:
        return self.work_dir / "mx"

    @property
    def mx_path(self) -> Path:
        return self.mx_src_dir / "mx"

    @property
    def input_jar(self) -> Path:
        return self.invocation_dir / self.cfg.input_jar

    @property
    def output_path(self) -> Path:
        return self.invocation_dir / ARTIFACT_NAME

    def native_image_args(self) -> List[str]:
        return graal_env.native_image_build_args(
            reflection_config=self.cfg.reflection_config,
            input_jar=self.input_jar,
        )


@dataclass(frozen=True)
class EnsureWorkspaceStep:
    step_id: str = "00_ensure_workspace"
    markers: Sequence[Path] = ()

    def run(self, ctx: BuildCtx) -> None:
        if ctx.dry_run:
            logger.info("Would create %s", ctx.work_dir)
            return
        ctx.work_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class CommandStep:
    step_id: str
    argv: Tuple[str, ...]
    cwd: Optional[Path] = None
    env: Dict[str, str] = field(default_factory=dict)
    shell: bool = False
    markers: Sequence[Path] = ()

    def run(self, ctx: BuildCtx) -> None:
        run_cmd(
            self.argv,
            shell=self.shell,
            env=self.env,
            cwd=str(self.cwd) if self.cwd is not None else None,
            dry_run=ctx.dry_run,
        )


@dataclass(frozen=True)
class CloneOrFetchStep:
    """Fetch into an existing checkout, otherwise clone it next to where it belongs."""

    step_id: str
    repo_url: str
    checkout_dir: Path
    markers: Sequence[Path] = ()

    def run(self, ctx: BuildCtx) -> None:
        if self.checkout_dir.exists():
            run_cmd(["git", "fetch"], cwd=str(self.checkout_dir), dry_run=ctx.dry_run)
        else:
            run_cmd(["git", "clone", self.repo_url], cwd=str(self.checkout_dir.parent), dry_run=ctx.dry_run)


@dataclass(frozen=True)
class CopyArtifactStep:
    src: Path
    dst: Path
    step_id: str = "50_copy_artifact"
    markers: Sequence[Path] = ()

    def run(self, ctx: BuildCtx) -> None:
        copy_artifact(str(self.src), str(self.dst), dry_run=ctx.dry_run)


def download_step(step_id: str, *, url: str, archive: str, work_dir: Path, extracted: Path) -> CommandStep:
    return CommandStep(
        step_id=step_id,
        argv=(*graal_env.CURL_ARGS, "--output", archive, url),
        cwd=work_dir,
        markers=(work_dir / archive, extracted),
    )


def extract_step(step_id: str, *, archive: str, work_dir: Path, extracted: Path) -> CommandStep:
    return CommandStep(
        step_id=step_id,
        argv=("tar", "-xzf", archive),
        cwd=work_dir,
        markers=(extracted,),
    )


def source_steps(ctx: BuildCtx) -> List[Step]:
    """Compile the native-image tool from a pinned Graal checkout, then build with it."""

    work = ctx.work_dir
    jdk = graal_env.jdk_distribution(work, ctx.cfg.platform)
    java_env = {"JAVA_HOME": str(jdk.home), "EXTRA_JAVA_HOMES": str(jdk.home)}
    substratevm = ctx.graal_src_dir / "substratevm"

    return [
        EnsureWorkspaceStep(),
        CloneOrFetchStep("10_fetch_graal_source", graal_env.GRAAL_REPO_URL, ctx.graal_src_dir),
        CommandStep(
            "11_checkout_graal_source",
            ("git", "checkout", graal_env.GRAAL_SOURCE_VERSION),
            cwd=ctx.graal_src_dir,
        ),
        CloneOrFetchStep(
            "12_clone_mx",
            graal_env.MX_REPO_URL,
            ctx.mx_src_dir,
            markers=(ctx.mx_src_dir,),
        ),
        download_step(
            "20_download_jdk",
            url=jdk.url,
            archive=jdk.archive_name,
            work_dir=work,
            extracted=work / jdk.folder,
        ),
        extract_step("21_extract_jdk", archive=jdk.archive_name, work_dir=work, extracted=work / jdk.folder),
        CommandStep(
            "30_build_native_image_tool",
            (str(ctx.mx_path), "-v", "--primary-suite-path", "substratevm", "build"),
            cwd=ctx.graal_src_dir,
            env=java_env,
        ),
        # The mx launcher needs the quoted flags; only a shell passes them through intact.
        CommandStep(
            "40_native_image",
            (str(ctx.mx_path), "-v", "native-image", *ctx.native_image_args()),
            cwd=substratevm,
            env=java_env,
            shell=True,
        ),
        CopyArtifactStep(src=substratevm / ARTIFACT_NAME, dst=ctx.output_path),
    ]


def prebuilt_steps(ctx: BuildCtx) -> List[Step]:
    """Download the released GraalVM and run its native-image binary directly."""

    work = ctx.work_dir
    platform = ctx.cfg.platform
    archive = f"{graal_env.graal_folder(platform)}.tar.gz"
    home = graal_env.graal_home(work)

    return [
        EnsureWorkspaceStep(),
        download_step(
            "20_download_graal",
            url=graal_env.graal_url(platform),
            archive=archive,
            work_dir=work,
            extracted=home,
        ),
        extract_step("21_extract_graal", archive=archive, work_dir=work, extracted=home),
        CommandStep(
            "40_native_image",
            (str(graal_env.native_image_path(work, platform)), *ctx.native_image_args()),
            cwd=work,
        ),
        CopyArtifactStep(src=work / ARTIFACT_NAME, dst=ctx.output_path),
    ]


def build_plan(ctx: BuildCtx) -> List[Step]:
    if ctx.mode is BuildMode.SOURCE:
        steps = source_steps(ctx)
    else:
        steps = prebuilt_steps(ctx)
    logger.info("Build mode %s: %d steps planned", ctx.mode.value, len(steps))
    return steps
