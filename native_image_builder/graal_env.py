"""Pinned toolchain versions and the platform-specific locations derived from them.

The JVMCI version is strongly tied to the Graal version. When the Graal
source revision is updated, the newest JVMCI release known to work with it
has to be used as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

GRAAL_VERSION = "1.0.0-rc9"
GRAAL_SOURCE_VERSION = "vm-1.0.0-rc3"
JVMCI_VERSION = "jvmci-0.44"

GRAAL_REPO_URL = "https://github.com/oracle/graal.git"
MX_REPO_URL = "https://github.com/graalvm/mx.git"

CURL_ARGS = ["curl", "--fail", "--show-error", "--location", "--progress-bar"]


def graal_os(platform: str) -> str:
    return "macos" if platform == "darwin" else platform


def graal_folder(platform: str) -> str:
    return f"graalvm-ce-{GRAAL_VERSION}-{graal_os(platform)}-amd64"


def graal_url(platform: str) -> str:
    return f"https://github.com/oracle/graal/releases/download/vm-{GRAAL_VERSION}/{graal_folder(platform)}.tar.gz"


def graal_home(work_dir: Path) -> Path:
    """Directory the release archive extracts to."""
    return work_dir / f"graalvm-ce-{GRAAL_VERSION}"


def native_image_path(work_dir: Path, platform: str) -> Path:
    bundle: List[str] = ["Contents", "Home"] if graal_os(platform) == "macos" else []
    return graal_home(work_dir).joinpath(*bundle, "bin", "native-image")


@dataclass(frozen=True)
class JdkDistribution:
    """A JDK8 build with JVMCI support, needed to compile Graal from source."""

    update_version: str
    url: str
    folder: str
    home: Path

    @property
    def archive_name(self) -> str:
        return f"{self.folder}.tar.gz"


def jdk_distribution(work_dir: Path, platform: str) -> JdkDistribution:
    if platform == "darwin":
        # Custom build; the upstream darwin releases do not work with the Graal revision we pin.
        update = "181"
        url = (
            "https://github.com/ChadKillingsworth/openjdk8-jvmci-builder/releases/download/"
            f"{JVMCI_VERSION}/jdk1.8.0_{update}-{JVMCI_VERSION}-{platform}-amd64.tar.gz"
        )
        folder = f"jdk1.8.0_{update}-{JVMCI_VERSION}"
        return JdkDistribution(update, url, folder, work_dir / folder / "Contents" / "Home")

    update = "172"
    url = (
        "https://github.com/graalvm/openjdk8-jvmci-builder/releases/download/"
        f"{JVMCI_VERSION}/openjdk-8u{update}-{JVMCI_VERSION}-{platform}-amd64.tar.gz"
    )
    folder = f"openjdk1.8.0_{update}-{JVMCI_VERSION}"
    return JdkDistribution(update, url, folder, work_dir / folder)


def native_image_build_args(*, reflection_config: Path, input_jar: Path) -> List[str]:
    return [
        "-H:+JNI",
        "--no-server",
        "-H:+ReportUnsupportedElementsAtRuntime",
        "-H:IncludeResourceBundles=com.google.javascript.rhino.Messages",
        "-H:IncludeResourceBundles=org.kohsuke.args4j.Messages",
        "-H:IncludeResourceBundles=org.kohsuke.args4j.spi.Messages",
        "-H:IncludeResourceBundles=com.google.javascript.jscomp.parsing.ParserConfig",
        f"-H:ReflectionConfigurationFiles={reflection_config}",
        '-H:IncludeResources="(externs.zip)|(.*(js|txt))"',
        "-jar",
        str(input_jar),
    ]
