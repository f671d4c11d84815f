"""Tests for command execution and the argument quoting policy."""

from __future__ import annotations

import os

import pytest

from native_image_builder.lib.command import (
    CommandFailedError,
    CommandLaunchError,
    launch_args,
    run_cmd,
)

QUOTED = '-H:IncludeResources="(externs.zip)|(.*(js|txt))"'


class TestLaunchArgs:
    def test_shell_keeps_quotes_verbatim(self) -> None:
        assert launch_args(["mx", "-v", QUOTED], shell=True) == f"mx -v {QUOTED}"

    def test_direct_strips_quotes(self) -> None:
        assert launch_args(["native-image", QUOTED], shell=False) == [
            "native-image",
            "-H:IncludeResources=(externs.zip)|(.*(js|txt))",
        ]

    def test_direct_leaves_unquoted_args_alone(self) -> None:
        argv = ["tar", "-xzf", "graalvm.tar.gz"]
        assert launch_args(argv, shell=False) == argv


class TestRunCmd:
    def test_success(self, fake_run) -> None:
        result = run_cmd(["git", "fetch"], cwd="/tmp")
        assert result.returncode == 0
        assert fake_run.launches[0].args == ["git", "fetch"]
        assert fake_run.launches[0].cwd == "/tmp"
        assert fake_run.launches[0].shell is False

    def test_shell_invocation_gets_a_string(self, fake_run) -> None:
        run_cmd(["mx", "-v", QUOTED], shell=True)
        assert fake_run.launches[0].shell is True
        assert fake_run.launches[0].args == f"mx -v {QUOTED}"

    def test_env_is_layered_over_process_env(self, fake_run, monkeypatch) -> None:
        monkeypatch.setenv("SOME_OUTER_VAR", "1")
        run_cmd(["mx", "build"], env={"JAVA_HOME": "/jdk"})
        env = fake_run.launches[0].env
        assert env["JAVA_HOME"] == "/jdk"
        assert env["SOME_OUTER_VAR"] == "1"
        assert env["PATH"] == os.environ["PATH"]

    def test_non_zero_exit_raises(self, fake_run) -> None:
        fake_run.returncodes["curl"] = 22
        with pytest.raises(CommandFailedError) as exc_info:
            run_cmd(["curl", "--fail", "http://example.invalid"])
        assert exc_info.value.returncode == 22
        assert exc_info.value.command == "curl --fail http://example.invalid"

    def test_launch_failure_raises(self, fake_run) -> None:
        fake_run.missing.append("git")
        with pytest.raises(CommandLaunchError):
            run_cmd(["git", "clone", "https://example.invalid/repo.git"])

    def test_dry_run_launches_nothing(self, fake_run) -> None:
        result = run_cmd(["tar", "-xzf", "x.tar.gz"], dry_run=True)
        assert result.returncode == 0
        assert fake_run.launches == []
