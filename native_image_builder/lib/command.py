from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence, Union

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """An external command could not be run to a successful exit."""

    def __init__(self, message: str, *, command: str) -> None:
        super().__init__(message)
        self.command = command


class CommandLaunchError(CommandError):
    pass


class CommandFailedError(CommandError):
    def __init__(self, message: str, *, command: str, returncode: int) -> None:
        super().__init__(message, command=command)
        self.returncode = returncode


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int


def fmt_command(argv: Sequence[str]) -> str:
    return " ".join(argv)


def launch_args(argv: Sequence[str], *, shell: bool) -> Union[str, list[str]]:
    """Return what is handed to the process launcher.

    Through a shell the arguments are joined verbatim so the shell can
    consume any quoting. Launched directly, nothing would strip the quotes,
    so double quote characters are removed from every argument.
    """

    if shell:
        return fmt_command(argv)
    return [a.replace('"', "") for a in argv]


def run_cmd(
    argv: Sequence[str],
    *,
    shell: bool = False,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command to completion with inherited stdio.

    - Always logs the command.
    - Output streams straight to the caller's terminal; nothing is captured.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    command = fmt_command(argv_list)
    logger.info("CMD %s", command)

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0)

    try:
        p = subprocess.run(
            launch_args(argv_list, shell=shell),
            shell=shell,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        logger.error("Failed to launch %s: %s", argv_list[0], e)
        raise CommandLaunchError(f"Could not launch {argv_list[0]}: {e}", command=command) from e

    if p.returncode != 0:
        logger.error("non zero exit code %s", p.returncode)
        raise CommandFailedError(
            f"Command failed ({p.returncode}): {command}",
            command=command,
            returncode=p.returncode,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode)
