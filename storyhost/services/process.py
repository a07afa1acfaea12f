"""Process runner for the external Storybook commands."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from storykit.errors import ConfigurationError

logger = logging.getLogger(__name__)

_NODE_HINT = "check that Node.js is installed"


class ProcessRunner(Protocol):
    def which(self, program: str) -> str | None: ...

    def run(self, argv: Sequence[str], cwd: Path) -> None: ...


class SubprocessRunner:
    """Runs commands to completion, inheriting stdout/stderr so npm output stays visible."""

    def which(self, program: str) -> str | None:
        return shutil.which(program)

    def run(self, argv: Sequence[str], cwd: Path) -> None:
        logger.info("process: running %s in %s", shlex.join(argv), cwd)
        subprocess.run(list(argv), cwd=str(cwd), check=True)  # noqa: S603


def resolve_command(runner: ProcessRunner, command: str, purpose: str) -> list[str]:
    """
    Split `command` and resolve its launcher on PATH.

    Raises:
        ConfigurationError: if the launcher cannot be found
    """
    argv = shlex.split(command)
    if not argv:
        raise ConfigurationError("", f"storybook: cannot {purpose}, the command is empty")
    launcher = runner.which(argv[0])
    if launcher is None:
        raise ConfigurationError(
            argv[0],
            f"storybook: cannot {purpose}, cannot find {argv[0]} on the path, {_NODE_HINT}",
        )
    return [launcher, *argv[1:]]
