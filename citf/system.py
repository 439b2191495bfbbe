# /*
# Copyright 2026 The CITF Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Running external commands, optionally elevated through sudo."""

from __future__ import annotations

import shlex
import sys
from collections.abc import Sequence

import sh

from citf import logger
from citf.config import RuntimeOptions
from citf.constants import SUDO
from citf.exceptions import CommandError


def split_command(command: str | Sequence[str]) -> list[str]:
    """Turn a command string or argv sequence into an argv list.

    Args:
        command: Shell-style command string or an argv sequence.

    Returns:
        Argument vector.
    """
    if isinstance(command, str):
        return shlex.split(command)
    return [str(arg) for arg in command]


def _decode(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


class CommandRunner:
    """Runs external commands synchronously.

    Whether commands are elevated by default comes from ``RuntimeOptions.use_sudo``.
    The runner never retries; callers decide what a failure means.
    """

    def __init__(self, options: RuntimeOptions | None = None) -> None:
        self.options = options if options is not None else RuntimeOptions()

    def run(
        self,
        command: str | Sequence[str],
        elevated: bool | None = None,
        stream: bool = False,
        stdin: str | None = None,
    ) -> str:
        """Run a command and return its captured stdout.

        Args:
            command: Command string (split with shlex) or argv sequence.
            elevated: Prefix the command with sudo. Defaults to ``options.use_sudo``.
            stream: Forward the command's output to the terminal instead of
                capturing it. Nothing is returned in that case.
            stdin: Text fed to the command's standard input.

        Returns:
            Captured stdout, or an empty string when streaming.

        Raises:
            ValueError: If the command is empty.
            CommandError: If the command cannot be started or exits non-zero.
        """
        argv = split_command(command)
        if not argv:
            raise ValueError("empty command")
        if elevated is None:
            elevated = self.options.use_sudo
        if elevated:
            argv = [SUDO, *argv]

        display = shlex.join(argv)
        logger.debug("Running %s", display)
        kwargs: dict[str, object] = {"_out": sys.stdout, "_err": sys.stderr} if stream else {}
        if stdin is not None:
            kwargs["_in"] = stdin
        try:
            result = sh.Command(argv[0])(*argv[1:], **kwargs)
        except sh.CommandNotFound as err:
            raise CommandError(display) from err
        except sh.ErrorReturnCode as err:
            raise CommandError(display, err.exit_code, _decode(err.stdout), _decode(err.stderr)) from err
        return "" if stream else str(result)


def require_command(cmd: str) -> str:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Returns:
        Absolute path of the command.

    Raises:
        CommandError: If the command is not found.
    """
    try:
        return str(sh.which(cmd)).strip()
    except (sh.ErrorReturnCode, sh.CommandNotFound) as err:
        raise CommandError(f"which {cmd}") from err
