# /*
# Copyright 2026 The Grove Authors.
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

"""Utility functions for gcloud/kubectl invocation, tool checks, and idempotent apply."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import sh

from hackathon_deploy import console, logger
from hackathon_deploy.errors import CommandError, MissingToolError


def _run(tool: str, *args: str) -> str:
    """Run an external CLI and return its stdout.

    Args:
        tool: Executable name.
        *args: Command-line arguments.

    Returns:
        Captured standard output.

    Raises:
        MissingToolError: If the executable is not on PATH.
        CommandError: If the command exits with a non-zero status.
    """
    logger.debug("Running: %s %s", tool, " ".join(args))
    try:
        return str(sh.Command(tool)(*args))
    except sh.CommandNotFound as err:
        raise MissingToolError([tool]) from err
    except sh.ErrorReturnCode as err:
        stderr = err.stderr.decode("utf-8", errors="replace") if err.stderr else ""
        raise CommandError(tool, args, err.exit_code, stderr) from err


def gcloud(*args: str) -> str:
    """Run a gcloud command.

    Raises:
        CommandError: If gcloud exits with a non-zero status.
    """
    return _run("gcloud", *args)


def kubectl(*args: str) -> str:
    """Run a kubectl command.

    Raises:
        CommandError: If kubectl exits with a non-zero status.
    """
    return _run("kubectl", *args)


def find_missing_commands(cmds: Iterable[str]) -> list[str]:
    """Return the commands from *cmds* that are not on the system PATH.

    Args:
        cmds: Names of the CLI commands to check.

    Returns:
        Missing command names, in input order.
    """
    missing: list[str] = []
    for cmd in cmds:
        try:
            sh.which(cmd)
        except (sh.ErrorReturnCode, sh.CommandNotFound):
            missing.append(cmd)
    return missing


def require_commands(cmds: Iterable[str]) -> None:
    """Check that every command exists on the system PATH.

    Args:
        cmds: Names of the CLI commands to check.

    Raises:
        MissingToolError: Listing every command that was not found.
    """
    missing = find_missing_commands(cmds)
    if missing:
        raise MissingToolError(missing)


def ensure_exists(description: str, exists: Callable[[], bool], create: Callable[[], None]) -> bool:
    """Create a remote resource only if a fresh existence check says it is absent.

    Args:
        description: Human-readable resource name used in messages.
        exists: Read-only check against the remote state.
        create: Operation creating the resource.

    Returns:
        True if the resource was created, False if it already existed.
    """
    if exists():
        console.print(f"[yellow]\u2139\ufe0f  {description} already exists, skipping creation[/yellow]")
        return False
    console.print(f"[yellow]\u2139\ufe0f  Creating {description}...[/yellow]")
    create()
    console.print(f"[green]\u2705 {description} created[/green]")
    return True
