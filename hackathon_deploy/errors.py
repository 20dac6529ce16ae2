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

"""Error types raised by deployment steps."""

from __future__ import annotations


class DeploymentError(RuntimeError):
    """Base class for failures that abort the requested action."""


class PreconditionError(DeploymentError):
    """A requirement for the action is not met; nothing was attempted."""


class MissingToolError(PreconditionError):
    """One or more required CLI tools are not on PATH."""

    def __init__(self, tools: list[str]) -> None:
        self.tools = tools
        super().__init__(f"Missing required tools: {', '.join(tools)}")


class BillingAccountMissingError(PreconditionError):
    """No billing account is available to link to a new project."""


class ClusterNotFoundError(PreconditionError):
    """Credentials could not be fetched because the cluster does not exist."""


class ManifestNotFoundError(PreconditionError):
    """A manifest path is missing from the application directory."""


class CommandError(DeploymentError):
    """An external command exited with a non-zero status.

    Attributes:
        tool: Name of the executable (``gcloud`` or ``kubectl``).
        command_args: Arguments passed to the executable.
        exit_code: Process exit status.
        stderr: Decoded standard error output.
    """

    def __init__(self, tool: str, args: tuple[str, ...], exit_code: int, stderr: str = "") -> None:
        self.tool = tool
        self.command_args = args
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"'{tool} {' '.join(args)}' failed with exit code {exit_code}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
