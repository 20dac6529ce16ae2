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

"""Action dispatch: maps each action to an ordered sequence of deployment steps."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from rich.panel import Panel

from hackathon_deploy import console
from hackathon_deploy.cluster import destroy_cluster, ensure_cluster, get_credentials
from hackathon_deploy.config import ApplicationConfig, DeploymentTarget, ReadinessConfig
from hackathon_deploy.constants import REQUIRED_TOOLS
from hackathon_deploy.project import enable_apis, ensure_project
from hackathon_deploy.utils import require_commands
from hackathon_deploy.workloads import apply_manifests, report_status, wait_for_pods


class Action(str, Enum):
    """Actions accepted by ``-a``."""

    SETUP = "setup"
    DEPLOY = "deploy"
    STATUS = "status"
    DESTROY = "destroy"
    ALL = "all"


@dataclass(frozen=True)
class DeploymentContext:
    """Values threaded through every step of a single invocation.

    Attributes:
        target: Resolved project, region, and cluster name.
        app_cfg: Application checkout and runtime settings.
        readiness_cfg: Pod readiness polling budget.
    """

    target: DeploymentTarget
    app_cfg: ApplicationConfig
    readiness_cfg: ReadinessConfig


Step = Callable[[DeploymentContext], None]


# ============================================================================
# Steps
# ============================================================================

def _provision_project(ctx: DeploymentContext) -> None:
    ensure_project(ctx.target.project_id)


def _enable_apis(ctx: DeploymentContext) -> None:
    enable_apis(ctx.target.project_id)


def _provision_cluster(ctx: DeploymentContext) -> None:
    ensure_cluster(ctx.target)


def _connect_cluster(ctx: DeploymentContext) -> None:
    get_credentials(ctx.target)


def _apply_manifests(ctx: DeploymentContext) -> None:
    apply_manifests(ctx.app_cfg.app_dir)


def _wait_ready(ctx: DeploymentContext) -> None:
    wait_for_pods(ctx.readiness_cfg)


def _report_status(ctx: DeploymentContext) -> None:
    report_status(ctx.app_cfg.frontend_service)


def _destroy(ctx: DeploymentContext) -> None:
    destroy_cluster(ctx.target)


def _announce_setup_complete(ctx: DeploymentContext) -> None:
    console.print("[green]\u2705 Setup complete! Run with '-a deploy' to deploy Bank of Anthos[/green]")


SETUP_STEPS: tuple[Step, ...] = (_provision_project, _enable_apis, _provision_cluster)
DEPLOY_STEPS: tuple[Step, ...] = (_connect_cluster, _apply_manifests, _wait_ready, _report_status)

# Cluster provisioning already fetches credentials, so "all" skips the reconnect.
ACTION_STEPS: dict[Action, tuple[Step, ...]] = {
    Action.SETUP: (*SETUP_STEPS, _announce_setup_complete),
    Action.DEPLOY: DEPLOY_STEPS,
    Action.STATUS: (_connect_cluster, _report_status),
    Action.DESTROY: (_destroy,),
    Action.ALL: (*SETUP_STEPS, _apply_manifests, _wait_ready, _report_status),
}


def check_prerequisites() -> None:
    """Verify that every required CLI tool is available.

    Raises:
        MissingToolError: If any tool is missing.
    """
    console.print(Panel.fit("Checking prerequisites", style="bold blue"))
    require_commands(REQUIRED_TOOLS)
    console.print("[green]\u2705 All required tools are available[/green]")


def run(action: Action, ctx: DeploymentContext) -> None:
    """Run the steps of the requested action in order.

    Args:
        action: Requested action.
        ctx: Resolved configuration for this invocation.

    Raises:
        DeploymentError: If any step hits a precondition or command failure.
    """
    check_prerequisites()
    for step in ACTION_STEPS[action]:
        step(ctx)
