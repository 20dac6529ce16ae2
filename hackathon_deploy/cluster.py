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

"""GKE Autopilot cluster lifecycle and credentials."""

from __future__ import annotations

from rich.panel import Panel

from hackathon_deploy import console, logger
from hackathon_deploy.config import DeploymentTarget
from hackathon_deploy.errors import ClusterNotFoundError, CommandError
from hackathon_deploy.utils import ensure_exists, gcloud


def _location_args(target: DeploymentTarget) -> tuple[str, str]:
    return f"--region={target.region}", f"--project={target.project_id}"


def cluster_exists(target: DeploymentTarget) -> bool:
    """Return whether the cluster is currently known to GKE."""
    try:
        gcloud("container", "clusters", "describe", target.cluster_name, *_location_args(target))
    except CommandError:
        return False
    return True


def create_cluster(target: DeploymentTarget) -> None:
    """Create an Autopilot cluster.

    Args:
        target: Deployment target naming the cluster, region, and project.
    """
    console.print("[yellow]   This usually takes several minutes...[/yellow]")
    gcloud("container", "clusters", "create-auto", target.cluster_name, *_location_args(target))


def get_credentials(target: DeploymentTarget) -> None:
    """Write kubeconfig credentials for the cluster.

    Args:
        target: Deployment target naming the cluster, region, and project.

    Raises:
        ClusterNotFoundError: If gcloud cannot fetch credentials for the cluster.
    """
    console.print("[yellow]\u2139\ufe0f  Getting cluster credentials...[/yellow]")
    try:
        gcloud("container", "clusters", "get-credentials", target.cluster_name, *_location_args(target))
    except CommandError as err:
        logger.debug("get-credentials failed: %s", err)
        raise ClusterNotFoundError("Cluster not found. Run with '-a setup' first") from err
    console.print("[green]\u2705 Connected to cluster[/green]")


def ensure_cluster(target: DeploymentTarget) -> bool:
    """Ensure the Autopilot cluster exists, then fetch its credentials.

    Args:
        target: Deployment target naming the cluster, region, and project.

    Returns:
        True if the cluster was created by this call.
    """
    console.print(Panel.fit(f"Creating GKE Autopilot cluster '{target.cluster_name}'", style="bold blue"))
    created = ensure_exists(
        f"Cluster '{target.cluster_name}'",
        lambda: cluster_exists(target),
        lambda: create_cluster(target),
    )
    get_credentials(target)
    return created


# ============================================================================
# Teardown
# ============================================================================

def confirm_destroy(target: DeploymentTarget) -> bool:
    """Ask the user to confirm deletion. Only ``y`` or ``Y`` counts as yes."""
    try:
        reply = console.input(
            f"Are you sure you want to delete cluster '{target.cluster_name}' and all resources? (y/N) "
        )
    except EOFError:
        return False
    return reply.strip() in ("y", "Y")


def delete_cluster(target: DeploymentTarget) -> None:
    """Delete the Autopilot cluster.

    Args:
        target: Deployment target naming the cluster, region, and project.
    """
    console.print(f"[yellow]\u2139\ufe0f  Deleting cluster '{target.cluster_name}'...[/yellow]")
    gcloud("container", "clusters", "delete", target.cluster_name, *_location_args(target), "--quiet")
    console.print("[green]\u2705 All resources destroyed[/green]")


def destroy_cluster(target: DeploymentTarget) -> bool:
    """Delete the cluster after interactive confirmation.

    Args:
        target: Deployment target naming the cluster, region, and project.

    Returns:
        True if the cluster was deleted, False if the user declined.
    """
    console.print(Panel.fit("Destroying all resources", style="bold blue"))
    if not confirm_destroy(target):
        console.print("[yellow]\u26a0\ufe0f  Destruction cancelled[/yellow]")
        return False
    delete_cluster(target)
    return True
