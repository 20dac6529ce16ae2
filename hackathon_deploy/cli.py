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

"""
cli.py - Deploy Bank of Anthos onto a GKE Autopilot cluster.

Actions:
    setup      Create or reuse the project, enable APIs, and create the Autopilot cluster
    deploy     Deploy Bank of Anthos to an existing cluster
    status     Check deployment status and print the frontend URL
    destroy    Delete the cluster and everything running on it
    all        Run setup + deploy + status

Environment Variables:
    All settings can be overridden via HACKATHON_* environment variables:
    - HACKATHON_PROJECT_ID (default: hackathon-gke-anthos-2025)
    - HACKATHON_REGION (default: us-central1)
    - HACKATHON_CLUSTER_NAME (default: bank-of-anthos-hackathon)
    - HACKATHON_APP_DIR (default: current directory)
    - HACKATHON_MAX_ATTEMPTS / HACKATHON_INTERVAL_SECONDS (readiness polling)
    - HACKATHON_EXTRA_PATH (directory prepended to PATH, e.g. a Cloud SDK bin dir)
    - HACKATHON_LOG_LEVEL (default: INFO)

Examples:
    # Complete deployment (uses default project ID)
    hackathon-deploy -a all

    # Complete deployment with custom project
    hackathon-deploy -p my-custom-project -a all

    # Just check status
    hackathon-deploy -a status

    # Clean up everything
    hackathon-deploy -a destroy
"""

from __future__ import annotations

import logging
import os
import sys

import typer
from rich.markup import escape

from hackathon_deploy import console
from hackathon_deploy.config import (
    ApplicationConfig,
    ReadinessConfig,
    apply_extra_path,
    display_config,
    load_settings,
    resolve_target,
)
from hackathon_deploy.constants import ENV_PREFIX, QUICK_DEPLOY_SDK_PATH
from hackathon_deploy.errors import DeploymentError
from hackathon_deploy.orchestrator import Action, DeploymentContext, run

app = typer.Typer(
    help="GKE hackathon deployment for Bank of Anthos.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _execute(
    action: Action,
    project_id: str | None,
    region: str | None,
    cluster_name: str | None,
) -> None:
    app_cfg = load_settings(ApplicationConfig)
    logging.basicConfig(
        level=app_cfg.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("sh").setLevel(logging.WARNING)
    apply_extra_path(app_cfg)

    target = resolve_target(project_id, region, cluster_name)
    readiness_cfg = load_settings(ReadinessConfig)
    display_config(action.value, target, app_cfg, readiness_cfg)

    try:
        run(action, DeploymentContext(target=target, app_cfg=app_cfg, readiness_cfg=readiness_cfg))
    except DeploymentError as e:
        console.print(f"[red]\u274c {escape(str(e))}[/red]")
        sys.exit(1)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def main(
    action: Action = typer.Option(
        ..., "-a", "--action", case_sensitive=False,
        help="Action to perform: setup | deploy | status | destroy | all"),
    project_id: str | None = typer.Option(
        None, "-p", "--project", help="Google Cloud project ID (default: hackathon-gke-anthos-2025)"),
    region: str | None = typer.Option(
        None, "-r", "--region", help="GKE region (default: us-central1)"),
    cluster_name: str | None = typer.Option(
        None, "-c", "--cluster", help="Cluster name (default: bank-of-anthos-hackathon)"),
) -> None:
    """GKE hackathon deployment for Bank of Anthos.

    Provisions the project and an Autopilot cluster, applies the Bank of Anthos
    manifests, waits for pods, and prints the frontend URL.
    """
    _execute(action, project_id, region, cluster_name)


def quick_deploy() -> None:
    """Run the complete deployment with every default.

    Looks for gcloud in the Homebrew Cloud SDK unless HACKATHON_EXTRA_PATH says otherwise.
    """
    os.environ.setdefault(f"{ENV_PREFIX}EXTRA_PATH", QUICK_DEPLOY_SDK_PATH)
    app(args=["-a", Action.ALL.value])


if __name__ == "__main__":
    app()
