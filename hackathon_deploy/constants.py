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

"""Constants, deployment data loading, and deployment_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


DEPLOYMENT_FILE = Path(__file__).resolve().parent / "deployment.yaml"


def load_deployment(path: Path = DEPLOYMENT_FILE) -> dict:
    """Read the bundled Bank of Anthos inputs (tools, APIs, manifests, credentials)."""
    return yaml.safe_load(path.read_text()) or {}


DEPLOYMENT = load_deployment()


def deployment_value(*keys: str, default: Any = None) -> Any:
    """Look up ``DEPLOYMENT[k1][k2]...``, falling back to *default* on any gap.

    ``deployment_value("application", "frontend_service")`` returns ``"frontend"``.
    """
    node: Any = DEPLOYMENT
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
        if node is None:
            return default
    return node


# -- Deployment target defaults --
DEFAULT_PROJECT_ID = "hackathon-gke-anthos-2025"
DEFAULT_REGION = "us-central1"
DEFAULT_CLUSTER_NAME = "bank-of-anthos-hackathon"

# -- Validation patterns --
PROJECT_ID_PATTERN = r"^[a-z][-a-z0-9]{4,28}[a-z0-9]$"
REGION_PATTERN = r"^[a-z]+-[a-z]+\d+$"
CLUSTER_NAME_PATTERN = r"^[a-z]([-a-z0-9]{0,38}[a-z0-9])?$"

# -- Readiness polling --
READINESS_MAX_ATTEMPTS = 60
READINESS_POLL_INTERVAL_SECONDS = 5
TERMINAL_POD_STATES = frozenset({"Running", "Completed"})
POD_STATUS_COLUMN = 2

# -- Application --
APP_NAME: str = deployment_value("application", "name", default="Bank of Anthos")
DEFAULT_FRONTEND_SERVICE: str = deployment_value("application", "frontend_service", default="frontend")
DEFAULT_CREDENTIALS: dict[str, str] = deployment_value("application", "default_credentials", default={})
REQUIRED_TOOLS: tuple[str, ...] = tuple(deployment_value("required_tools", default=["gcloud", "kubectl"]))
REQUIRED_APIS: tuple[str, ...] = tuple(deployment_value("required_apis", default=[]))
MANIFESTS: tuple[str, ...] = tuple(deployment_value("manifests", default=[]))
NEXT_STEPS: tuple[str, ...] = tuple(deployment_value("next_steps", default=[]))
FRONTEND_IP_JSONPATH = "jsonpath={.status.loadBalancer.ingress[0].ip}"

# -- Billing remediation links --
FREE_TIER_URL = "https://cloud.google.com/free"
BILLING_CONSOLE_URL = "https://console.cloud.google.com/billing"

# -- Environment --
ENV_PREFIX = "HACKATHON_"
QUICK_DEPLOY_SDK_PATH = "/opt/homebrew/share/google-cloud-sdk/bin"
