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

"""Google Cloud project provisioning and API enablement."""

from __future__ import annotations

from rich.panel import Panel

from hackathon_deploy import console
from hackathon_deploy.constants import BILLING_CONSOLE_URL, FREE_TIER_URL, REQUIRED_APIS
from hackathon_deploy.errors import BillingAccountMissingError, CommandError
from hackathon_deploy.utils import ensure_exists, gcloud


# ============================================================================
# Project
# ============================================================================

def project_exists(project_id: str) -> bool:
    """Return whether the project can be described with the active credentials."""
    try:
        gcloud("projects", "describe", project_id)
    except CommandError:
        return False
    return True


def find_billing_account() -> str | None:
    """Return the first billing account visible to the caller, or None."""
    try:
        output = gcloud("billing", "accounts", "list", "--format=value(name)", "--limit=1")
    except CommandError:
        return None
    account = output.strip()
    return account or None


def _print_billing_guidance() -> None:
    console.print("[yellow]\u26a0\ufe0f  No billing account found![/yellow]")
    console.print()
    console.print("  \U0001f4a1 TIP: New to Google Cloud? Get $300 FREE credits:")
    console.print(f"     {FREE_TIER_URL}")
    console.print()
    console.print("  The hackathon prizes include GCP credits for winners,")
    console.print("  but you need your own account to participate.")
    console.print()
    console.print("  Please set up billing at:")
    console.print(f"  {BILLING_CONSOLE_URL}")


def create_project(project_id: str) -> None:
    """Create a project and link it to the first available billing account.

    The billing account is looked up before anything is created, so a missing
    account leaves no half-created project behind.

    Args:
        project_id: Identifier of the project to create.

    Raises:
        BillingAccountMissingError: If no billing account is available.
        CommandError: If project creation or billing linkage fails.
    """
    billing_account = find_billing_account()
    if billing_account is None:
        _print_billing_guidance()
        raise BillingAccountMissingError("Billing account is required to create GKE clusters")

    gcloud("projects", "create", project_id, f"--name={project_id}")
    console.print("[yellow]\u2139\ufe0f  Linking billing account...[/yellow]")
    gcloud("billing", "projects", "link", project_id, f"--billing-account={billing_account}")


def set_active_project(project_id: str) -> None:
    """Make *project_id* the default project of the gcloud configuration."""
    gcloud("config", "set", "project", project_id)
    console.print(f"[green]\u2705 Active project set to '{project_id}'[/green]")


def ensure_project(project_id: str) -> bool:
    """Ensure the project exists and is active.

    Args:
        project_id: Google Cloud project identifier.

    Returns:
        True if the project was created by this call.
    """
    console.print(Panel.fit(f"Setting up Google Cloud project '{project_id}'", style="bold blue"))
    created = ensure_exists(
        f"Project '{project_id}'",
        lambda: project_exists(project_id),
        lambda: create_project(project_id),
    )
    set_active_project(project_id)
    return created


# ============================================================================
# APIs
# ============================================================================

def enable_apis(project_id: str, apis: tuple[str, ...] = REQUIRED_APIS) -> None:
    """Enable the required service APIs on the project.

    ``gcloud services enable`` is a no-op for APIs that are already enabled.

    Args:
        project_id: Google Cloud project identifier.
        apis: Service API names to enable.
    """
    if not apis:
        return
    console.print("[yellow]\u2139\ufe0f  Enabling required APIs...[/yellow]")
    for api in apis:
        console.print(f"  {api}")
    gcloud("services", "enable", *apis, f"--project={project_id}")
    console.print("[green]\u2705 APIs enabled[/green]")
