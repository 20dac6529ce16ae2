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

"""Configuration classes, target resolution, and config display."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TypeVar

import typer
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from hackathon_deploy import console, logger
from hackathon_deploy.constants import (
    CLUSTER_NAME_PATTERN,
    DEFAULT_CLUSTER_NAME,
    DEFAULT_FRONTEND_SERVICE,
    DEFAULT_PROJECT_ID,
    DEFAULT_REGION,
    ENV_PREFIX,
    PROJECT_ID_PATTERN,
    READINESS_MAX_ATTEMPTS,
    READINESS_POLL_INTERVAL_SECONDS,
    REGION_PATTERN,
)


# ============================================================================
# Configuration classes
# ============================================================================

class DeploymentTarget(BaseSettings):
    """Where the application is deployed, auto-loaded from HACKATHON_* env vars.

    Resolved once per invocation and immutable afterwards.

    Attributes:
        project_id: Google Cloud project identifier.
        region: GKE region hosting the Autopilot cluster.
        cluster_name: Name of the Autopilot cluster.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore", frozen=True)

    project_id: str = Field(default=DEFAULT_PROJECT_ID, pattern=PROJECT_ID_PATTERN)
    region: str = Field(default=DEFAULT_REGION, pattern=REGION_PATTERN)
    cluster_name: str = Field(default=DEFAULT_CLUSTER_NAME, pattern=CLUSTER_NAME_PATTERN)


class ReadinessConfig(BaseSettings):
    """Pod readiness polling budget, auto-loaded from HACKATHON_* env vars.

    Attributes:
        max_attempts: Number of status queries before giving up.
        interval_seconds: Fixed delay between two queries.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    max_attempts: int = Field(default=READINESS_MAX_ATTEMPTS, ge=1)
    interval_seconds: float = Field(default=READINESS_POLL_INTERVAL_SECONDS, ge=0)


class ApplicationConfig(BaseSettings):
    """Application checkout and runtime settings, auto-loaded from HACKATHON_* env vars.

    Attributes:
        app_dir: Directory holding the application manifests.
        frontend_service: Service whose load balancer address is reported.
        extra_path: Directory prepended to PATH before tools are looked up.
        log_level: Root logging level name.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    app_dir: Path = Field(default_factory=Path.cwd)
    frontend_service: str = DEFAULT_FRONTEND_SERVICE
    extra_path: str | None = None
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


# ============================================================================
# Config resolution
# ============================================================================

SettingsT = TypeVar("SettingsT", bound=BaseSettings)


def load_settings(settings_cls: type[SettingsT], **overrides: object) -> SettingsT:
    """Build a settings object, turning validation failures into a usage error.

    Args:
        settings_cls: Settings class to instantiate from HACKATHON_* env vars.
        **overrides: Explicit values that take priority over the environment.

    Returns:
        The validated settings object.

    Raises:
        typer.BadParameter: If a CLI value or HACKATHON_* env var is malformed.
    """
    try:
        return settings_cls(**overrides)
    except ValidationError as err:
        fields = ", ".join(str(e["loc"][0]) for e in err.errors() if e["loc"])
        raise typer.BadParameter(f"Invalid {settings_cls.__name__} ({fields}): {err}") from err


def resolve_target(
    project_id: str | None,
    region: str | None,
    cluster_name: str | None,
) -> DeploymentTarget:
    """Merge CLI overrides, environment variables, and defaults into a target.

    Resolution priority: CLI arguments > HACKATHON_* environment variables > defaults.

    Args:
        project_id: CLI override for the project, or None.
        region: CLI override for the region, or None.
        cluster_name: CLI override for the cluster name, or None.

    Returns:
        The validated, frozen deployment target.

    Raises:
        typer.BadParameter: If a resolved value is malformed.
    """
    overrides = {
        key: value
        for key, value in (("project_id", project_id), ("region", region), ("cluster_name", cluster_name))
        if value is not None
    }
    target = load_settings(DeploymentTarget, **overrides)

    env_key = f"{ENV_PREFIX}PROJECT_ID"
    if project_id is None and not any(key.upper() == env_key for key in os.environ):
        console.print(f"[green]\u2713 Using default project ID: {target.project_id}[/green]")
    return target


def apply_extra_path(app_cfg: ApplicationConfig) -> None:
    """Prepend the configured directory to PATH so tools installed there are found.

    Args:
        app_cfg: Application configuration carrying the optional extra path.
    """
    if not app_cfg.extra_path:
        return
    os.environ["PATH"] = os.pathsep.join([app_cfg.extra_path, os.environ.get("PATH", "")])
    logger.debug("Prepended %s to PATH", app_cfg.extra_path)


# ============================================================================
# Display
# ============================================================================

def display_config(
    action: str,
    target: DeploymentTarget,
    app_cfg: ApplicationConfig,
    readiness_cfg: ReadinessConfig,
) -> None:
    """Print the configuration relevant to the requested action.

    Args:
        action: Name of the requested action.
        target: Resolved deployment target.
        app_cfg: Application configuration.
        readiness_cfg: Readiness polling configuration.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print(f"  action          : {action}")
    console.print(f"  project_id      : {target.project_id}")
    console.print(f"  region          : {target.region}")
    console.print(f"  cluster_name    : {target.cluster_name}")

    if action in ("deploy", "all"):
        console.print("[yellow]Application:[/yellow]")
        console.print(f"  app_dir         : {app_cfg.app_dir}")
        console.print(f"  max_attempts    : {readiness_cfg.max_attempts}")
        console.print(f"  interval_seconds: {readiness_cfg.interval_seconds}")
