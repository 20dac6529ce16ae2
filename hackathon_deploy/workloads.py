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

"""Manifest application, pod readiness polling, and status reporting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel
from tenacity import retry, retry_if_result, stop_after_attempt, wait_fixed

from hackathon_deploy import console, logger
from hackathon_deploy.config import ReadinessConfig
from hackathon_deploy.constants import (
    APP_NAME,
    DEFAULT_CREDENTIALS,
    DEFAULT_FRONTEND_SERVICE,
    FRONTEND_IP_JSONPATH,
    MANIFESTS,
    NEXT_STEPS,
    POD_STATUS_COLUMN,
    TERMINAL_POD_STATES,
)
from hackathon_deploy.errors import CommandError, ManifestNotFoundError
from hackathon_deploy.utils import kubectl


# ============================================================================
# Manifests
# ============================================================================

def resolve_manifests(app_dir: Path, manifests: tuple[str, ...] = MANIFESTS) -> list[Path]:
    """Resolve manifest paths against the application directory.

    Args:
        app_dir: Root of the application checkout.
        manifests: Manifest files or directories relative to *app_dir*.

    Returns:
        Absolute manifest paths, in apply order.

    Raises:
        ManifestNotFoundError: If any manifest path does not exist.
    """
    paths = [app_dir / rel for rel in manifests]
    missing = [str(p) for p in paths if not p.exists()]
    if missing:
        raise ManifestNotFoundError(f"Manifests not found: {', '.join(missing)}")
    return paths


def apply_manifests(app_dir: Path, manifests: tuple[str, ...] = MANIFESTS) -> None:
    """Apply the application manifests verbatim, in order.

    Args:
        app_dir: Root of the application checkout.
        manifests: Manifest files or directories relative to *app_dir*.
    """
    console.print(Panel.fit(f"Deploying {APP_NAME}", style="bold blue"))
    for path in resolve_manifests(app_dir, manifests):
        console.print(f"[yellow]\u2139\ufe0f  Applying {path.relative_to(app_dir)}...[/yellow]")
        kubectl("apply", "-f", str(path))
    console.print(f"[green]\u2705 {APP_NAME} deployment initiated[/green]")


# ============================================================================
# Readiness
# ============================================================================

class ReadinessState(str, Enum):
    """States of the pod readiness poller."""

    POLLING = "polling"
    READY = "ready"
    TIMED_OUT = "timed-out"


@dataclass(frozen=True)
class PodSummary:
    """Pod counts from a single status query.

    Attributes:
        total: Number of pods listed.
        not_ready: Pods whose status is neither Running nor Completed.
    """

    total: int
    not_ready: int

    @property
    def is_ready(self) -> bool:
        # An empty listing means nothing has been scheduled yet.
        return self.total > 0 and self.not_ready == 0


def parse_pod_listing(output: str) -> PodSummary:
    """Count pods in ``kubectl get pods --no-headers`` output.

    Args:
        output: Raw listing, one pod per line (NAME READY STATUS RESTARTS AGE).

    Returns:
        Totals of listed and not-yet-ready pods.
    """
    total = 0
    not_ready = 0
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        total += 1
        status = fields[POD_STATUS_COLUMN] if len(fields) > POD_STATUS_COLUMN else ""
        if status not in TERMINAL_POD_STATES:
            not_ready += 1
    return PodSummary(total=total, not_ready=not_ready)


def query_pods() -> PodSummary:
    """Query the cluster for pod states. A failed query counts as no pods."""
    try:
        output = kubectl("get", "pods", "--no-headers")
    except CommandError as err:
        logger.debug("Pod query failed: %s", err)
        return PodSummary(total=0, not_ready=0)
    return parse_pod_listing(output)


def wait_for_pods(readiness_cfg: ReadinessConfig) -> ReadinessState:
    """Poll pod states at a fixed interval until all are ready or the budget runs out.

    Timing out is not an error: a warning is printed and the caller carries on.

    Args:
        readiness_cfg: Attempt budget and polling interval.

    Returns:
        ``ReadinessState.READY`` or ``ReadinessState.TIMED_OUT``.
    """
    console.print(Panel.fit("Waiting for pods to be ready", style="bold blue"))

    @retry(
        stop=stop_after_attempt(readiness_cfg.max_attempts),
        wait=wait_fixed(readiness_cfg.interval_seconds),
        retry=retry_if_result(lambda summary: not summary.is_ready),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
    )
    def _poll() -> PodSummary:
        summary = query_pods()
        logger.debug("Pods: total=%d, not_ready=%d", summary.total, summary.not_ready)
        return summary

    with console.status(f"[cyan]Polling pod status (up to {readiness_cfg.max_attempts} attempts)..."):
        summary = _poll()

    if summary.is_ready:
        console.print(f"[green]\u2705 All {summary.total} pods are ready![/green]")
        return ReadinessState.READY

    console.print("[yellow]\u26a0\ufe0f  Some pods may still be starting. Check status with: kubectl get pods[/yellow]")
    return ReadinessState.TIMED_OUT


# ============================================================================
# Status
# ============================================================================

def get_external_ip(service: str = DEFAULT_FRONTEND_SERVICE) -> str | None:
    """Return the load balancer IP assigned to *service*, or None while pending."""
    try:
        ip = kubectl("get", "service", service, "-o", FRONTEND_IP_JSONPATH).strip()
    except CommandError:
        return None
    return ip or None


def _print_listing(title: str, *args: str) -> None:
    console.print(f"\n[blue]{title}:[/blue]")
    try:
        console.print(kubectl(*args).rstrip(), markup=False, highlight=False)
    except CommandError as err:
        console.print(f"[yellow]\u26a0\ufe0f  {escape(str(err))}[/yellow]")


def report_status(service: str = DEFAULT_FRONTEND_SERVICE) -> str | None:
    """Print pods, services, and the application URL if one is assigned.

    Args:
        service: Service exposing the application frontend.

    Returns:
        The external IP of the frontend, or None while it is pending.
    """
    console.print(Panel.fit("Deployment Status", style="bold blue"))
    _print_listing("Pods", "get", "pods")
    _print_listing("Services", "get", "services")

    ip = get_external_ip(service)
    if ip:
        lines = [f"\U0001f310 Frontend URL: [blue]http://{ip}[/blue]"]
        if DEFAULT_CREDENTIALS:
            lines.append(
                "\U0001f4ca Default credentials: "
                f"username: [yellow]{DEFAULT_CREDENTIALS.get('username', '')}[/yellow] / "
                f"password: [yellow]{DEFAULT_CREDENTIALS.get('password', '')}[/yellow]"
            )
        console.print(Panel.fit("\n".join(lines), title=f"\u2728 {APP_NAME} is ready!", style="green"))
    else:
        console.print("[yellow]\u26a0\ufe0f  Frontend LoadBalancer IP pending. Try again in a few minutes.[/yellow]")

    if NEXT_STEPS:
        console.print("\n[blue]Next steps for the hackathon:[/blue]")
        for idx, step in enumerate(NEXT_STEPS, start=1):
            console.print(f"{idx}. {step}", markup=False)
    return ip
