from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from hackathon_deploy import cluster, orchestrator, project, workloads
from hackathon_deploy.config import ApplicationConfig, DeploymentTarget, ReadinessConfig
from hackathon_deploy.errors import CommandError
from hackathon_deploy.orchestrator import DeploymentContext


class FakeCli:
    """Records gcloud/kubectl invocations and answers them from registered rules.

    Unmatched commands succeed with empty output. A rule's output may be a list,
    in which case successive calls consume it and the last entry repeats.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._rules: list[tuple[tuple[str, ...], list[str], int]] = []

    def on(self, *prefix: str, output: str | list[str] = "", exit_code: int = 0) -> None:
        outputs = list(output) if isinstance(output, list) else [output]
        self._rules.append((prefix, outputs, exit_code))

    def fail(self, *prefix: str, exit_code: int = 1) -> None:
        self.on(*prefix, exit_code=exit_code)

    def _dispatch(self, tool: str, *args: str) -> str:
        cmd = (tool, *args)
        self.calls.append(cmd)
        for prefix, outputs, exit_code in reversed(self._rules):
            if cmd[: len(prefix)] != prefix:
                continue
            if exit_code:
                raise CommandError(tool, args, exit_code, "ERROR: (fake) failure")
            return outputs.pop(0) if len(outputs) > 1 else outputs[0]
        return ""

    def gcloud(self, *args: str) -> str:
        return self._dispatch("gcloud", *args)

    def kubectl(self, *args: str) -> str:
        return self._dispatch("kubectl", *args)

    def calls_matching(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]

    def called(self, *prefix: str) -> bool:
        return bool(self.calls_matching(*prefix))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("HACKATHON_"):
            monkeypatch.delenv(key)


@pytest.fixture
def fake_cli(monkeypatch: pytest.MonkeyPatch) -> FakeCli:
    cli = FakeCli()
    for module in (project, cluster, workloads):
        monkeypatch.setattr(module, "gcloud", cli.gcloud, raising=False)
        monkeypatch.setattr(module, "kubectl", cli.kubectl, raising=False)
    monkeypatch.setattr(orchestrator, "require_commands", lambda cmds: None)
    return cli


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    (tmp_path / "extras" / "jwt").mkdir(parents=True)
    (tmp_path / "extras" / "jwt" / "jwt-secret.yaml").write_text("kind: Secret\n")
    (tmp_path / "kubernetes-manifests").mkdir()
    (tmp_path / "kubernetes-manifests" / "frontend.yaml").write_text("kind: Deployment\n")
    return tmp_path


@pytest.fixture
def ctx(app_dir: Path) -> Iterator[DeploymentContext]:
    yield DeploymentContext(
        target=DeploymentTarget(),
        app_cfg=ApplicationConfig(app_dir=app_dir),
        readiness_cfg=ReadinessConfig(max_attempts=60, interval_seconds=0),
    )
