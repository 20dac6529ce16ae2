from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hackathon_deploy import cli
from hackathon_deploy.config import DeploymentTarget
from hackathon_deploy.constants import QUICK_DEPLOY_SDK_PATH
from hackathon_deploy.orchestrator import Action, DeploymentContext

runner = CliRunner()


@pytest.fixture
def recorded_runs(monkeypatch: pytest.MonkeyPatch) -> list[tuple[Action, DeploymentContext]]:
    runs: list[tuple[Action, DeploymentContext]] = []
    monkeypatch.setattr(cli, "run", lambda action, ctx: runs.append((action, ctx)))
    return runs


def test_missing_action_prints_usage_and_fails(recorded_runs) -> None:
    result = runner.invoke(cli.app, [])

    assert result.exit_code != 0
    assert "Usage" in result.output
    assert recorded_runs == []


def test_help_exits_successfully(recorded_runs) -> None:
    for flag in ("-h", "--help"):
        result = runner.invoke(cli.app, [flag])
        assert result.exit_code == 0
        assert "-a" in result.output
    assert recorded_runs == []


def test_unknown_action_is_rejected(recorded_runs) -> None:
    result = runner.invoke(cli.app, ["-a", "explode"])

    assert result.exit_code == 2
    assert recorded_runs == []


def test_unknown_flag_is_rejected(recorded_runs) -> None:
    result = runner.invoke(cli.app, ["-a", "status", "--bogus"])

    assert result.exit_code == 2
    assert recorded_runs == []


def test_defaults_are_used_when_flags_are_omitted(recorded_runs) -> None:
    result = runner.invoke(cli.app, ["-a", "status"])

    assert result.exit_code == 0, result.output
    action, ctx = recorded_runs[0]
    assert action is Action.STATUS
    assert ctx.target == DeploymentTarget(
        project_id="hackathon-gke-anthos-2025",
        region="us-central1",
        cluster_name="bank-of-anthos-hackathon",
    )


def test_flags_override_target(recorded_runs, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HACKATHON_APP_DIR", str(tmp_path))

    result = runner.invoke(
        cli.app, ["-a", "deploy", "-p", "my-custom-project", "-r", "europe-west1", "-c", "boa-dev"]
    )

    assert result.exit_code == 0, result.output
    _, ctx = recorded_runs[0]
    assert (ctx.target.project_id, ctx.target.region, ctx.target.cluster_name) == (
        "my-custom-project", "europe-west1", "boa-dev",
    )
    assert ctx.app_cfg.app_dir == tmp_path


def test_malformed_project_is_a_usage_error(recorded_runs) -> None:
    result = runner.invoke(cli.app, ["-a", "setup", "-p", "UPPER_case"])

    assert result.exit_code == 2
    assert recorded_runs == []


def test_missing_cluster_exits_non_zero(fake_cli) -> None:
    fake_cli.fail("gcloud", "container", "clusters", "get-credentials")

    result = runner.invoke(cli.app, ["-a", "status"])

    assert result.exit_code == 1
    assert "Cluster not found" in result.output
    assert not fake_cli.called("kubectl")


def test_declined_destroy_exits_zero(fake_cli) -> None:
    result = runner.invoke(cli.app, ["-a", "destroy"], input="n\n")

    assert result.exit_code == 0, result.output
    assert not fake_cli.called("gcloud", "container", "clusters", "delete")


def test_confirmed_destroy_deletes(fake_cli) -> None:
    result = runner.invoke(cli.app, ["-a", "destroy", "-c", "boa-dev"], input="y\n")

    assert result.exit_code == 0, result.output
    assert fake_cli.called("gcloud", "container", "clusters", "delete", "boa-dev")


def test_malformed_env_setting_is_a_usage_error(recorded_runs, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HACKATHON_MAX_ATTEMPTS", "abc")

    result = runner.invoke(cli.app, ["-a", "status"])

    assert result.exit_code == 2
    assert "max_attempts" in result.output
    assert "Traceback" not in result.output
    assert recorded_runs == []


def test_lowercase_log_level_is_accepted(recorded_runs, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HACKATHON_LOG_LEVEL", "debug")

    result = runner.invoke(cli.app, ["-a", "status"])

    assert result.exit_code == 0, result.output
    _, ctx = recorded_runs[0]
    assert ctx.app_cfg.log_level == "DEBUG"


def test_sh_command_logging_is_quieted(recorded_runs) -> None:
    result = runner.invoke(cli.app, ["-a", "status"])

    assert result.exit_code == 0, result.output
    assert logging.getLogger("sh").level == logging.WARNING


@pytest.fixture
def quick_deploy_runs(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    # Register HACKATHON_EXTRA_PATH with monkeypatch so quick_deploy's default is undone.
    monkeypatch.setenv("HACKATHON_EXTRA_PATH", "")
    monkeypatch.delenv("HACKATHON_EXTRA_PATH")
    seen: list[list[str]] = []
    monkeypatch.setattr(cli, "app", lambda args: seen.append(args))
    return seen


def test_quick_deploy_runs_all_with_defaults(quick_deploy_runs) -> None:
    cli.quick_deploy()

    assert quick_deploy_runs == [["-a", "all"]]
    assert os.environ["HACKATHON_EXTRA_PATH"] == QUICK_DEPLOY_SDK_PATH


def test_quick_deploy_keeps_explicit_extra_path(quick_deploy_runs, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HACKATHON_EXTRA_PATH", "/usr/lib/google-cloud-sdk/bin")

    cli.quick_deploy()

    assert quick_deploy_runs == [["-a", "all"]]
    assert os.environ["HACKATHON_EXTRA_PATH"] == "/usr/lib/google-cloud-sdk/bin"
