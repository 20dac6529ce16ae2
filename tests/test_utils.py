from __future__ import annotations

from types import SimpleNamespace

import pytest

from hackathon_deploy import utils
from hackathon_deploy.errors import CommandError, MissingToolError


class _FakeErrorReturnCode(Exception):
    def __init__(self, exit_code: int, stderr: bytes) -> None:
        super().__init__(stderr)
        self.exit_code = exit_code
        self.stderr = stderr


class _FakeCommandNotFound(Exception):
    pass


def _fake_sh(installed: set[str], behaviour=None) -> SimpleNamespace:
    def which(cmd: str) -> str:
        if cmd not in installed:
            raise _FakeErrorReturnCode(1, b"")
        return f"/usr/bin/{cmd}"

    def command(tool: str):
        if tool not in installed:
            raise _FakeCommandNotFound(tool)
        return behaviour

    return SimpleNamespace(
        which=which,
        Command=command,
        ErrorReturnCode=_FakeErrorReturnCode,
        CommandNotFound=_FakeCommandNotFound,
    )


def test_require_commands_reports_every_missing_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(utils, "sh", _fake_sh(installed={"helm"}))

    with pytest.raises(MissingToolError) as exc_info:
        utils.require_commands(["gcloud", "helm", "kubectl"])

    assert exc_info.value.tools == ["gcloud", "kubectl"]
    assert "Missing required tools: gcloud, kubectl" in str(exc_info.value)


def test_require_commands_passes_when_all_present(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(utils, "sh", _fake_sh(installed={"gcloud", "kubectl"}))
    utils.require_commands(["gcloud", "kubectl"])


def test_gcloud_returns_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, ...]] = []

    def run(*args: str) -> str:
        seen.append(args)
        return "billingAccounts/0000-1111\n"

    monkeypatch.setattr(utils, "sh", _fake_sh(installed={"gcloud"}, behaviour=run))

    assert utils.gcloud("billing", "accounts", "list") == "billingAccounts/0000-1111\n"
    assert seen == [("billing", "accounts", "list")]


def test_non_zero_exit_becomes_command_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(*args: str) -> str:
        raise _FakeErrorReturnCode(1, b"ERROR: (gcloud.projects.describe) NOT_FOUND\n")

    monkeypatch.setattr(utils, "sh", _fake_sh(installed={"gcloud"}, behaviour=run))

    with pytest.raises(CommandError) as exc_info:
        utils.gcloud("projects", "describe", "nope-project")

    err = exc_info.value
    assert err.tool == "gcloud"
    assert err.command_args == ("projects", "describe", "nope-project")
    assert err.exit_code == 1
    assert "NOT_FOUND" in str(err)


def test_missing_executable_becomes_missing_tool_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(utils, "sh", _fake_sh(installed=set()))

    with pytest.raises(MissingToolError):
        utils.kubectl("get", "pods")


def test_ensure_exists_skips_create_when_present() -> None:
    created: list[bool] = []

    result = utils.ensure_exists("Widget", lambda: True, lambda: created.append(True))

    assert result is False
    assert created == []


def test_ensure_exists_creates_when_absent() -> None:
    created: list[bool] = []

    result = utils.ensure_exists("Widget", lambda: False, lambda: created.append(True))

    assert result is True
    assert created == [True]
