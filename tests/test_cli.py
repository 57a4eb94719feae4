"""Tests for the Typer CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from forge_adapter import cli
from forge_adapter.rest_client import ForgeAuthError
from typer.testing import CliRunner

runner = CliRunner()


def patch_client(monkeypatch: pytest.MonkeyPatch, handler) -> None:  # type: ignore[no-untyped-def]
    """Replace the authenticated client factory with a mock-transport client."""

    def _build(timeout_seconds: int = 20) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="https://api.github.com",
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "build_forge_client", _build)


@pytest.mark.unit
def test_issue_command_prints_graphql_json(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/acme/widgets/issues/3":
            return httpx.Response(
                status_code=200, json={"title": "Bug", "state": "open", "user": {"login": "a"}}
            )
        if request.url.path == "/repos/acme/widgets/issues/3/comments":
            return httpx.Response(status_code=200, json=[])
        raise AssertionError("Unexpected endpoint")

    patch_client(monkeypatch, handler)

    result = runner.invoke(
        cli.app, ["issue", "--owner", "acme", "--repo", "widgets", "--number", "3"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["repository"]["issue"]["title"] == "Bug"
    assert payload["repository"]["issue"]["state"] == "OPEN"


@pytest.mark.unit
def test_issue_command_writes_output_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/comments"):
            return httpx.Response(status_code=200, json=[])
        return httpx.Response(status_code=200, json={"title": "Bug", "state": "closed"})

    patch_client(monkeypatch, handler)
    output_path = tmp_path / "out" / "issue.json"

    result = runner.invoke(
        cli.app,
        [
            "issue",
            "--owner",
            "acme",
            "--repo",
            "widgets",
            "--number",
            "3",
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0
    assert str(output_path) in result.output
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["repository"]["issue"]["state"] == "CLOSED"


@pytest.mark.unit
def test_pull_request_command_reports_api_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=404)

    patch_client(monkeypatch, handler)

    result = runner.invoke(
        cli.app, ["pull-request", "--owner", "acme", "--repo", "widgets", "--number", "9"]
    )

    assert result.exit_code == 1
    assert "Fetch failed: status=404" in result.output


@pytest.mark.unit
def test_user_command_prints_null_name_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=500)

    patch_client(monkeypatch, handler)

    result = runner.invoke(cli.app, ["user", "--login", "ghost"])

    assert result.exit_code == 0
    assert '"name": null' in result.output


@pytest.mark.unit
def test_command_fails_when_token_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise_missing_token(timeout_seconds: int = 20) -> httpx.AsyncClient:
        raise ForgeAuthError("Missing API token.")

    monkeypatch.setattr(cli, "build_forge_client", _raise_missing_token)

    result = runner.invoke(cli.app, ["user", "--login", "octocat"])

    assert result.exit_code == 1
    assert "Fetch failed: Missing API token." in result.output


@pytest.mark.unit
def test_working_comment_command_uses_gitea_paths(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_SERVER_URL", "https://git.example.com")
    monkeypatch.setenv("USE_GITEA_API", "true")

    result = runner.invoke(
        cli.app,
        [
            "working-comment",
            "--owner",
            "acme",
            "--repo",
            "widgets",
            "--run-id",
            "77",
            "--branch",
            "main",
        ],
    )

    assert result.exit_code == 0
    assert "[View job run](https://git.example.com/acme/widgets/actions/runs/77)" in result.output
    assert "[View branch](https://git.example.com/acme/widgets/src/branch/main)" in result.output
