"""Unit tests for markdown link and comment-body builders."""

from __future__ import annotations

import pytest
from forge_adapter.comments import (
    SPINNER_HTML,
    WORKING_PLACEHOLDER,
    branch_link,
    branch_path_segment,
    branch_url,
    build_working_comment_body,
    job_run_link,
)
from forge_adapter.config import PlatformConfig


def make_config(server_base_url: str, *, use_alternate_api: bool = False) -> PlatformConfig:
    """Build a config pointing at the given web server."""
    return PlatformConfig(
        api_base_url=f"{server_base_url}/api/v1",
        server_base_url=server_base_url,
        use_alternate_api=use_alternate_api,
    )


@pytest.mark.unit
def test_job_run_link_points_at_actions_run() -> None:
    config = make_config("https://git.example.com", use_alternate_api=True)

    link = job_run_link("acme", "widgets", "12345", config=config)

    assert link == "[View job run](https://git.example.com/acme/widgets/actions/runs/12345)"


@pytest.mark.unit
@pytest.mark.parametrize("use_alternate_api", [True, False])
def test_branch_path_segment_follows_server_url_not_flag(use_alternate_api: bool) -> None:
    github = make_config("https://github.com", use_alternate_api=use_alternate_api)
    gitea = make_config("https://git.example.com", use_alternate_api=use_alternate_api)

    assert branch_path_segment(config=github) == "tree"
    assert branch_path_segment(config=gitea) == "src/branch"


@pytest.mark.unit
def test_branch_url_on_gitea_host() -> None:
    config = make_config("https://git.example.com")

    assert (
        branch_url("acme", "widgets", "main", config=config)
        == "https://git.example.com/acme/widgets/src/branch/main"
    )


@pytest.mark.unit
def test_branch_link_uses_platform_url_when_alternate_api_enabled() -> None:
    config = make_config("https://git.example.com", use_alternate_api=True)

    link = branch_link("acme", "widgets", "feature/x", config=config)

    assert link == "\n[View branch](https://git.example.com/acme/widgets/src/branch/feature/x)"


@pytest.mark.unit
def test_branch_link_uses_tree_path_without_alternate_api() -> None:
    config = make_config("https://git.example.com", use_alternate_api=False)

    link = branch_link("acme", "widgets", "main", config=config)

    assert link == "\n[View branch](https://git.example.com/acme/widgets/tree/main)"


@pytest.mark.unit
def test_formatters_default_to_process_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_SERVER_URL", raising=False)
    monkeypatch.delenv("GITEA_SERVER_URL", raising=False)
    monkeypatch.delenv("USE_GITEA_API", raising=False)

    assert branch_path_segment() == "tree"
    assert branch_link("acme", "widgets", "main") == (
        "\n[View branch](https://github.com/acme/widgets/tree/main)"
    )


@pytest.mark.unit
def test_build_working_comment_body_orders_links_after_placeholder() -> None:
    body = build_working_comment_body("[View job run](url1)", "\n[View branch](url2)")

    spinner_at = body.index(SPINNER_HTML)
    placeholder_at = body.index(WORKING_PLACEHOLDER)
    job_at = body.index("[View job run](url1)")
    branch_at = body.index("[View branch](url2)")
    assert spinner_at < placeholder_at < job_at < branch_at
    assert body.endswith("[View job run](url1)\n[View branch](url2)")


@pytest.mark.unit
def test_build_working_comment_body_without_branch_link() -> None:
    body = build_working_comment_body("[View job run](url1)", agent_name="Review bot")

    assert body.startswith(f"Review bot is working… {SPINNER_HTML}\n\n")
    assert body.endswith(f"{WORKING_PLACEHOLDER}\n\n[View job run](url1)")


@pytest.mark.unit
def test_build_working_comment_body_default_status_line() -> None:
    body = build_working_comment_body("[View job run](url1)")

    assert body.splitlines()[0] == f"Claude Code is working… {SPINNER_HTML}"
    assert body == (
        f"Claude Code is working… {SPINNER_HTML}\n"
        "\n"
        "I'll analyze this and get back to you.\n"
        "\n"
        "[View job run](url1)"
    )
