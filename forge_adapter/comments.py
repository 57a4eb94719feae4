"""Markdown link and comment-body builders for bot comments."""

from __future__ import annotations

from forge_adapter.config import Platform, PlatformConfig, get_platform_config

SPINNER_HTML = (
    '<img src="https://github.com/user-attachments/assets/5ac382c7-e004-429b-8e35-7feb3e8f9c6f" '
    'width="14px" height="14px" style="vertical-align: middle; margin-left: 4px;" />'
)
DEFAULT_AGENT_NAME = "Claude Code"
WORKING_PLACEHOLDER = "I'll analyze this and get back to you."


def job_run_link(
    owner: str,
    repo: str,
    run_id: str | int,
    *,
    config: PlatformConfig | None = None,
) -> str:
    """Build the markdown link to a workflow run."""
    resolved = config or get_platform_config()
    job_run_url = f"{resolved.server_base_url}/{owner}/{repo}/actions/runs/{run_id}"
    return f"[View job run]({job_run_url})"


def branch_path_segment(*, config: PlatformConfig | None = None) -> str:
    """Return the URL path segment used to browse a branch.

    Gitea serves branches under ``src/branch`` while GitHub uses ``tree``.
    """
    resolved = config or get_platform_config()
    if resolved.web_platform is Platform.GITEA:
        return "src/branch"
    return "tree"


def branch_url(
    owner: str,
    repo: str,
    branch_name: str,
    *,
    config: PlatformConfig | None = None,
) -> str:
    """Build a browser URL for a branch on the configured server."""
    resolved = config or get_platform_config()
    segment = branch_path_segment(config=resolved)
    return f"{resolved.server_base_url}/{owner}/{repo}/{segment}/{branch_name}"


def branch_link(
    owner: str,
    repo: str,
    branch_name: str,
    *,
    config: PlatformConfig | None = None,
) -> str:
    """Build the newline-prefixed markdown link to a branch."""
    resolved = config or get_platform_config()
    if resolved.platform is Platform.GITEA:
        url = branch_url(owner, repo, branch_name, config=resolved)
    else:
        url = f"{resolved.server_base_url}/{owner}/{repo}/tree/{branch_name}"
    return f"\n[View branch]({url})"


def build_working_comment_body(
    job_run_link: str,
    branch_link: str = "",
    *,
    agent_name: str = DEFAULT_AGENT_NAME,
) -> str:
    """Render the in-progress comment posted while a job is running."""
    return (
        f"{agent_name} is working… {SPINNER_HTML}\n"
        "\n"
        f"{WORKING_PLACEHOLDER}\n"
        "\n"
        f"{job_run_link}{branch_link}"
    )
