"""Typer CLI for fetching normalized forge data and rendering bot comments."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated

import httpx
import typer

from forge_adapter.comments import branch_link, build_working_comment_body, job_run_link
from forge_adapter.models import GraphQLModel
from forge_adapter.queries import fetch_issue, fetch_pull_request, fetch_user
from forge_adapter.rest_client import (
    ForgeApiError,
    ForgeAuthError,
    ForgeInputError,
    build_forge_client,
)

app = typer.Typer(help="Normalize GitHub/Gitea REST data into GraphQL-shaped JSON.")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option(help="Log requests and warnings at debug level.")] = False,
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _run_query(
    query: Callable[[httpx.AsyncClient], Awaitable[GraphQLModel]],
    *,
    timeout_seconds: int,
) -> GraphQLModel:
    """Run one async query with a fresh client, mapping failures to exit code 1."""

    async def _execute() -> GraphQLModel:
        async with build_forge_client(timeout_seconds=timeout_seconds) as client:
            return await query(client)

    try:
        return asyncio.run(_execute())
    except ForgeAuthError as error:
        typer.echo(f"Fetch failed: {error}")
        raise typer.Exit(code=1) from error
    except ForgeInputError as error:
        raise typer.BadParameter(str(error)) from error
    except ForgeApiError as error:
        typer.echo(f"Fetch failed: status={error.status_code} endpoint={error.endpoint}.")
        raise typer.Exit(code=1) from error
    except httpx.HTTPError as error:
        typer.echo(f"Fetch failed: network error ({error}).")
        raise typer.Exit(code=1) from error


def _emit(result: GraphQLModel, output: Path | None) -> None:
    """Print the GraphQL-shaped JSON or write it to a file."""
    rendered = json.dumps(result.to_graphql(), indent=2, sort_keys=True) + "\n"
    if output is None:
        typer.echo(rendered, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    typer.echo(str(output))


@app.command("pull-request")
def pull_request_command(
    owner: Annotated[str, typer.Option(help="Repository owner.")],
    repo: Annotated[str, typer.Option(help="Repository name.")],
    number: Annotated[int, typer.Option(help="Pull request number.")],
    output: Annotated[Path | None, typer.Option(help="Write JSON here instead of stdout.")] = None,
    timeout_seconds: Annotated[int, typer.Option(help="API timeout in seconds.")] = 20,
) -> None:
    """Fetch a pull request with commits, files, comments, and reviews."""
    result = _run_query(
        lambda client: fetch_pull_request(client, owner, repo, number),
        timeout_seconds=timeout_seconds,
    )
    _emit(result, output)


@app.command("issue")
def issue_command(
    owner: Annotated[str, typer.Option(help="Repository owner.")],
    repo: Annotated[str, typer.Option(help="Repository name.")],
    number: Annotated[int, typer.Option(help="Issue number.")],
    output: Annotated[Path | None, typer.Option(help="Write JSON here instead of stdout.")] = None,
    timeout_seconds: Annotated[int, typer.Option(help="API timeout in seconds.")] = 20,
) -> None:
    """Fetch an issue with its comments."""
    result = _run_query(
        lambda client: fetch_issue(client, owner, repo, number),
        timeout_seconds=timeout_seconds,
    )
    _emit(result, output)


@app.command("user")
def user_command(
    login: Annotated[str, typer.Option(help="User login.")],
    timeout_seconds: Annotated[int, typer.Option(help="API timeout in seconds.")] = 20,
) -> None:
    """Resolve a user's display name (null when unavailable)."""
    result = _run_query(
        lambda client: fetch_user(client, login),
        timeout_seconds=timeout_seconds,
    )
    _emit(result, None)


@app.command("working-comment")
def working_comment_command(
    owner: Annotated[str, typer.Option(help="Repository owner.")],
    repo: Annotated[str, typer.Option(help="Repository name.")],
    run_id: Annotated[str, typer.Option(help="Workflow run id.")],
    branch: Annotated[str | None, typer.Option(help="Branch to link, if any.")] = None,
) -> None:
    """Print the in-progress comment body for a job run."""
    branch_markdown = branch_link(owner, repo, branch) if branch else ""
    typer.echo(build_working_comment_body(job_run_link(owner, repo, run_id), branch_markdown))
