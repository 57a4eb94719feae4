"""Fetch pull requests, issues, and users over REST in GraphQL shape."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from forge_adapter.mapping import map_issue, map_pull_request, map_review_comment, map_user
from forge_adapter.models import (
    IssueQueryResult,
    PullRequestQueryResult,
    ReviewComment,
    UserQueryResult,
)
from forge_adapter.rest_client import (
    ForgeApiError,
    ForgeInputError,
    first_page_params,
    request_json,
    request_json_list,
    require_int,
    validate_login,
    validate_number,
    validate_repo_coordinates,
)

logger = logging.getLogger(__name__)

# Failures absorbed by the degrade-and-continue call sites: API status or
# shape errors, transport errors, and payloads the models reject.
DEGRADABLE_ERRORS = (ForgeApiError, httpx.HTTPError, ValidationError)


@dataclass(frozen=True, slots=True)
class ReviewCommentsLoaded:
    """Line comments fetched and mapped for one review."""

    review_id: int
    comments: tuple[ReviewComment, ...]


@dataclass(frozen=True, slots=True)
class ReviewCommentsDegraded:
    """Review whose comment fetch failed; contributes no comments."""

    review_id: int
    cause: Exception
    comments: tuple[ReviewComment, ...] = ()


ReviewCommentsOutcome = ReviewCommentsLoaded | ReviewCommentsDegraded


async def _gather_or_cancel(*coroutines: Coroutine[Any, Any, Any]) -> list[Any]:
    """Await coroutines together, in order; the first failure cancels the rest."""
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coroutine) for coroutine in coroutines]
    except ExceptionGroup as error_group:
        raise error_group.exceptions[0] from error_group
    return [task.result() for task in tasks]


def review_comments_endpoint(owner: str, repo: str, number: int, review_id: int) -> str:
    """Per-review comments path, served by both GitHub and Gitea."""
    return f"/repos/{owner}/{repo}/pulls/{number}/reviews/{review_id}/comments"


async def fetch_review_comments(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    number: int,
    review_id: int,
) -> ReviewCommentsOutcome:
    """Fetch and map one review's line comments, degrading to none on failure."""
    endpoint = review_comments_endpoint(owner, repo, number, review_id)
    try:
        rows = await request_json_list(client, endpoint, params=first_page_params())
        comments = tuple(map_review_comment(row, endpoint=endpoint) for row in rows)
    except DEGRADABLE_ERRORS as error:
        return ReviewCommentsDegraded(review_id=review_id, cause=error)
    return ReviewCommentsLoaded(review_id=review_id, comments=comments)


async def fetch_pull_request(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    number: int,
) -> PullRequestQueryResult:
    """Fetch a pull request with commits, files, comments, and reviews.

    The five top-level calls run concurrently and any failure among them
    propagates after the remaining calls are cancelled. Review comments are
    then fetched per review; a failed review keeps its position with an empty
    comment list.
    """
    owner, repo = validate_repo_coordinates(owner, repo)
    number = validate_number(number)
    pull_endpoint = f"/repos/{owner}/{repo}/pulls/{number}"
    page = first_page_params()

    pull, files, comments, commits, reviews = await _gather_or_cancel(
        request_json(client, pull_endpoint),
        request_json_list(client, f"{pull_endpoint}/files", params=page),
        request_json_list(client, f"/repos/{owner}/{repo}/issues/{number}/comments", params=page),
        request_json_list(client, f"{pull_endpoint}/commits", params=page),
        request_json_list(client, f"{pull_endpoint}/reviews", params=page),
    )

    review_ids = [
        require_int(review, key="id", endpoint=f"{pull_endpoint}/reviews") for review in reviews
    ]
    outcomes = await _gather_or_cancel(
        *(
            fetch_review_comments(client, owner, repo, number, review_id)
            for review_id in review_ids
        )
    )
    for outcome in outcomes:
        if isinstance(outcome, ReviewCommentsDegraded):
            logger.warning(
                "Failed to fetch comments for review %s: %s",
                outcome.review_id,
                outcome.cause,
            )

    return map_pull_request(
        pull,
        files=files,
        comments=comments,
        commits=commits,
        reviews=[(review, outcome.comments) for review, outcome in zip(reviews, outcomes)],
        endpoint=pull_endpoint,
    )


async def fetch_issue(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    number: int,
) -> IssueQueryResult:
    """Fetch an issue and its comments; any failure propagates."""
    owner, repo = validate_repo_coordinates(owner, repo)
    number = validate_number(number)
    issue_endpoint = f"/repos/{owner}/{repo}/issues/{number}"

    issue, comments = await _gather_or_cancel(
        request_json(client, issue_endpoint),
        request_json_list(client, f"{issue_endpoint}/comments", params=first_page_params()),
    )
    return map_issue(issue, comments=comments, endpoint=issue_endpoint)


async def fetch_user(client: httpx.AsyncClient, login: str) -> UserQueryResult:
    """Fetch a user's display name, returning a null name on any failure."""
    try:
        normalized_login = validate_login(login)
        payload = await request_json(client, f"/users/{normalized_login}")
        return map_user(payload)
    except (ForgeInputError, *DEGRADABLE_ERRORS) as error:
        logger.warning("Failed to fetch user %s: %s", login, error)
        return UserQueryResult()
