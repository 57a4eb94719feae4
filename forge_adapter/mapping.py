"""Pure mappings from REST payloads to GraphQL-shaped models.

Every function here takes already-fetched JSON and performs no I/O, so the
reshaping rules can be exercised without a transport. Optional source fields
resolve to ``""`` or ``None``; states are upper-cased; synthetic ids are
derived from the numeric source id and a fixed tag.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from forge_adapter.models import (
    Author,
    ChangedFile,
    Comment,
    CommentConnection,
    Commit,
    CommitAuthor,
    CommitConnection,
    CommitNode,
    FileConnection,
    Issue,
    IssueQueryResult,
    IssueRepository,
    PullRequest,
    PullRequestAuthor,
    PullRequestQueryResult,
    PullRequestRepository,
    Review,
    ReviewComment,
    ReviewCommentConnection,
    ReviewConnection,
    UserName,
    UserQueryResult,
)
from forge_adapter.rest_client import require_int, require_object, require_str

COMMENT_ID_PREFIX = "comment_"
REVIEW_ID_PREFIX = "review_"
REVIEW_COMMENT_ID_PREFIX = "review_comment_"

FILE_STATUS_CHANGE_TYPES = {
    "added": "ADDED",
    "modified": "MODIFIED",
    "removed": "DELETED",
    "renamed": "RENAMED",
    "copied": "COPIED",
    "changed": "MODIFIED",
}


def map_file_status(status: str) -> str:
    """Map a REST file status to a GraphQL ``changeType``."""
    return FILE_STATUS_CHANGE_TYPES.get(status, status.upper())


def synthetic_id(prefix: str, database_id: int) -> str:
    return f"{prefix}{database_id}"


def _optional_object(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _login(payload: dict[str, Any]) -> str:
    return _optional_object(payload, "user").get("login") or ""


def map_author(payload: dict[str, Any]) -> Author:
    """Map the ``user`` fragment of any REST object to an author."""
    return Author(login=_login(payload))


def map_comment(payload: dict[str, Any], *, endpoint: str = "comment") -> Comment:
    """Map an issue comment."""
    database_id = require_int(payload, key="id", endpoint=endpoint)
    return Comment(
        id=synthetic_id(COMMENT_ID_PREFIX, database_id),
        database_id=database_id,
        body=payload.get("body") or "",
        author=map_author(payload),
        created_at=payload.get("created_at"),
        updated_at=payload.get("updated_at"),
        last_edited_at=payload.get("updated_at"),
        is_minimized=False,
    )


def map_review_comment(
    payload: dict[str, Any],
    *,
    endpoint: str = "review comment",
) -> ReviewComment:
    """Map a review line comment; ``line`` falls back to ``original_line``."""
    database_id = require_int(payload, key="id", endpoint=endpoint)
    return ReviewComment(
        id=synthetic_id(REVIEW_COMMENT_ID_PREFIX, database_id),
        database_id=database_id,
        body=payload.get("body") or "",
        path=payload.get("path"),
        line=payload.get("line") or payload.get("original_line") or None,
        author=map_author(payload),
        created_at=payload.get("created_at"),
        updated_at=payload.get("updated_at"),
        last_edited_at=payload.get("updated_at"),
        is_minimized=False,
    )


def map_review(
    payload: dict[str, Any],
    comments: Sequence[ReviewComment],
    *,
    endpoint: str = "review",
) -> Review:
    """Map a review, attaching line comments that were already mapped."""
    database_id = require_int(payload, key="id", endpoint=endpoint)
    timestamp = payload.get("submitted_at") or payload.get("created_at") or ""
    return Review(
        id=synthetic_id(REVIEW_ID_PREFIX, database_id),
        database_id=database_id,
        author=map_author(payload),
        body=payload.get("body") or "",
        state=require_str(payload, key="state", endpoint=endpoint).upper(),
        submitted_at=timestamp,
        updated_at=timestamp,
        last_edited_at=timestamp,
        comments=ReviewCommentConnection(nodes=list(comments)),
    )


def map_commit(payload: dict[str, Any], *, endpoint: str = "commit") -> CommitNode:
    """Map one entry of a pull request's commit list."""
    commit_payload = _optional_object(payload, "commit")
    author_payload = _optional_object(commit_payload, "author")
    return CommitNode(
        commit=Commit(
            oid=require_str(payload, key="sha", endpoint=endpoint),
            message=commit_payload.get("message") or "",
            author=CommitAuthor(
                name=author_payload.get("name") or "",
                email=author_payload.get("email") or "",
            ),
        )
    )


def map_changed_file(payload: dict[str, Any], *, endpoint: str = "file") -> ChangedFile:
    """Map one entry of a pull request's changed-file list."""
    return ChangedFile(
        path=require_str(payload, key="filename", endpoint=endpoint),
        additions=payload.get("additions") or 0,
        deletions=payload.get("deletions") or 0,
        change_type=map_file_status(require_str(payload, key="status", endpoint=endpoint)),
    )


def map_pull_request(
    pull: dict[str, Any],
    *,
    files: Sequence[dict[str, Any]],
    comments: Sequence[dict[str, Any]],
    commits: Sequence[dict[str, Any]],
    reviews: Sequence[tuple[dict[str, Any], Sequence[ReviewComment]]],
    endpoint: str = "pull request",
) -> PullRequestQueryResult:
    """Assemble a pull request payload plus its sub-lists into the GraphQL shape.

    ``reviews`` pairs each review payload with its mapped line comments, in the
    order the review list was returned.
    """
    user = _optional_object(pull, "user")
    base = require_object(pull, key="base", endpoint=endpoint)
    head = require_object(pull, key="head", endpoint=endpoint)
    return PullRequestQueryResult(
        repository=PullRequestRepository(
            pull_request=PullRequest(
                title=require_str(pull, key="title", endpoint=endpoint),
                body=pull.get("body") or "",
                author=PullRequestAuthor(
                    login=user.get("login") or "",
                    name=user.get("name") or None,
                ),
                base_ref_name=require_str(base, key="ref", endpoint=endpoint),
                head_ref_name=require_str(head, key="ref", endpoint=endpoint),
                head_ref_oid=require_str(head, key="sha", endpoint=endpoint),
                created_at=pull.get("created_at"),
                updated_at=pull.get("updated_at"),
                # REST exposes no separate edit timestamp.
                last_edited_at=pull.get("updated_at"),
                additions=pull.get("additions") or 0,
                deletions=pull.get("deletions") or 0,
                state=require_str(pull, key="state", endpoint=endpoint).upper(),
                commits=CommitConnection(
                    total_count=len(commits),
                    nodes=[map_commit(commit) for commit in commits],
                ),
                files=FileConnection(nodes=[map_changed_file(row) for row in files]),
                comments=CommentConnection(nodes=[map_comment(row) for row in comments]),
                reviews=ReviewConnection(
                    nodes=[
                        map_review(review, review_comments)
                        for review, review_comments in reviews
                    ]
                ),
            )
        )
    )


def map_issue(
    issue: dict[str, Any],
    *,
    comments: Sequence[dict[str, Any]],
    endpoint: str = "issue",
) -> IssueQueryResult:
    """Assemble an issue payload and its comments into the GraphQL shape."""
    return IssueQueryResult(
        repository=IssueRepository(
            issue=Issue(
                title=require_str(issue, key="title", endpoint=endpoint),
                body=issue.get("body") or "",
                author=map_author(issue),
                created_at=issue.get("created_at"),
                updated_at=issue.get("updated_at"),
                last_edited_at=issue.get("updated_at"),
                state=require_str(issue, key="state", endpoint=endpoint).upper(),
                comments=CommentConnection(nodes=[map_comment(row) for row in comments]),
            )
        )
    )


def map_user(payload: dict[str, Any]) -> UserQueryResult:
    """Map a user payload; Gitea carries the display name in ``full_name``."""
    return UserQueryResult(
        user=UserName(name=payload.get("name") or payload.get("full_name") or None)
    )
