"""GraphQL-shaped models for normalized pull request, issue, and user data."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GraphQLModel(BaseModel):
    """Base model that serializes with GraphQL (camelCase) field names."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_graphql(self) -> dict[str, Any]:
        """Dump to the nested dict shape a GraphQL consumer expects."""
        return self.model_dump(by_alias=True)


class Author(GraphQLModel):
    """Login of the user who authored an object."""

    login: str = ""


class PullRequestAuthor(Author):
    """Pull request author, with display name when the API exposes it."""

    name: str | None = None


class CommitAuthor(GraphQLModel):
    name: str = ""
    email: str = ""


class Commit(GraphQLModel):
    oid: str
    message: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)


class CommitNode(GraphQLModel):
    commit: Commit


class CommitConnection(GraphQLModel):
    total_count: int = Field(default=0, ge=0)
    nodes: list[CommitNode] = Field(default_factory=list)


class ChangedFile(GraphQLModel):
    """One changed file in a pull request."""

    path: str
    additions: int = 0
    deletions: int = 0
    change_type: str


class FileConnection(GraphQLModel):
    nodes: list[ChangedFile] = Field(default_factory=list)


class Comment(GraphQLModel):
    """Issue-level comment. Minimization is not exposed over REST."""

    id: str
    database_id: int
    body: str = ""
    author: Author = Field(default_factory=Author)
    created_at: str | None = None
    updated_at: str | None = None
    last_edited_at: str | None = None
    is_minimized: bool = False


class CommentConnection(GraphQLModel):
    nodes: list[Comment] = Field(default_factory=list)


class ReviewComment(Comment):
    """Line comment attached to a review."""

    path: str | None = None
    line: int | None = None


class ReviewCommentConnection(GraphQLModel):
    nodes: list[ReviewComment] = Field(default_factory=list)


class Review(GraphQLModel):
    """Pull request review with its line comments."""

    id: str
    database_id: int
    author: Author = Field(default_factory=Author)
    body: str = ""
    state: str
    submitted_at: str = ""
    updated_at: str = ""
    last_edited_at: str = ""
    comments: ReviewCommentConnection = Field(default_factory=ReviewCommentConnection)


class ReviewConnection(GraphQLModel):
    nodes: list[Review] = Field(default_factory=list)


class PullRequest(GraphQLModel):
    """Normalized pull request with commits, files, comments, and reviews."""

    title: str
    body: str = ""
    author: PullRequestAuthor = Field(default_factory=PullRequestAuthor)
    base_ref_name: str
    head_ref_name: str
    head_ref_oid: str
    created_at: str | None = None
    updated_at: str | None = None
    last_edited_at: str | None = None
    additions: int = 0
    deletions: int = 0
    state: str
    commits: CommitConnection = Field(default_factory=CommitConnection)
    files: FileConnection = Field(default_factory=FileConnection)
    comments: CommentConnection = Field(default_factory=CommentConnection)
    reviews: ReviewConnection = Field(default_factory=ReviewConnection)


class Issue(GraphQLModel):
    """Normalized issue with its comments."""

    title: str
    body: str = ""
    author: Author = Field(default_factory=Author)
    created_at: str | None = None
    updated_at: str | None = None
    last_edited_at: str | None = None
    state: str
    comments: CommentConnection = Field(default_factory=CommentConnection)


class PullRequestRepository(GraphQLModel):
    pull_request: PullRequest


class IssueRepository(GraphQLModel):
    issue: Issue


class PullRequestQueryResult(GraphQLModel):
    """Top-level ``{"repository": {"pullRequest": ...}}`` payload."""

    repository: PullRequestRepository


class IssueQueryResult(GraphQLModel):
    """Top-level ``{"repository": {"issue": ...}}`` payload."""

    repository: IssueRepository


class UserName(GraphQLModel):
    name: str | None = None


class UserQueryResult(GraphQLModel):
    """Top-level ``{"user": {"name": ...}}`` payload."""

    user: UserName = Field(default_factory=UserName)
