"""GitHub webhook payload models.

Only the two supported event kinds are modelled. Anything else is rejected
by :func:`parse_event` before it reaches the notification pipeline.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

import pydantic
from pydantic import BaseModel, Field, TypeAdapter

from prbridge.core.errors import REQUEST_BODY_REQUIRED, ValidationError

PULL_REQUEST = "pull_request"
PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"


class GitHubUser(BaseModel):
    login: str


class Repository(BaseModel):
    name: str


class PullRequest(BaseModel):
    title: str = ""
    body: str | None = None
    html_url: str = ""
    user: GitHubUser
    assignees: list[GitHubUser] = Field(default_factory=list)
    merged: bool | None = False
    changed_files: int | None = None
    additions: int | None = None
    deletions: int | None = None

    @property
    def assignee_logins(self) -> list[str]:
        return [a.login for a in self.assignees]


class ReviewComment(BaseModel):
    body: str = ""
    html_url: str = ""
    user: GitHubUser


class PullRequestEvent(BaseModel):
    event: Literal["pull_request"] = PULL_REQUEST
    action: str
    repository: Repository
    pull_request: PullRequest


class ReviewCommentEvent(BaseModel):
    event: Literal["pull_request_review_comment"] = PULL_REQUEST_REVIEW_COMMENT
    action: str
    repository: Repository
    pull_request: PullRequest
    comment: ReviewComment


InboundEvent = Annotated[
    Union[PullRequestEvent, ReviewCommentEvent],
    Field(discriminator="event"),
]

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(kind: str, payload: dict[str, Any] | None) -> PullRequestEvent | ReviewCommentEvent:
    """Validate a raw GitHub payload against the event kind from ``X-GitHub-Event``."""
    if not payload:
        raise ValidationError(REQUEST_BODY_REQUIRED)
    try:
        return _inbound_adapter.validate_python({**payload, "event": kind})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first["loc"]) or "event"
        raise ValidationError(f"Unsupported {kind or 'unknown'} payload: {location}: {first['msg']}") from e
