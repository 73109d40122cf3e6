"""Map a GitHub webhook payload to the notification it should produce."""

from __future__ import annotations

from enum import Enum

from prbridge.webhooks.payloads import PullRequestEvent, ReviewCommentEvent


class AppEvent(str, Enum):
    PULL_REQUEST_OPENED = "pull_request.opened"
    PULL_REQUEST_MERGED = "pull_request.merged"
    PULL_REQUEST_CLOSED = "pull_request.closed"
    PULL_REQUEST_REOPENED = "pull_request.reopened"
    COMMENT_CREATED = "comment.created"
    COMMENT_EDITED = "comment.edited"
    UNRECOGNIZED = "unrecognized"


PULL_REQUEST_EVENTS = frozenset({
    AppEvent.PULL_REQUEST_OPENED,
    AppEvent.PULL_REQUEST_MERGED,
    AppEvent.PULL_REQUEST_CLOSED,
    AppEvent.PULL_REQUEST_REOPENED,
})

COMMENT_EVENTS = frozenset({AppEvent.COMMENT_CREATED, AppEvent.COMMENT_EDITED})


def classify(event: PullRequestEvent | ReviewCommentEvent) -> AppEvent:
    """Return the AppEvent for a payload; unsupported actions are UNRECOGNIZED."""
    action = event.action

    if isinstance(event, PullRequestEvent):
        if action == "opened":
            return AppEvent.PULL_REQUEST_OPENED
        if action == "closed":
            if event.pull_request.merged:
                return AppEvent.PULL_REQUEST_MERGED
            return AppEvent.PULL_REQUEST_CLOSED
        if action == "reopened":
            return AppEvent.PULL_REQUEST_REOPENED

    elif isinstance(event, ReviewCommentEvent):
        if action == "created":
            return AppEvent.COMMENT_CREATED
        if action == "edited":
            return AppEvent.COMMENT_EDITED

    return AppEvent.UNRECOGNIZED
