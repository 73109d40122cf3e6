"""Shared GitHub payload factories."""

from typing import Any

import pytest

from prbridge.models import Member
from prbridge.webhooks.payloads import parse_event


def _pull_request(**overrides: Any) -> dict[str, Any]:
    pr = {
        "number": 7,
        "title": "Add retry to uploader",
        "body": "Fixes flaky uploads.",
        "html_url": "https://github.com/acme/widgets/pull/7",
        "user": {"login": "alice"},
        "assignees": [],
        "merged": False,
        "changed_files": 3,
        "additions": 40,
        "deletions": 2,
    }
    pr.update(overrides)
    return pr


@pytest.fixture
def members():
    return (
        Member(github_id="alice", chatwork_id="1"),
        Member(github_id="bob", chatwork_id="2"),
        Member(github_id="carol", chatwork_id="3"),
    )


@pytest.fixture
def pr_payload():
    def make(action: str = "opened", **pr_overrides: Any) -> dict[str, Any]:
        return {
            "action": action,
            "repository": {"name": "widgets", "full_name": "acme/widgets"},
            "pull_request": _pull_request(**pr_overrides),
        }

    return make


@pytest.fixture
def comment_payload():
    def make(action: str = "created", body: str = "@bob please look", author: str = "carol") -> dict[str, Any]:
        return {
            "action": action,
            "repository": {"name": "widgets", "full_name": "acme/widgets"},
            "pull_request": _pull_request(),
            "comment": {
                "body": body,
                "html_url": "https://github.com/acme/widgets/pull/7#discussion_r1",
                "user": {"login": author},
            },
        }

    return make


@pytest.fixture
def pr_event(pr_payload):
    def make(action: str = "opened", **pr_overrides: Any):
        return parse_event("pull_request", pr_payload(action, **pr_overrides))

    return make


@pytest.fixture
def comment_event(comment_payload):
    def make(action: str = "created", body: str = "@bob please look", author: str = "carol"):
        return parse_event("pull_request_review_comment", comment_payload(action, body, author))

    return make
