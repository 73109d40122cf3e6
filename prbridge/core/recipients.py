"""Work out who a notification is from and which room members it tags."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from prbridge.core.classifier import COMMENT_EVENTS, PULL_REQUEST_EVENTS, AppEvent
from prbridge.models import Member, RecipientSet
from prbridge.webhooks.payloads import PullRequestEvent, ReviewCommentEvent

# A mention only counts at its last occurrence on the line
_MENTION_RE = re.compile(r"(@\S+)(?!.*\1)")


def extract_mentions(body: str) -> list[str]:
    """Return the mentioned handles in ``body`` without their leading ``@``."""
    return [m.replace("@", "", 1) for m in _MENTION_RE.findall(body or "")]


def to_directive(member: Member) -> str:
    return f"[To:{member.chatwork_id}]"


def tag_members(members: Iterable[Member], github_ids: Iterable[str]) -> str:
    """Tag, in room order, every member whose GitHub id is in ``github_ids``."""
    wanted = set(github_ids)
    return "".join(to_directive(m) for m in members if m.github_id in wanted)


def resolve_recipients(
    app_event: AppEvent,
    event: PullRequestEvent | ReviewCommentEvent,
    members: Sequence[Member],
) -> RecipientSet:
    if app_event in COMMENT_EVENTS:
        assert isinstance(event, ReviewCommentEvent)
        mentions = extract_mentions(event.comment.body)
        return RecipientSet(
            sender=event.comment.user.login,
            receivers=tag_members(members, mentions),
        )

    if app_event in PULL_REQUEST_EVENTS:
        pull = event.pull_request
        assignees = pull.assignee_logins
        if not assignees:
            receivers = "".join(to_directive(m) for m in members)
        else:
            receivers = tag_members(members, assignees)
        return RecipientSet(sender=pull.user.login, receivers=receivers)

    raise ValueError(f"No recipients for {app_event.value} events")
