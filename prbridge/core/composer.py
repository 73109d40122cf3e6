"""Build template fields for a classified event and render the message body."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from prbridge.core.classifier import COMMENT_EVENTS, PULL_REQUEST_EVENTS, AppEvent
from prbridge.core.templates import DEFAULT_TEMPLATES, render
from prbridge.models import Member
from prbridge.webhooks.payloads import PullRequestEvent, ReviewCommentEvent


def find_chatwork_id(members: Sequence[Member], github_id: str) -> str | None:
    for member in members:
        if member.github_id == github_id:
            return member.chatwork_id
    return None


def _count(value: int | None) -> str:
    return str(value or 0)


def build_fields(
    app_event: AppEvent,
    event: PullRequestEvent | ReviewCommentEvent,
    members: Sequence[Member],
    receivers: str,
) -> dict[str, str | None]:
    pull = event.pull_request

    if app_event in PULL_REQUEST_EVENTS:
        return {
            "repository_name": event.repository.name,
            "pull_request_title": pull.title,
            "pull_request_owner": find_chatwork_id(members, pull.user.login),
            "pull_request_url": pull.html_url,
            "pull_request_body": pull.body,
            "pull_request_edited_files": _count(pull.changed_files),
            "pull_request_added_lines": _count(pull.additions),
            "pull_request_deleted_lines": _count(pull.deletions),
            "receivers": receivers,
        }

    if app_event in COMMENT_EVENTS:
        assert isinstance(event, ReviewCommentEvent)
        comment = event.comment
        return {
            "repository_name": event.repository.name,
            "pull_request_title": pull.title,
            "pull_request_owner": find_chatwork_id(members, pull.user.login),
            "commentator": find_chatwork_id(members, comment.user.login),
            "comment_body": comment.body,
            "comment_url": comment.html_url,
            "receivers": receivers,
        }

    raise ValueError(f"No template for {app_event.value} events")


class MessageComposer:
    """Select the template for an event and render its fields into it."""

    def __init__(self, templates: Mapping[AppEvent, str] | None = None) -> None:
        self._templates = dict(templates) if templates is not None else dict(DEFAULT_TEMPLATES)

    def template_for(self, app_event: AppEvent) -> str:
        try:
            return self._templates[app_event]
        except KeyError:
            raise ValueError(f"No template for {app_event.value} events") from None

    def compose(
        self,
        app_event: AppEvent,
        event: PullRequestEvent | ReviewCommentEvent,
        members: Sequence[Member],
        receivers: str,
    ) -> str:
        template = self.template_for(app_event)
        return render(template, build_fields(app_event, event, members, receivers))
