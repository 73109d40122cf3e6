"""Tests for mention extraction and recipient resolution."""

import pytest

from prbridge.core.classifier import AppEvent
from prbridge.core.recipients import extract_mentions, resolve_recipients, tag_members
from prbridge.models import Member


class TestExtractMentions:
    def test_repeated_mention_collapses_to_last_occurrence(self):
        assert extract_mentions("@alice hi @bob and @alice again") == ["bob", "alice"]

    def test_no_mentions(self):
        assert extract_mentions("looks good to me") == []

    def test_empty_body(self):
        assert extract_mentions("") == []

    def test_strips_only_leading_at(self):
        assert extract_mentions("cc @dave@example") == ["dave@example"]

    def test_multiline_mentions(self):
        assert extract_mentions("@alice\nsecond line @bob") == ["alice", "bob"]


class TestTagMembers:
    def test_room_order_is_kept(self, members):
        assert tag_members(members, ["carol", "alice"]) == "[To:1][To:3]"

    def test_non_members_contribute_nothing(self, members):
        assert tag_members(members, ["mallory"]) == ""


class TestResolveComment:
    def test_sender_is_comment_author(self, comment_event, members):
        result = resolve_recipients(AppEvent.COMMENT_CREATED, comment_event(), members)
        assert result.sender == "carol"

    def test_mentioned_members_are_tagged(self, comment_event, members):
        event = comment_event(body="@carol @alice can you check?")
        result = resolve_recipients(AppEvent.COMMENT_CREATED, event, members)
        assert result.receivers == "[To:1][To:3]"

    def test_duplicate_mention_tagged_once(self, comment_event, members):
        event = comment_event(body="@alice hi @bob and @alice again")
        result = resolve_recipients(AppEvent.COMMENT_EDITED, event, members)
        assert result.receivers == "[To:1][To:2]"

    def test_mentions_are_case_sensitive(self, comment_event, members):
        event = comment_event(body="@Alice @BOB")
        result = resolve_recipients(AppEvent.COMMENT_CREATED, event, members)
        assert result.receivers == ""

    def test_no_mentions_gives_empty_receivers(self, comment_event, members):
        event = comment_event(body="nice work")
        result = resolve_recipients(AppEvent.COMMENT_CREATED, event, members)
        assert result.receivers == ""


class TestResolvePullRequest:
    def test_sender_is_pull_request_author(self, pr_event, members):
        result = resolve_recipients(AppEvent.PULL_REQUEST_OPENED, pr_event(), members)
        assert result.sender == "alice"

    def test_no_assignees_broadcasts_to_room(self, pr_event, members):
        result = resolve_recipients(AppEvent.PULL_REQUEST_OPENED, pr_event(assignees=[]), members)
        assert result.receivers == "[To:1][To:2][To:3]"
        assert result.receivers.count("[To:") == len(members)

    def test_assignees_only(self, pr_event):
        members = [Member(github_id="alice", chatwork_id="1"), Member(github_id="bob", chatwork_id="2")]
        event = pr_event(assignees=[{"login": "bob"}])
        result = resolve_recipients(AppEvent.PULL_REQUEST_MERGED, event, members)
        assert result.receivers == "[To:2]"

    def test_assignees_outside_room(self, pr_event, members):
        event = pr_event(assignees=[{"login": "mallory"}])
        result = resolve_recipients(AppEvent.PULL_REQUEST_CLOSED, event, members)
        assert result.receivers == ""

    def test_empty_room_gives_empty_receivers(self, pr_event):
        result = resolve_recipients(AppEvent.PULL_REQUEST_REOPENED, pr_event(), [])
        assert result.receivers == ""

    def test_unrecognized_is_rejected(self, pr_event, members):
        with pytest.raises(ValueError):
            resolve_recipients(AppEvent.UNRECOGNIZED, pr_event("synchronize"), members)
