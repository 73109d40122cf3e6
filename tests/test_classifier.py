"""Tests for the event classifier."""

import pytest

from prbridge.core.classifier import AppEvent, classify


class TestClassifyPullRequest:
    def test_opened(self, pr_event):
        assert classify(pr_event("opened")) == AppEvent.PULL_REQUEST_OPENED

    def test_closed_and_merged(self, pr_event):
        assert classify(pr_event("closed", merged=True)) == AppEvent.PULL_REQUEST_MERGED

    def test_closed_without_merge(self, pr_event):
        assert classify(pr_event("closed", merged=False)) == AppEvent.PULL_REQUEST_CLOSED

    def test_closed_with_null_merged(self, pr_event):
        assert classify(pr_event("closed", merged=None)) == AppEvent.PULL_REQUEST_CLOSED

    def test_reopened(self, pr_event):
        assert classify(pr_event("reopened")) == AppEvent.PULL_REQUEST_REOPENED

    @pytest.mark.parametrize("action", ["synchronize", "edited", "labeled", "created", ""])
    def test_other_actions_unrecognized(self, pr_event, action):
        assert classify(pr_event(action)) == AppEvent.UNRECOGNIZED


class TestClassifyReviewComment:
    def test_created(self, comment_event):
        assert classify(comment_event("created")) == AppEvent.COMMENT_CREATED

    def test_edited(self, comment_event):
        assert classify(comment_event("edited")) == AppEvent.COMMENT_EDITED

    @pytest.mark.parametrize("action", ["deleted", "opened", "closed"])
    def test_other_actions_unrecognized(self, comment_event, action):
        assert classify(comment_event(action)) == AppEvent.UNRECOGNIZED
