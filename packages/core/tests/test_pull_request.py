"""Tests for GitHub pull request helper functions."""

from unittest.mock import MagicMock

import pytest
from github import GithubException

from labelbot_core.gh.pull_request import (
    apply_label_changes,
    get_diff_text,
    get_label_events,
    get_requested_reviewer_ids,
    get_reviews,
)
from labelbot_core.models import LabelChanges, Review, TimelineLabelEvent


def _file(filename, patch=None, previous_filename=None):
    f = MagicMock()
    f.filename = filename
    f.patch = patch
    f.previous_filename = previous_filename
    return f


def _user(user_id, login="someone"):
    u = MagicMock()
    u.id = user_id
    u.login = login
    return u


def _review(user, state):
    r = MagicMock()
    r.user = user
    r.state = state
    return r


def _issue_event(event, label_name=None, actor_login="octocat"):
    e = MagicMock()
    e.event = event
    if label_name is None:
        e.label = None
    else:
        e.label = MagicMock()
        e.label.name = label_name
    e.actor = _user(1, actor_login) if actor_login else None
    return e


class TestGetDiffText:
    def test_includes_file_headers_and_patches(self):
        pr = MagicMock()
        pr.get_files.return_value = [
            _file("src/index.ts", "@@ -1 +1 @@\n-a\n+b"),
            _file(".changeset/pr-42-widget.md"),
        ]
        text = get_diff_text(pr)
        assert "diff --git a/src/index.ts b/src/index.ts" in text
        assert "+b" in text
        assert "pr-42" in text

    def test_renamed_file_uses_previous_name(self):
        pr = MagicMock()
        pr.get_files.return_value = [_file("new.py", previous_filename="old.py")]
        assert get_diff_text(pr) == "diff --git a/old.py b/new.py"

    def test_no_files(self):
        pr = MagicMock()
        pr.get_files.return_value = []
        assert get_diff_text(pr) == ""


class TestGetReviews:
    def test_converts_in_order(self):
        pr = MagicMock()
        pr.get_reviews.return_value = [_review(_user(1), "COMMENTED"), _review(_user(2), "APPROVED")]
        assert get_reviews(pr) == [Review(1, "COMMENTED"), Review(2, "APPROVED")]

    def test_skips_deleted_users(self):
        pr = MagicMock()
        pr.get_reviews.return_value = [_review(None, "APPROVED")]
        assert get_reviews(pr) == []


def test_requested_reviewer_ids_ignores_teams():
    pr = MagicMock()
    pr.get_review_requests.return_value = ([_user(5), _user(6)], [MagicMock()])
    assert get_requested_reviewer_ids(pr) == {5, 6}


class TestGetLabelEvents:
    def test_keeps_only_label_events(self):
        pr = MagicMock()
        pr.as_issue.return_value.get_events.return_value = [
            _issue_event("labeled", "Hotfix", "linode-gh-bot"),
            _issue_event("review_requested"),
            _issue_event("unlabeled", "Hotfix", "octocat"),
        ]
        assert get_label_events(pr) == [
            TimelineLabelEvent("linode-gh-bot", "Hotfix", "labeled"),
            TimelineLabelEvent("octocat", "Hotfix", "unlabeled"),
        ]

    def test_ghost_actor(self):
        pr = MagicMock()
        pr.as_issue.return_value.get_events.return_value = [_issue_event("unlabeled", "Release", None)]
        assert get_label_events(pr)[0].actor_login is None


class TestApplyLabelChanges:
    def test_diff_mode_adds_and_removes(self):
        pr = MagicMock()
        pr.number = 7
        changes = LabelChanges(to_add=frozenset({"Approved", "Hotfix"}), to_remove=frozenset({"Ready for Review"}))
        apply_label_changes(pr, changes, {"Ready for Review"})
        pr.add_to_labels.assert_called_once_with("Approved", "Hotfix")
        pr.remove_from_labels.assert_called_once_with("Ready for Review")
        pr.set_labels.assert_not_called()

    def test_replace_mode_sets_full_set(self):
        pr = MagicMock()
        pr.number = 7
        changes = LabelChanges(to_add=frozenset({"Approved"}), to_remove=frozenset({"Ready for Review"}))
        apply_label_changes(pr, changes, {"Ready for Review", "bug"}, mode="replace")
        pr.set_labels.assert_called_once_with("Approved", "bug")
        pr.add_to_labels.assert_not_called()

    def test_empty_changes_make_no_calls(self):
        pr = MagicMock()
        pr.number = 7
        apply_label_changes(pr, LabelChanges(), set())
        assert pr.method_calls == []

    def test_api_errors_propagate(self):
        pr = MagicMock()
        pr.number = 7
        pr.add_to_labels.side_effect = GithubException(403, {"message": "Forbidden"}, None)
        with pytest.raises(GithubException):
            apply_label_changes(pr, LabelChanges(to_add=frozenset({"Hotfix"})), set())
