from __future__ import annotations

import logging

from github import Github

from labelbot_core.models import LABELED, UNLABELED, LabelChanges, Review, TimelineLabelEvent

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_diff_text(pr) -> str:
    """Return the PR's changes as unified diff text, one section per file.

    File headers are included so that added files with no patch body (binary
    or oversized changesets) still show up by name.
    """
    sections = []
    for f in pr.get_files():
        old_name = f.previous_filename or f.filename
        sections.append(f"diff --git a/{old_name} b/{f.filename}")
        if f.patch:
            sections.append(f.patch)
    return "\n".join(sections)


def get_reviews(pr) -> list[Review]:
    """Return the PR's reviews oldest-first. Reviews from deleted accounts are dropped."""
    reviews = []
    for r in pr.get_reviews():
        if r.user is None:
            continue
        reviews.append(Review(user_id=r.user.id, state=r.state))
    return reviews


def get_requested_reviewer_ids(pr) -> set[int]:
    users, _teams = pr.get_review_requests()
    return {u.id for u in users}


def get_label_events(pr) -> list[TimelineLabelEvent]:
    """Return the PR's labeled/unlabeled issue events oldest-first."""
    events = []
    for e in pr.as_issue().get_events():
        if e.event not in (LABELED, UNLABELED) or e.label is None:
            continue
        events.append(
            TimelineLabelEvent(
                actor_login=e.actor.login if e.actor is not None else None,
                label_name=e.label.name,
                kind=e.event,
            )
        )
    return events


def apply_label_changes(pr, changes: LabelChanges, current_labels, mode: str = "diff") -> None:
    """Write label changes to GitHub.

    ``diff`` issues one add call plus one remove call per label; ``replace``
    writes the complete final label set in a single call. Both leave the PR
    with the same labels. API errors are raised to the caller.
    """
    if changes.is_empty:
        return

    if mode == "replace":
        final = sorted(changes.apply_to(current_labels))
        logger.info("Setting labels on PR #%d to %s", pr.number, final)
        pr.set_labels(*final)
        return

    if changes.to_add:
        logger.info("Adding labels to PR #%d: %s", pr.number, sorted(changes.to_add))
        pr.add_to_labels(*sorted(changes.to_add))
    for label in sorted(changes.to_remove):
        logger.info("Removing label %r from PR #%d", label, pr.number)
        pr.remove_from_labels(label)
