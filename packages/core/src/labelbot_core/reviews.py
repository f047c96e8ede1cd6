"""Collapse a pull request's review history into one effective review per reviewer."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from labelbot_core.models import APPROVED, CHANGES_REQUESTED, COMMENTED, Review


def reduce_reviews(reviews: Sequence[Review], requested_reviewers: Iterable[int]) -> list[Review]:
    """Return each reviewer's most recent qualifying review, newest first.

    ``reviews`` must be oldest-first, as GitHub lists them. Walking backwards,
    an entry is skipped when its author already has an accepted review, when
    the author has a pending review request (their earlier verdict is stale),
    or when it is a plain comment. Skipped comments do not mark the author as
    seen, so an older approval behind a newer comment still counts.
    """
    pending = set(requested_reviewers)
    accepted: dict[int, Review] = {}

    for review in reversed(reviews):
        if review.user_id in accepted:
            continue
        if review.user_id in pending:
            continue
        if review.state == COMMENTED:
            continue
        accepted[review.user_id] = review

    return list(accepted.values())


def count_approvals(reviews: Iterable[Review]) -> int:
    return sum(1 for r in reviews if r.state == APPROVED)


def has_changes_requested(reviews: Iterable[Review]) -> bool:
    return any(r.state == CHANGES_REQUESTED for r in reviews)
