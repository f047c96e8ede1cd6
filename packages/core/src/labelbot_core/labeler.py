"""Core label reconciliation pipeline."""

from __future__ import annotations

import logging

from labelbot_core.conditions import MANAGED_LABELS, evaluate_conditions
from labelbot_core.gh.pull_request import (
    apply_label_changes,
    get_diff_text,
    get_label_events,
    get_pull,
    get_repo,
    get_requested_reviewer_ids,
    get_reviews,
)
from labelbot_core.models import LabelRunResult, PullRequestEvent
from labelbot_core.overrides import manual_overrides
from labelbot_core.reconciler import reconcile
from labelbot_core.reviews import reduce_reviews

logger = logging.getLogger(__name__)


def run_labeler(
    event: PullRequestEvent,
    config: dict,
    repo_obj=None,
    shadow: bool = False,
) -> LabelRunResult | None:
    """Recompute and apply the managed labels for the PR in ``event``.

    Returns None for draft PRs, before any GitHub call is made. Otherwise
    every read happens before the single label write, so a failing read
    leaves the PR untouched. Labels are reconciled against the live PR, not
    the payload, which may be stale by the time the delivery is handled.
    GitHub errors propagate to the caller. In shadow mode the changes are
    computed but not written.
    """
    pr_info = event.pull_request
    if pr_info.draft:
        logger.info("PR #%d is a draft, skipping", event.number)
        return None

    repo = config["repo"]
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])
    this_pr = get_pull(this_repo, event.number)
    current_labels = frozenset(label.name for label in this_pr.labels)

    diff = get_diff_text(this_pr)
    reviews = get_reviews(this_pr)
    requested = get_requested_reviewer_ids(this_pr)
    label_events = get_label_events(this_pr)

    reduced = reduce_reviews(reviews, requested)
    logger.debug(
        "PR #%d: %d review(s), %d pending request(s), %d effective review(s)",
        event.number,
        len(reviews),
        len(requested),
        len(reduced),
    )

    conditions = evaluate_conditions(pr_info, diff, reduced, config)
    overrides = manual_overrides(MANAGED_LABELS, label_events, config["bot_login"], config["override_policy"])
    blocked = sorted(label for label, on in overrides.items() if on and conditions.get(label))
    if blocked:
        logger.info("PR #%d: not re-adding manually removed label(s) %s", event.number, blocked)

    changes = reconcile(current_labels, conditions, overrides)
    result = LabelRunResult(
        repo=repo,
        pr_number=event.number,
        current_labels=current_labels,
        conditions=conditions,
        overrides=overrides,
        changes=changes,
    )

    if changes.is_empty:
        logger.info("PR #%d: labels already up to date", event.number)
        return result

    if shadow:
        logger.info(
            "PR #%d: shadow mode, would add %s and remove %s",
            event.number,
            sorted(changes.to_add),
            sorted(changes.to_remove),
        )
        return result

    apply_label_changes(this_pr, changes, current_labels, mode=config["label_update"])
    result.applied = True
    return result
