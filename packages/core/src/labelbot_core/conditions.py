"""Label condition table.

Each managed label maps to a pure predicate over a LabelContext. Adding a
label means adding one entry to CONDITIONS; the reconciler only ever touches
labels that appear here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from labelbot_core.models import PullRequestInfo, Review
from labelbot_core.reviews import count_approvals, has_changes_requested

MISSING_CHANGESET = "Missing Changeset"
RELEASE_TO_STAGING = "Release → Staging"
RELEASE = "Release"
MASTER_TO_DEVELOP = "Master → Develop"
HOTFIX = "Hotfix"
APPROVED = "Approved"
READY_FOR_REVIEW = "Ready for Review"
ADDITIONAL_APPROVAL_NEEDED = "Add'tl Approval Needed"
REQUIRES_CHANGES = "Requires Changes"


@dataclass(frozen=True)
class LabelContext:
    pr: PullRequestInfo
    diff: str
    reviews: Sequence[Review]  # already reduced
    trunk: str = "master"
    integration: str = "develop"
    staging: str = "staging"
    required_approvals: int = 2

    @classmethod
    def from_config(cls, pr: PullRequestInfo, diff: str, reviews: Sequence[Review], config: dict) -> LabelContext:
        branches = config["branches"]
        return cls(
            pr=pr,
            diff=diff,
            reviews=tuple(reviews),
            trunk=branches["trunk"],
            integration=branches["integration"],
            staging=branches["staging"],
            required_approvals=config["required_approvals"],
        )


def _missing_changeset(ctx: LabelContext) -> bool:
    return (
        f"pr-{ctx.pr.number}" not in ctx.diff
        and ctx.pr.base_ref == ctx.integration
        and ctx.pr.head_ref != ctx.trunk
    )


def _release_to_staging(ctx: LabelContext) -> bool:
    return ctx.pr.base_ref == ctx.staging and "release" in ctx.pr.head_ref


def _release(ctx: LabelContext) -> bool:
    return ctx.pr.base_ref == ctx.trunk and ctx.pr.head_ref == ctx.staging


def _master_to_develop(ctx: LabelContext) -> bool:
    return ctx.pr.base_ref == ctx.integration and ctx.pr.head_ref == ctx.trunk


def _hotfix(ctx: LabelContext) -> bool:
    return "hotfix" in ctx.pr.title.lower()


def _approved(ctx: LabelContext) -> bool:
    return count_approvals(ctx.reviews) >= ctx.required_approvals


def _additional_approval_needed(ctx: LabelContext) -> bool:
    return 1 <= count_approvals(ctx.reviews) < ctx.required_approvals


def _ready_for_review(ctx: LabelContext) -> bool:
    return not _approved(ctx) and not _additional_approval_needed(ctx)


def _requires_changes(ctx: LabelContext) -> bool:
    return has_changes_requested(ctx.reviews)


CONDITIONS: dict[str, Callable[[LabelContext], bool]] = {
    MISSING_CHANGESET: _missing_changeset,
    RELEASE_TO_STAGING: _release_to_staging,
    RELEASE: _release,
    MASTER_TO_DEVELOP: _master_to_develop,
    HOTFIX: _hotfix,
    APPROVED: _approved,
    READY_FOR_REVIEW: _ready_for_review,
    ADDITIONAL_APPROVAL_NEEDED: _additional_approval_needed,
    REQUIRES_CHANGES: _requires_changes,
}

MANAGED_LABELS: frozenset[str] = frozenset(CONDITIONS)


def evaluate_conditions(pr: PullRequestInfo, diff: str, reviews: Sequence[Review], config: dict) -> dict[str, bool]:
    """Evaluate every predicate in CONDITIONS. ``reviews`` must already be reduced."""
    ctx = LabelContext.from_config(pr, diff, reviews, config)
    return {label: predicate(ctx) for label, predicate in CONDITIONS.items()}
