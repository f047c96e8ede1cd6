"""Data models for labelling runs.

Webhook payloads and PyGithub objects are both converted into these plain
dataclasses so the reducer, evaluator and reconciler never touch the network
or the raw JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

APPROVED = "APPROVED"
CHANGES_REQUESTED = "CHANGES_REQUESTED"
COMMENTED = "COMMENTED"

LABELED = "labeled"
UNLABELED = "unlabeled"


class PayloadError(ValueError):
    """Raised when a webhook body is not a usable pull request event."""


@dataclass(frozen=True)
class PullRequestInfo:
    """The subset of a pull request the label conditions look at."""

    number: int
    draft: bool
    title: str
    base_ref: str
    head_ref: str
    labels: frozenset[str] = frozenset()

    @classmethod
    def from_github(cls, pr) -> PullRequestInfo:
        """Build from a PyGithub PullRequest (used by the one-shot CLI command)."""
        return cls(
            number=pr.number,
            draft=bool(pr.draft),
            title=pr.title or "",
            base_ref=pr.base.ref,
            head_ref=pr.head.ref,
            labels=frozenset(label.name for label in pr.labels),
        )


@dataclass(frozen=True)
class PullRequestEvent:
    action: str
    number: int
    pull_request: PullRequestInfo


@dataclass(frozen=True)
class Review:
    user_id: int
    state: str


@dataclass(frozen=True)
class TimelineLabelEvent:
    actor_login: str | None  # None for deleted ("ghost") accounts
    label_name: str
    kind: str  # LABELED | UNLABELED


@dataclass(frozen=True)
class LabelChanges:
    to_add: frozenset[str] = frozenset()
    to_remove: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def apply_to(self, current_labels) -> set[str]:
        """Return the full label set after applying these changes to current_labels."""
        return (set(current_labels) - self.to_remove) | self.to_add


@dataclass
class LabelRunResult:
    """Outcome of one labelling run, returned to the webhook and CLI layers."""

    repo: str
    pr_number: int
    current_labels: frozenset[str] = frozenset()
    conditions: dict[str, bool] = field(default_factory=dict)
    overrides: dict[str, bool] = field(default_factory=dict)
    changes: LabelChanges = field(default_factory=LabelChanges)
    applied: bool = False


def _require(mapping, key: str, kind, where: str):
    if not isinstance(mapping, dict) or key not in mapping:
        raise PayloadError(f"Missing field {where}{key}")
    value = mapping[key]
    if kind is int and isinstance(value, bool):
        raise PayloadError(f"Field {where}{key} must be an integer")
    if not isinstance(value, kind):
        raise PayloadError(f"Field {where}{key} has unexpected type {type(value).__name__}")
    return value


def parse_event(payload) -> PullRequestEvent:
    """Convert a GitHub pull request webhook body into a PullRequestEvent.

    Accepts both ``pull_request`` and ``pull_request_review`` deliveries; the
    latter carries no top-level ``number`` so the PR's own number is used.
    Raises PayloadError for anything that cannot be labelled.
    """
    if not isinstance(payload, dict):
        raise PayloadError("Webhook body must be a JSON object")

    pr = _require(payload, "pull_request", dict, "")
    pr_number = _require(pr, "number", int, "pull_request.")
    base = _require(pr, "base", dict, "pull_request.")
    head = _require(pr, "head", dict, "pull_request.")

    labels = pr.get("labels") or []
    if not isinstance(labels, list):
        raise PayloadError("Field pull_request.labels must be a list")
    label_names = []
    for label in labels:
        label_names.append(_require(label, "name", str, "pull_request.labels[]."))

    info = PullRequestInfo(
        number=pr_number,
        draft=bool(pr.get("draft", False)),
        title=pr.get("title") or "",
        base_ref=_require(base, "ref", str, "pull_request.base."),
        head_ref=_require(head, "ref", str, "pull_request.head."),
        labels=frozenset(label_names),
    )

    number = payload.get("number", pr_number)
    if isinstance(number, bool) or not isinstance(number, int):
        raise PayloadError("Field number must be an integer")

    return PullRequestEvent(action=str(payload.get("action", "")), number=number, pull_request=info)
