"""Detect labels a person removed by hand so the bot does not put them back.

Two policies are supported (``override_policy`` in .labelbot.yml):
  never            : any human removal in the PR's history blocks re-adding
                     the label for the life of the PR.
  until_relabeled  : a later ``labeled`` event for the same label, by anyone,
                     cancels the removal and the bot manages the label again.

Overrides only ever block additions. A label whose condition is false is
still removed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from labelbot_core.models import LABELED, UNLABELED, TimelineLabelEvent


def _is_human(event: TimelineLabelEvent, bot_login: str) -> bool:
    return event.actor_login != bot_login


def was_manually_removed(
    label: str,
    events: Sequence[TimelineLabelEvent],
    bot_login: str,
    policy: str = "never",
) -> bool:
    """Return True if a human removal of ``label`` is still in force.

    ``events`` must be oldest-first, as GitHub lists issue events.
    """
    if policy == "never":
        return any(e.kind == UNLABELED and e.label_name == label and _is_human(e, bot_login) for e in events)

    if policy == "until_relabeled":
        removed = False
        for event in events:
            if event.label_name != label:
                continue
            if event.kind == UNLABELED and _is_human(event, bot_login):
                removed = True
            elif event.kind == LABELED:
                removed = False
        return removed

    raise ValueError(f"Unknown override policy: {policy!r}")


def manual_overrides(
    labels: Iterable[str],
    events: Sequence[TimelineLabelEvent],
    bot_login: str,
    policy: str = "never",
) -> dict[str, bool]:
    return {label: was_manually_removed(label, events, bot_login, policy) for label in labels}
