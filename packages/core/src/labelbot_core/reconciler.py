"""Turn evaluated conditions into the minimal set of label additions and removals."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from labelbot_core.models import LabelChanges


def reconcile(
    current_labels: Iterable[str],
    conditions: Mapping[str, bool],
    overrides: Mapping[str, bool] | None = None,
) -> LabelChanges:
    """Compute the changes that make the PR's managed labels match ``conditions``.

    Only labels present in ``conditions`` are managed; everything else on the
    PR is left alone. A true condition adds its label unless ``overrides``
    marks it as manually removed. A false condition always removes it.
    Applying the result and calling again with the new labels yields no changes.
    """
    current = set(current_labels)
    overrides = overrides or {}
    to_add = set()
    to_remove = set()

    for label, wanted in conditions.items():
        if wanted:
            if label not in current and not overrides.get(label, False):
                to_add.add(label)
        elif label in current:
            to_remove.add(label)

    return LabelChanges(to_add=frozenset(to_add), to_remove=frozenset(to_remove))
