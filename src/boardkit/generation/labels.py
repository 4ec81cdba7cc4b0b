"""LabelReconciler - Makes repository labels match the template's labels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING

from boardkit.generation.models import LabelOutcome, LabelResult
from boardkit.github.exceptions import GitHubAuthError
from boardkit.github.models import LabelCreateStatus
from boardkit.logging import sanitize_for_log

if TYPE_CHECKING:
    from boardkit.github.models import RepoLabel
    from boardkit.github.protocols import IssueAccess
    from boardkit.templates import GitHubLabel

logger = logging.getLogger(__name__)


def _normalize_color(color: str | None) -> str:
    return (color or "").strip().lstrip("#").lower()


def needs_update(current: RepoLabel, wanted: GitHubLabel) -> bool:
    """Whether an existing label differs from the template's version of it.

    Colors compare case-insensitively; descriptions compare exactly, with a
    missing description equal to an empty one.
    """
    if _normalize_color(current.color) != _normalize_color(wanted.color):
        return True
    return (current.description or "") != (wanted.description or "")


class LabelReconciler:
    """Creates missing labels and updates drifted ones, one at a time.

    A failure on one label is recorded and logged; the remaining labels are
    still processed. Only authentication failures abort the loop.
    """

    def __init__(self, access: IssueAccess, owner: str, repo: str) -> None:
        self.access = access
        self.owner = owner
        self.repo = repo

    def reconcile(
        self,
        existing: Mapping[str, RepoLabel],
        labels: Sequence[GitHubLabel],
        on_result: Callable[[LabelResult], None] | None = None,
    ) -> list[LabelResult]:
        """Reconcile template labels against a snapshot of repository labels.

        Args:
            existing: Labels already in the repository, keyed by name.
            labels: Template labels in template order.
            on_result: Called after each label is handled.

        Returns:
            One result per template label, in template order.
        """
        results: list[LabelResult] = []
        for label in labels:
            result = self._reconcile_one(existing.get(label.name), label)
            results.append(result)
            if on_result is not None:
                on_result(result)
        return results

    def _reconcile_one(self, current: RepoLabel | None, label: GitHubLabel) -> LabelResult:
        try:
            if current is None:
                return self._create(label)
            if needs_update(current, label):
                self._update(label)
                return LabelResult(name=label.name, outcome=LabelOutcome.UPDATED)
            logger.debug("Label %s unchanged", label.name)
            return LabelResult(name=label.name, outcome=LabelOutcome.UNCHANGED)
        except GitHubAuthError:
            raise
        except Exception as e:
            message = sanitize_for_log(str(e))
            logger.warning("Failed to reconcile label %s: %s", label.name, message)
            return LabelResult(name=label.name, outcome=LabelOutcome.FAILED, error=message)

    def _create(self, label: GitHubLabel) -> LabelResult:
        status = self.access.create_label(
            self.owner, self.repo, label.name, label.color, label.description
        )
        if status is LabelCreateStatus.ALREADY_EXISTS:
            # Snapshot was stale or differed only in name casing
            logger.info("Label %s already exists, updating instead", label.name)
            self._update(label)
            return LabelResult(name=label.name, outcome=LabelOutcome.UPDATED)
        return LabelResult(name=label.name, outcome=LabelOutcome.CREATED)

    def _update(self, label: GitHubLabel) -> None:
        self.access.update_label(self.owner, self.repo, label.name, label.color, label.description)
