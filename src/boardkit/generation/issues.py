"""IssueDeduplicator - Opens template issues that the repository does not have yet."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence, Set
from typing import TYPE_CHECKING

from boardkit.generation.models import IssueOutcome, IssueResult
from boardkit.generation.throttle import Throttle
from boardkit.github.exceptions import GitHubAuthError
from boardkit.logging import sanitize_for_log

if TYPE_CHECKING:
    from boardkit.github.protocols import IssueAccess
    from boardkit.templates import Issue, Phase

logger = logging.getLogger(__name__)


def normalize_body(body: str) -> str:
    """Turn literal backslash-n sequences into real line breaks."""
    return body.replace("\\n", "\n")


class IssueDeduplicator:
    """Creates issues whose titles are not already taken, in template order.

    Titles match exactly and case-sensitively against the snapshot. A failed
    creation is recorded, logged and counted as skipped; the loop continues.
    """

    def __init__(
        self,
        access: IssueAccess,
        owner: str,
        repo: str,
        throttle: Throttle | None = None,
    ) -> None:
        self.access = access
        self.owner = owner
        self.repo = repo
        self.throttle = throttle or Throttle()

    def dedupe(
        self,
        existing_titles: Set[str],
        phases: Sequence[Phase],
        on_result: Callable[[IssueResult], None] | None = None,
    ) -> list[IssueResult]:
        """Create missing issues phase by phase.

        Args:
            existing_titles: Titles of every issue already in the repository.
            phases: Template phases in order.
            on_result: Called after each issue is handled.

        Returns:
            One result per template issue, in phase then issue order.
        """
        seen = set(existing_titles)
        results: list[IssueResult] = []
        for phase in phases:
            for issue in phase.issues:
                result = self._dedupe_one(issue, phase.name, seen)
                results.append(result)
                if on_result is not None:
                    on_result(result)
        return results

    def _dedupe_one(self, issue: Issue, phase_name: str, seen: set[str]) -> IssueResult:
        if issue.title in seen:
            logger.debug("Skipping existing issue %r", issue.title)
            return IssueResult(title=issue.title, phase_name=phase_name, outcome=IssueOutcome.SKIPPED)

        try:
            number = self.access.create_issue(
                self.owner,
                self.repo,
                issue.title,
                normalize_body(issue.body),
                issue.labels,
                issue.assignees,
            )
        except GitHubAuthError:
            raise
        except Exception as e:
            message = sanitize_for_log(str(e))
            logger.warning("Failed to create issue %r: %s", issue.title, message)
            return IssueResult(
                title=issue.title,
                phase_name=phase_name,
                outcome=IssueOutcome.FAILED,
                error=message,
            )
        finally:
            self.throttle.wait()

        seen.add(issue.title)
        return IssueResult(
            title=issue.title,
            phase_name=phase_name,
            outcome=IssueOutcome.CREATED,
            issue_number=number,
        )
