"""Data models for the generation engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from boardkit.github.models import RepoLabel


class GenerationStage(str, Enum):
    """Where a generation run currently is."""

    IDLE = "idle"
    SNAPSHOT_FETCHED = "snapshot_fetched"
    LABELS_RECONCILED = "labels_reconciled"
    ISSUES_CREATED = "issues_created"
    BOARD_PROVISIONED = "board_provisioned"
    ITEMS_PLACED = "items_placed"
    BOARD_SKIPPED = "board_skipped"
    BOARD_FAILED = "board_failed"
    DONE = "done"


class LabelOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class IssueOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class PlacementOutcome(str, Enum):
    PLACED = "placed"
    FAILED = "failed"


@dataclass(frozen=True)
class RepositorySnapshot:
    """Point-in-time view of a repository, read once per run.

    Attributes:
        labels: Existing labels keyed by name.
        issue_titles: Titles of all issues, open and closed.
    """

    labels: Mapping[str, RepoLabel]
    issue_titles: frozenset[str]


@dataclass(frozen=True)
class LabelResult:
    """What happened to one template label."""

    name: str
    outcome: LabelOutcome
    error: str | None = None


@dataclass(frozen=True)
class CreatedIssue:
    """An issue created during this run; the phase drives board placement."""

    issue_number: int
    phase_name: str


@dataclass(frozen=True)
class IssueResult:
    """What happened to one template issue."""

    title: str
    phase_name: str
    outcome: IssueOutcome
    issue_number: int | None = None
    error: str | None = None

    @property
    def created_issue(self) -> CreatedIssue | None:
        if self.outcome is not IssueOutcome.CREATED or self.issue_number is None:
            return None
        return CreatedIssue(issue_number=self.issue_number, phase_name=self.phase_name)


@dataclass(frozen=True)
class ColumnOption:
    """A board column as an option id of the project's status field."""

    option_id: str
    name: str


@dataclass(frozen=True)
class ProvisionedBoard:
    """A project board ready for item placement.

    ``column_options`` mirrors the requested column order; index 0 is the
    default placement target.
    """

    project_id: str
    project_number: int
    project_url: str
    field_id: str
    field_name: str
    column_options: tuple[ColumnOption, ...]

    @property
    def first_column(self) -> ColumnOption:
        return self.column_options[0]

    def option_for(self, column_name: str) -> ColumnOption | None:
        for option in self.column_options:
            if option.name == column_name:
                return option
        return None


@dataclass(frozen=True)
class PlacementResult:
    """What happened when placing one created issue on the board."""

    issue_number: int
    outcome: PlacementOutcome
    column_name: str | None = None
    item_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class GenerationProgress:
    """Progress notification passed to an optional callback."""

    phase: str
    current: int
    total: int


@dataclass(frozen=True)
class GenerationResult:
    """Aggregate outcome of one generation run.

    Counts are derived from the per-item outcome lists, which also record
    every failure that was caught and skipped over.
    """

    label_results: tuple[LabelResult, ...] = ()
    issue_results: tuple[IssueResult, ...] = ()
    placement_results: tuple[PlacementResult, ...] = ()
    project_url: str | None = None
    board_error: str | None = None
    warnings: tuple[str, ...] = ()

    def _count_labels(self, outcome: LabelOutcome) -> int:
        return sum(1 for r in self.label_results if r.outcome is outcome)

    @property
    def labels_created(self) -> int:
        return self._count_labels(LabelOutcome.CREATED)

    @property
    def labels_updated(self) -> int:
        return self._count_labels(LabelOutcome.UPDATED)

    @property
    def labels_unchanged(self) -> int:
        return self._count_labels(LabelOutcome.UNCHANGED)

    @property
    def labels_failed(self) -> int:
        return self._count_labels(LabelOutcome.FAILED)

    @property
    def issues_created(self) -> int:
        return sum(1 for r in self.issue_results if r.outcome is IssueOutcome.CREATED)

    @property
    def issues_skipped(self) -> int:
        """Issues not created, whether they already existed or creation failed."""
        return sum(1 for r in self.issue_results if r.outcome is not IssueOutcome.CREATED)

    @property
    def failures(self) -> list[str]:
        """One line per item or stage that failed."""
        lines = [f"label '{r.name}': {r.error}" for r in self.label_results if r.error]
        lines += [f"issue '{r.title}': {r.error}" for r in self.issue_results if r.error]
        lines += [
            f"placement of #{r.issue_number}: {r.error}"
            for r in self.placement_results
            if r.error
        ]
        if self.board_error:
            lines.append(f"board: {self.board_error}")
        return lines

    def to_summary(self) -> dict[str, Any]:
        """Caller-facing counts, keyed as the web client expects them."""
        summary: dict[str, Any] = {
            "issuesCreated": self.issues_created,
            "labelsCreated": self.labels_created,
            "labelsUpdated": self.labels_updated,
            "issuesSkipped": self.issues_skipped,
        }
        if self.project_url is not None:
            summary["projectUrl"] = self.project_url
        return summary
