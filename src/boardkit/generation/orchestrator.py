"""BoardGenerator - Sequences label, issue and board generation for one repository."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from boardkit.generation.issues import IssueDeduplicator
from boardkit.generation.labels import LabelReconciler
from boardkit.generation.models import (
    GenerationProgress,
    GenerationResult,
    GenerationStage,
    IssueResult,
    LabelResult,
    PlacementResult,
    RepositorySnapshot,
)
from boardkit.generation.placement import ItemPlacementEngine, PlacementPolicy
from boardkit.generation.provisioner import ProjectBoardProvisioner
from boardkit.generation.throttle import Throttle
from boardkit.github.exceptions import GitHubAuthError
from boardkit.logging import sanitize_for_log

if TYPE_CHECKING:
    from boardkit.board import BoardConfiguration
    from boardkit.generation.models import CreatedIssue
    from boardkit.github.protocols import IssueAccess, ProjectGraphAccess
    from boardkit.templates import Template

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[GenerationProgress], None]


class BoardGenerator:
    """Turns a template into labels, issues and an optional project board.

    Stages run strictly in order, one remote call at a time:
    snapshot -> labels -> issues -> (board -> placement).

    Per-item failures are recorded in the result and never stop a run. A
    failure anywhere in the board stage leaves the run without a project URL
    but keeps the labels and issues already created. Authentication failures
    propagate to the caller from every stage.
    """

    def __init__(
        self,
        issues: IssueAccess,
        projects: ProjectGraphAccess,
        throttle: Throttle | None = None,
        placement_policy: PlacementPolicy = PlacementPolicy.FIRST_COLUMN,
    ) -> None:
        """Initialize the generator.

        Args:
            issues: Label, issue and repository access.
            projects: Projects (v2) access.
            throttle: Spacing between creation calls. Defaults to 100ms.
            placement_policy: Column routing for created issues.
        """
        self.issues = issues
        self.projects = projects
        self.throttle = throttle or Throttle()
        self.placement_policy = placement_policy
        self.stage = GenerationStage.IDLE

    def _enter(self, stage: GenerationStage) -> None:
        logger.debug("Generation stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def take_snapshot(self, owner: str, repo: str) -> RepositorySnapshot:
        """Read existing labels and issue titles once for this run."""
        labels = {label.name: label for label in self.issues.list_labels(owner, repo)}
        titles = frozenset(issue.title for issue in self.issues.list_issues(owner, repo, state="all"))
        logger.info(
            "Snapshot of %s/%s: %d label(s), %d issue(s)",
            owner,
            repo,
            len(labels),
            len(titles),
        )
        return RepositorySnapshot(labels=labels, issue_titles=titles)

    def generate(
        self,
        owner: str,
        repo: str,
        template: Template,
        board_config: BoardConfiguration | None = None,
        progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Generate labels, issues and optionally a board from a template.

        Args:
            owner: Repository owner login.
            repo: Repository name.
            template: Template describing the desired labels and issues.
            board_config: Board request; None or disabled means no board.
            progress: Called as labels and issues are processed.

        Returns:
            Counts and per-item outcomes of the run.

        Raises:
            GitHubAuthError: If the token is rejected.
        """
        logger.info("Generating template %s into %s/%s", template.id, owner, repo)
        self.stage = GenerationStage.IDLE

        snapshot = self.take_snapshot(owner, repo)
        self._enter(GenerationStage.SNAPSHOT_FETCHED)

        label_results = self._reconcile_labels(owner, repo, template, snapshot, progress)
        self._enter(GenerationStage.LABELS_RECONCILED)

        issue_results = self._create_issues(owner, repo, template, snapshot, progress)
        self._enter(GenerationStage.ISSUES_CREATED)

        created = [r.created_issue for r in issue_results if r.created_issue is not None]

        warnings: list[str] = []
        project_url: str | None = None
        board_error: str | None = None
        placement_results: list[PlacementResult] = []

        if board_config is not None and board_config.wants_board:
            warnings = board_config.validate_phase_mapping(template)
            for warning in warnings:
                logger.warning("Phase mapping: %s", warning)
            try:
                project_url, placement_results = self._build_board(
                    owner, repo, template, board_config, created
                )
            except GitHubAuthError:
                raise
            except Exception as e:
                board_error = sanitize_for_log(str(e))
                logger.exception("Board generation failed for %s/%s: %s", owner, repo, board_error)
                self._enter(GenerationStage.BOARD_FAILED)
        else:
            logger.info("No project board requested")
            self._enter(GenerationStage.BOARD_SKIPPED)

        result = GenerationResult(
            label_results=tuple(label_results),
            issue_results=tuple(issue_results),
            placement_results=tuple(placement_results),
            project_url=project_url,
            board_error=board_error,
            warnings=tuple(warnings),
        )
        self._enter(GenerationStage.DONE)

        logger.info(
            "Generated %s/%s: %d label(s) created, %d updated, %d issue(s) created, %d skipped",
            owner,
            repo,
            result.labels_created,
            result.labels_updated,
            result.issues_created,
            result.issues_skipped,
        )
        return result

    def _reconcile_labels(
        self,
        owner: str,
        repo: str,
        template: Template,
        snapshot: RepositorySnapshot,
        progress: ProgressCallback | None,
    ) -> list[LabelResult]:
        total = len(template.labels)
        done = 0

        def report(_result: LabelResult) -> None:
            nonlocal done
            done += 1
            if progress is not None:
                progress(GenerationProgress(phase="Creating labels", current=done, total=total))

        reconciler = LabelReconciler(self.issues, owner, repo)
        return reconciler.reconcile(snapshot.labels, template.labels, on_result=report)

    def _create_issues(
        self,
        owner: str,
        repo: str,
        template: Template,
        snapshot: RepositorySnapshot,
        progress: ProgressCallback | None,
    ) -> list[IssueResult]:
        total = template.issue_count
        done = 0

        def report(result: IssueResult) -> None:
            nonlocal done
            done += 1
            if progress is not None:
                progress(
                    GenerationProgress(
                        phase=f"Creating issues - {result.phase_name}",
                        current=done,
                        total=total,
                    )
                )

        deduplicator = IssueDeduplicator(self.issues, owner, repo, self.throttle)
        return deduplicator.dedupe(snapshot.issue_titles, template.phases, on_result=report)

    def _build_board(
        self,
        owner: str,
        repo: str,
        template: Template,
        board_config: BoardConfiguration,
        created: list[CreatedIssue],
    ) -> tuple[str, list[PlacementResult]]:
        provisioner = ProjectBoardProvisioner(self.projects)
        board = provisioner.provision(board_config, owner, repo, template.name)
        self._enter(GenerationStage.BOARD_PROVISIONED)

        engine = ItemPlacementEngine(
            self.projects, owner, repo, self.throttle, policy=self.placement_policy
        )
        placements = engine.place(board, created, board_config.phase_mapping)
        self._enter(GenerationStage.ITEMS_PLACED)
        return board.project_url, placements
