"""ItemPlacementEngine - Puts newly created issues on the project board."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from boardkit.generation.models import (
    ColumnOption,
    CreatedIssue,
    PlacementOutcome,
    PlacementResult,
    ProvisionedBoard,
)
from boardkit.generation.throttle import Throttle
from boardkit.github.exceptions import GitHubAuthError
from boardkit.logging import sanitize_for_log

if TYPE_CHECKING:
    from boardkit.board import PhaseColumnMapping
    from boardkit.github.protocols import ProjectGraphAccess

logger = logging.getLogger(__name__)


class PlacementPolicy(str, Enum):
    """How created issues are assigned to columns.

    FIRST_COLUMN puts every issue in the first column (e.g. Todo or Backlog)
    whatever its phase. PHASE_MAPPING routes each issue by its phase's mapping
    and falls back to the first column.
    """

    FIRST_COLUMN = "first_column"
    PHASE_MAPPING = "phase_mapping"


class ItemPlacementEngine:
    """Adds created issues to the project and sets their column.

    Each issue goes through: resolve node id, add to project, set the field
    value, throttle. A failure on one issue is recorded and logged; already
    placed issues stay where they are.
    """

    def __init__(
        self,
        graph: ProjectGraphAccess,
        owner: str,
        repo: str,
        throttle: Throttle | None = None,
        policy: PlacementPolicy = PlacementPolicy.FIRST_COLUMN,
    ) -> None:
        self.graph = graph
        self.owner = owner
        self.repo = repo
        self.throttle = throttle or Throttle()
        self.policy = policy

    def place(
        self,
        board: ProvisionedBoard,
        created_issues: Sequence[CreatedIssue],
        phase_mapping: Sequence[PhaseColumnMapping] = (),
    ) -> list[PlacementResult]:
        """Place each created issue on the board.

        Args:
            board: Provisioned board with options in column order.
            created_issues: Issues created in this run, in creation order.
            phase_mapping: Phase to column routing, used by PHASE_MAPPING only.

        Returns:
            One result per issue, in input order.
        """
        columns = {m.phase_name: m.column_name for m in phase_mapping}
        results: list[PlacementResult] = []
        for issue in created_issues:
            column = self.column_for(board, issue, columns)
            results.append(self._place_one(board, issue, column))

        placed = sum(1 for r in results if r.outcome is PlacementOutcome.PLACED)
        logger.info("Placed %d of %d issue(s) on %s", placed, len(results), board.project_url)
        return results

    def column_for(
        self,
        board: ProvisionedBoard,
        issue: CreatedIssue,
        phase_columns: dict[str, str],
    ) -> ColumnOption:
        """Column an issue should be placed in under the current policy."""
        if self.policy is PlacementPolicy.PHASE_MAPPING:
            column_name = phase_columns.get(issue.phase_name)
            if column_name is not None:
                option = board.option_for(column_name)
                if option is not None:
                    return option
                logger.debug("Column %r not on board, using first column", column_name)
        return board.first_column

    def _place_one(
        self, board: ProvisionedBoard, issue: CreatedIssue, column: ColumnOption
    ) -> PlacementResult:
        try:
            content_id = self.graph.resolve_issue_node_id(self.owner, self.repo, issue.issue_number)
            item_id = self.graph.add_item_to_project(board.project_id, content_id)
            self.graph.set_single_select_field_value(
                board.project_id, item_id, board.field_id, column.option_id
            )
        except GitHubAuthError:
            raise
        except Exception as e:
            message = sanitize_for_log(str(e))
            logger.warning("Failed to place issue #%d: %s", issue.issue_number, message)
            return PlacementResult(
                issue_number=issue.issue_number,
                outcome=PlacementOutcome.FAILED,
                column_name=column.name,
                error=message,
            )
        finally:
            self.throttle.wait()

        logger.debug("Placed issue #%d in %s", issue.issue_number, column.name)
        return PlacementResult(
            issue_number=issue.issue_number,
            outcome=PlacementOutcome.PLACED,
            column_name=column.name,
            item_id=item_id,
        )
