"""ProjectBoardProvisioner - Creates a project whose status options are the board columns."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

from boardkit.generation.exceptions import BoardProvisioningError
from boardkit.generation.models import ColumnOption, ProvisionedBoard
from boardkit.github.exceptions import GitHubAuthError
from boardkit.github.models import NewFieldOption, SingleSelectField
from boardkit.logging import sanitize_for_log

if TYPE_CHECKING:
    from boardkit.board import BoardColumn, BoardConfiguration
    from boardkit.github.models import CreatedProject
    from boardkit.github.protocols import ProjectGraphAccess

logger = logging.getLogger(__name__)

STATUS_FIELD_NAME = "Status"
FALLBACK_FIELD_NAME = "Workflow"

# Colors accepted by ProjectV2SingleSelectFieldOptionColor, cycled per column
OPTION_COLORS = ("GRAY", "BLUE", "YELLOW", "ORANGE", "GREEN", "PURPLE", "PINK", "RED")


def option_color(index: int) -> str:
    return OPTION_COLORS[index % len(OPTION_COLORS)]


class ProjectBoardProvisioner:
    """Creates a fresh Projects (v2) board for every run that asks for one.

    Steps:
    1. Resolve owner and repository node ids.
    2. Create the project, linked to the repository.
    3. Reuse the built-in "Status" field, replacing its options with one per
       column, or create a "Workflow" field when there is no status field.
    4. Report the option ids in column order.

    Boards are never reused or updated across runs.
    """

    def __init__(self, graph: ProjectGraphAccess) -> None:
        self.graph = graph

    def provision(
        self,
        board_config: BoardConfiguration,
        owner: str,
        repo: str,
        template_name: str = "",
    ) -> ProvisionedBoard:
        """Create and configure a project board.

        Args:
            board_config: Requested board; its columns define the options.
            owner: Repository owner login.
            repo: Repository name.
            template_name: Used for the title when the board has no name.

        Returns:
            The provisioned board with options in column order.

        Raises:
            BoardProvisioningError: If any step fails.
        """
        if not board_config.columns:
            raise BoardProvisioningError("Board configuration has no columns")

        try:
            return self._provision(board_config, owner, repo, template_name)
        except (BoardProvisioningError, GitHubAuthError):
            raise
        except Exception as e:
            raise BoardProvisioningError(
                f"Failed to provision board: {sanitize_for_log(str(e))}"
            ) from e

    def _provision(
        self,
        board_config: BoardConfiguration,
        owner: str,
        repo: str,
        template_name: str,
    ) -> ProvisionedBoard:
        ids = self.graph.resolve_owner_and_repo_ids(owner, repo)
        title = board_config.project_title(template_name)
        project = self.graph.create_project(ids.owner_id, title, ids.repo_id)

        fields = self.graph.get_single_select_fields(project.project_id)
        status_field = next((f for f in fields if f.name == STATUS_FIELD_NAME), None)

        if status_field is not None:
            logger.info("Rewriting options of %s field", STATUS_FIELD_NAME)
            field = self._rewrite_options(project, status_field, board_config.columns)
        else:
            logger.info("No %s field, creating %s field", STATUS_FIELD_NAME, FALLBACK_FIELD_NAME)
            field = self.graph.create_single_select_field(
                project.project_id,
                FALLBACK_FIELD_NAME,
                [
                    NewFieldOption(
                        name=column.name,
                        color=option_color(index),
                        description=column.description or "",
                    )
                    for index, column in enumerate(board_config.columns)
                ],
            )

        board = ProvisionedBoard(
            project_id=project.project_id,
            project_number=project.number,
            project_url=project.url,
            field_id=field.field_id,
            field_name=field.name,
            column_options=_order_options(field, board_config.columns),
        )
        logger.info(
            "Provisioned board %s with columns %s",
            board.project_url,
            [option.name for option in board.column_options],
        )
        return board

    def _current_field(self, project_id: str, field_id: str) -> SingleSelectField:
        for current in self.graph.get_single_select_fields(project_id):
            if current.field_id == field_id:
                return current
        raise BoardProvisioningError(f"Field {field_id} disappeared from project {project_id}")

    def _rewrite_options(
        self,
        project: CreatedProject,
        field: SingleSelectField,
        columns: Sequence[BoardColumn],
    ) -> SingleSelectField:
        # Every option edit rewrites the whole list and GitHub reissues option
        # ids, so each deletion targets the current option by name.
        kept: Counter[str] = Counter()
        for original in field.options:
            current = self._current_field(project.project_id, field.field_id)
            matches = [o for o in current.options if o.name == original.name]
            if len(matches) <= kept[original.name]:
                continue
            option = matches[kept[original.name]]
            try:
                self.graph.delete_field_option(
                    project.project_id, field.field_id, option.option_id
                )
            except GitHubAuthError:
                raise
            except Exception as e:
                kept[original.name] += 1
                logger.warning(
                    "Could not delete option %r from %s: %s",
                    option.name,
                    field.name,
                    sanitize_for_log(str(e)),
                )

        for index, column in enumerate(columns):
            self.graph.create_field_option(
                project.project_id,
                field.field_id,
                column.name,
                option_color(index),
                column.description or "",
            )

        final = self._current_field(project.project_id, field.field_id)
        if [o.name for o in final.options] != [c.name for c in columns]:
            logger.warning(
                "Field %s kept %d option(s) it could not delete",
                final.name,
                sum(kept.values()),
            )
        return final


def _order_options(
    field: SingleSelectField, columns: Sequence[BoardColumn]
) -> tuple[ColumnOption, ...]:
    """Match field options to columns by name, in column order.

    When a leftover option shares a column's name, the most recently added
    one wins.
    """
    by_name = {option.name: option for option in field.options}
    ordered: list[ColumnOption] = []
    for column in columns:
        option = by_name.get(column.name)
        if option is None:
            raise BoardProvisioningError(
                f"Field {field.name} has no option for column '{column.name}'"
            )
        ordered.append(ColumnOption(option_id=option.option_id, name=option.name))
    return tuple(ordered)
