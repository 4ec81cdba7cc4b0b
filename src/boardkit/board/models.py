"""Data models for project board configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardkit.templates import Template


class BoardType(str, Enum):
    """Kind of board requested by the caller."""

    KANBAN = "kanban"
    SCRUM = "scrum"
    CUSTOM = "custom"
    NONE = "none"


@dataclass(frozen=True)
class BoardColumn:
    """A board column, created as one option of the project's status field."""

    name: str
    description: str | None = None


@dataclass(frozen=True)
class PhaseColumnMapping:
    """Maps a template phase to the column its issues belong in."""

    phase_name: str
    column_name: str


@dataclass(frozen=True)
class BoardConfiguration:
    """Controls whether and how a project board is created.

    Attributes:
        enabled: Whether a board was requested at all.
        board_type: Preset family of the board; NONE disables the board.
        board_name: Project title. Blank means "<template name> Board".
        columns: Ordered columns; index 0 is the default placement target.
        phase_mapping: Phase to column routing, in declaration order.
    """

    enabled: bool = False
    board_type: BoardType = BoardType.CUSTOM
    board_name: str = ""
    columns: tuple[BoardColumn, ...] = ()
    phase_mapping: tuple[PhaseColumnMapping, ...] = ()

    def __post_init__(self) -> None:
        names = [column.name for column in self.columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate board column names: {', '.join(duplicates)}")

    @property
    def wants_board(self) -> bool:
        """True when a board should be provisioned for this configuration."""
        return self.enabled and self.board_type is not BoardType.NONE and bool(self.columns)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def project_title(self, template_name: str) -> str:
        """Title for the created project."""
        return self.board_name.strip() or f"{template_name} Board"

    def validate_phase_mapping(self, template: Template) -> list[str]:
        """Report mapping entries that do not line up with the template or columns.

        Problems are advisory: generation still runs and unmatched phases are
        placed in the first column.

        Returns:
            Human-readable problem descriptions, empty when the mapping is clean.
        """
        problems: list[str] = []
        phase_names = set(template.phase_names)
        column_names = set(self.column_names)
        for mapping in self.phase_mapping:
            if mapping.phase_name not in phase_names:
                problems.append(f"Mapping references unknown phase '{mapping.phase_name}'")
            if mapping.column_name not in column_names:
                problems.append(
                    f"Phase '{mapping.phase_name}' maps to unknown column '{mapping.column_name}'"
                )
        return problems
