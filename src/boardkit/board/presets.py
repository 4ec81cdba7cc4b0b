"""Column presets for the standard board types."""

from __future__ import annotations

from dataclasses import replace

from boardkit.board.models import BoardColumn, BoardConfiguration, BoardType

BOARD_PRESETS: dict[BoardType, tuple[BoardColumn, ...]] = {
    BoardType.KANBAN: (
        BoardColumn("Todo", "Tasks to be done"),
        BoardColumn("In Progress", "Work in progress"),
        BoardColumn("Done", "Completed tasks"),
    ),
    BoardType.SCRUM: (
        BoardColumn("Backlog", "Future work"),
        BoardColumn("To Do", "Sprint backlog"),
        BoardColumn("In Progress", "Currently being worked on"),
        BoardColumn("In Review", "Under review"),
        BoardColumn("Done", "Completed in this sprint"),
    ),
}

BOARD_TYPE_LABELS: dict[BoardType, str] = {
    BoardType.KANBAN: "Kanban (Todo, In Progress, Done)",
    BoardType.SCRUM: "Scrum (Backlog, To Do, In Progress, In Review, Done)",
    BoardType.CUSTOM: "Custom (Define your own columns)",
    BoardType.NONE: "No Project Board (Issues only)",
}


def preset_columns(board_type: BoardType) -> tuple[BoardColumn, ...]:
    """Columns for a preset board type; empty for custom and none."""
    return BOARD_PRESETS.get(board_type, ())


def with_preset_columns(config: BoardConfiguration) -> BoardConfiguration:
    """Fill in preset columns when a kanban or scrum board has none."""
    if config.columns:
        return config
    columns = preset_columns(config.board_type)
    if not columns:
        return config
    return replace(config, columns=columns)
