"""Board configuration and column presets."""

from boardkit.board.models import (
    BoardColumn,
    BoardConfiguration,
    BoardType,
    PhaseColumnMapping,
)
from boardkit.board.presets import (
    BOARD_PRESETS,
    BOARD_TYPE_LABELS,
    preset_columns,
    with_preset_columns,
)

__all__ = [
    "BOARD_PRESETS",
    "BOARD_TYPE_LABELS",
    "BoardColumn",
    "BoardConfiguration",
    "BoardType",
    "PhaseColumnMapping",
    "preset_columns",
    "with_preset_columns",
]
