"""Generation engine - Reconciles a template against a repository and builds its board."""

from boardkit.generation.exceptions import BoardProvisioningError, GenerationError
from boardkit.generation.issues import IssueDeduplicator, normalize_body
from boardkit.generation.labels import LabelReconciler
from boardkit.generation.models import (
    ColumnOption,
    CreatedIssue,
    GenerationProgress,
    GenerationResult,
    GenerationStage,
    IssueOutcome,
    IssueResult,
    LabelOutcome,
    LabelResult,
    PlacementOutcome,
    PlacementResult,
    ProvisionedBoard,
    RepositorySnapshot,
)
from boardkit.generation.orchestrator import BoardGenerator
from boardkit.generation.placement import ItemPlacementEngine, PlacementPolicy
from boardkit.generation.provisioner import (
    FALLBACK_FIELD_NAME,
    STATUS_FIELD_NAME,
    ProjectBoardProvisioner,
)
from boardkit.generation.throttle import Throttle

__all__ = [
    "FALLBACK_FIELD_NAME",
    "STATUS_FIELD_NAME",
    "BoardGenerator",
    "BoardProvisioningError",
    "ColumnOption",
    "CreatedIssue",
    "GenerationError",
    "GenerationProgress",
    "GenerationResult",
    "GenerationStage",
    "IssueDeduplicator",
    "IssueOutcome",
    "IssueResult",
    "ItemPlacementEngine",
    "LabelOutcome",
    "LabelReconciler",
    "LabelResult",
    "PlacementOutcome",
    "PlacementPolicy",
    "PlacementResult",
    "ProjectBoardProvisioner",
    "ProvisionedBoard",
    "RepositorySnapshot",
    "Throttle",
    "normalize_body",
]
