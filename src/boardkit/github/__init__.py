"""GitHub access - REST and GraphQL clients behind the engine's capability contracts."""

from boardkit.github.exceptions import (
    GitHubAuthError,
    GitHubError,
    GraphQLError,
    NotFoundError,
    RateLimitError,
    RepositoryAccessError,
    ResponseShapeError,
)
from boardkit.github.graphql import GitHubGraphClient
from boardkit.github.models import (
    CreatedProject,
    FieldOption,
    LabelCreateStatus,
    NewFieldOption,
    RepoIssue,
    RepoLabel,
    Repository,
    RepositoryIds,
    SingleSelectField,
)
from boardkit.github.protocols import IssueAccess, ProjectGraphAccess
from boardkit.github.rest import GitHubRestClient

__all__ = [
    "CreatedProject",
    "FieldOption",
    "GitHubAuthError",
    "GitHubError",
    "GitHubGraphClient",
    "GitHubRestClient",
    "GraphQLError",
    "IssueAccess",
    "LabelCreateStatus",
    "NewFieldOption",
    "NotFoundError",
    "ProjectGraphAccess",
    "RateLimitError",
    "RepoIssue",
    "RepoLabel",
    "Repository",
    "RepositoryAccessError",
    "RepositoryIds",
    "ResponseShapeError",
    "SingleSelectField",
]
