"""Capability contracts the generation engine depends on.

The engine never talks to a concrete client; anything implementing these
protocols (the httpx clients in this package, or an in-memory fake) will do.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from boardkit.github.models import (
    CreatedProject,
    FieldOption,
    LabelCreateStatus,
    NewFieldOption,
    RepoIssue,
    RepoLabel,
    RepositoryIds,
    SingleSelectField,
)


class IssueAccess(Protocol):
    """Label, issue and repository operations (GitHub REST)."""

    def list_labels(self, owner: str, repo: str) -> list[RepoLabel]:
        """List every label in the repository."""
        ...

    def create_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> LabelCreateStatus:
        """Create a label, reporting ALREADY_EXISTS instead of raising on conflict."""
        ...

    def update_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> None:
        """Update color and description of an existing label."""
        ...

    def list_issues(self, owner: str, repo: str, state: str = "all") -> list[RepoIssue]:
        """List issues in the given state."""
        ...

    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Sequence[str],
        assignees: Sequence[str],
    ) -> int:
        """Create an issue and return its number."""
        ...

    def verify_access(self, owner: str, repo: str) -> bool:
        """Whether the repository exists and is reachable."""
        ...


class ProjectGraphAccess(Protocol):
    """Projects (v2) operations (GitHub GraphQL)."""

    def resolve_owner_and_repo_ids(self, owner: str, repo: str) -> RepositoryIds:
        """Look up node ids of the repository and its owner."""
        ...

    def create_project(
        self, owner_id: str, title: str, repository_id: str | None = None
    ) -> CreatedProject:
        """Create a project under the owner."""
        ...

    def get_single_select_fields(self, project_id: str) -> list[SingleSelectField]:
        """List the project's single-select fields."""
        ...

    def delete_field_option(self, project_id: str, field_id: str, option_id: str) -> None:
        """Remove one option from a single-select field."""
        ...

    def create_field_option(
        self,
        project_id: str,
        field_id: str,
        name: str,
        color: str,
        description: str = "",
    ) -> FieldOption:
        """Append an option to a single-select field."""
        ...

    def create_single_select_field(
        self, project_id: str, name: str, options: Sequence[NewFieldOption]
    ) -> SingleSelectField:
        """Create a single-select field with its initial options."""
        ...

    def resolve_issue_node_id(self, owner: str, repo: str, issue_number: int) -> str:
        """Look up the node id of an issue by number."""
        ...

    def add_item_to_project(self, project_id: str, content_id: str) -> str:
        """Add an issue to the project and return the project item id."""
        ...

    def set_single_select_field_value(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> None:
        """Set a single-select field value on a project item."""
        ...
