"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from boardkit.generation import Throttle
from boardkit.github import (
    CreatedProject,
    FieldOption,
    GitHubError,
    LabelCreateStatus,
    NewFieldOption,
    NotFoundError,
    RepoIssue,
    RepoLabel,
    RepositoryIds,
    SingleSelectField,
)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeGitHub:
    """In-memory repository plus Projects (v2) backend.

    Implements both IssueAccess and ProjectGraphAccess. Every call is
    appended to ``calls`` as ``(method_name, *key_args)`` so tests can assert
    on order. Failures are injected by name, title or issue number.
    """

    def __init__(self, with_status_field: bool = True) -> None:
        self.with_status_field = with_status_field
        self.labels: dict[str, RepoLabel] = {}
        self.issues: list[RepoIssue] = []
        self.calls: list[tuple] = []

        self.fail_labels: set[str] = set()
        self.fail_issues: set[str] = set()
        self.fail_placements: set[int] = set()
        self.fail_create_project = False
        self.accessible = True
        self.closed = False

        self.projects: dict[str, CreatedProject] = {}
        self.fields: dict[str, list[SingleSelectField]] = {}
        self.items: dict[str, tuple[str, str]] = {}  # item id -> (project id, content id)
        self.field_values: dict[str, tuple[str, str]] = {}  # item id -> (field id, option id)
        self._next_id = 0

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}_{self._next_id}"

    # Seeding helpers

    def add_label(self, name: str, color: str, description: str = "") -> None:
        self.labels[name] = RepoLabel(name=name, color=color, description=description)

    def add_issue(self, title: str, state: str = "open") -> int:
        number = len(self.issues) + 1
        self.issues.append(RepoIssue(number=number, title=title, state=state))
        return number

    def calls_to(self, method: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == method]

    # IssueAccess

    def list_labels(self, owner: str, repo: str) -> list[RepoLabel]:
        self.calls.append(("list_labels", owner, repo))
        return list(self.labels.values())

    def create_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> LabelCreateStatus:
        self.calls.append(("create_label", name))
        if name in self.fail_labels:
            raise GitHubError(f"Failed to create label '{name}': 500")
        if name in self.labels:
            return LabelCreateStatus.ALREADY_EXISTS
        self.labels[name] = RepoLabel(name=name, color=color, description=description)
        return LabelCreateStatus.CREATED

    def update_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> None:
        self.calls.append(("update_label", name))
        if name in self.fail_labels:
            raise GitHubError(f"Failed to update label '{name}': 500")
        if name not in self.labels:
            raise NotFoundError(f"Label '{name}' not found")
        self.labels[name] = RepoLabel(name=name, color=color, description=description)

    def list_issues(self, owner: str, repo: str, state: str = "all") -> list[RepoIssue]:
        self.calls.append(("list_issues", owner, repo, state))
        if state == "all":
            return list(self.issues)
        return [issue for issue in self.issues if issue.state == state]

    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Sequence[str],
        assignees: Sequence[str],
    ) -> int:
        self.calls.append(("create_issue", title))
        if title in self.fail_issues:
            raise GitHubError(f"Failed to create issue '{title}': 500")
        return self.add_issue(title)

    def verify_access(self, owner: str, repo: str) -> bool:
        self.calls.append(("verify_access", owner, repo))
        return self.accessible

    def close(self) -> None:
        self.closed = True

    # ProjectGraphAccess

    def resolve_owner_and_repo_ids(self, owner: str, repo: str) -> RepositoryIds:
        self.calls.append(("resolve_owner_and_repo_ids", owner, repo))
        return RepositoryIds(owner_id=f"U_{owner}", repo_id=f"R_{repo}")

    def create_project(
        self, owner_id: str, title: str, repository_id: str | None = None
    ) -> CreatedProject:
        self.calls.append(("create_project", owner_id, title, repository_id))
        if self.fail_create_project:
            raise GitHubError("createProjectV2 failed")
        number = len(self.projects) + 1
        project = CreatedProject(
            project_id=self._new_id("PVT"),
            number=number,
            url=f"https://github.com/users/octo/projects/{number}",
        )
        self.projects[project.project_id] = project
        fields: list[SingleSelectField] = []
        if self.with_status_field:
            fields.append(
                SingleSelectField(
                    field_id=self._new_id("PVTSSF"),
                    name="Status",
                    options=tuple(
                        FieldOption(option_id=self._new_id("OPT"), name=name)
                        for name in ("Todo", "In Progress", "Done")
                    ),
                )
            )
        self.fields[project.project_id] = fields
        return project

    def get_single_select_fields(self, project_id: str) -> list[SingleSelectField]:
        self.calls.append(("get_single_select_fields", project_id))
        if project_id not in self.fields:
            raise NotFoundError(f"Project {project_id} not found")
        return list(self.fields[project_id])

    def _replace_options(
        self, project_id: str, field: SingleSelectField, options: Sequence[FieldOption]
    ) -> SingleSelectField:
        """Write a new option list; like GitHub, every option gets a fresh id."""
        updated = SingleSelectField(
            field.field_id,
            field.name,
            tuple(
                FieldOption(
                    option_id=self._new_id("OPT"),
                    name=o.name,
                    color=o.color,
                    description=o.description,
                )
                for o in options
            ),
        )
        self.fields[project_id] = [
            updated if f.field_id == field.field_id else f for f in self.fields[project_id]
        ]
        return updated

    def _field(self, project_id: str, field_id: str) -> SingleSelectField:
        for field in self.fields.get(project_id, []):
            if field.field_id == field_id:
                return field
        raise NotFoundError(f"Field {field_id} not found")

    def delete_field_option(self, project_id: str, field_id: str, option_id: str) -> None:
        self.calls.append(("delete_field_option", option_id))
        field = self._field(project_id, field_id)
        remaining = tuple(o for o in field.options if o.option_id != option_id)
        if len(remaining) == len(field.options):
            raise NotFoundError(f"Option {option_id} not found")
        self._replace_options(project_id, field, remaining)

    def create_field_option(
        self,
        project_id: str,
        field_id: str,
        name: str,
        color: str,
        description: str = "",
    ) -> FieldOption:
        self.calls.append(("create_field_option", name))
        field = self._field(project_id, field_id)
        new = FieldOption(option_id="", name=name, color=color, description=description)
        updated = self._replace_options(project_id, field, (*field.options, new))
        return updated.options[-1]

    def create_single_select_field(
        self, project_id: str, name: str, options: Sequence[NewFieldOption]
    ) -> SingleSelectField:
        self.calls.append(("create_single_select_field", name, [o.name for o in options]))
        field = SingleSelectField(
            field_id=self._new_id("PVTSSF"),
            name=name,
            options=tuple(
                FieldOption(
                    option_id=self._new_id("OPT"),
                    name=o.name,
                    color=o.color,
                    description=o.description,
                )
                for o in options
            ),
        )
        self.fields[project_id].append(field)
        return field

    def resolve_issue_node_id(self, owner: str, repo: str, issue_number: int) -> str:
        self.calls.append(("resolve_issue_node_id", issue_number))
        if issue_number in self.fail_placements:
            raise NotFoundError(f"Issue #{issue_number} not found")
        return f"I_{issue_number}"

    def add_item_to_project(self, project_id: str, content_id: str) -> str:
        self.calls.append(("add_item_to_project", content_id))
        item_id = self._new_id("PVTI")
        self.items[item_id] = (project_id, content_id)
        return item_id

    def set_single_select_field_value(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> None:
        self.calls.append(("set_single_select_field_value", item_id, option_id))
        self.field_values[item_id] = (field_id, option_id)

    # Inspection helpers

    def option_of_issue(self, issue_number: int) -> str | None:
        """Option id set on the project item holding issue ``issue_number``."""
        for item_id, (_project_id, content_id) in self.items.items():
            if content_id == f"I_{issue_number}" and item_id in self.field_values:
                return self.field_values[item_id][1]
        return None


# Shared fixtures


@pytest.fixture
def github() -> FakeGitHub:
    """In-memory GitHub backend with an empty repository."""
    return FakeGitHub()


@pytest.fixture
def no_throttle() -> Throttle:
    """A throttle that never sleeps."""
    return Throttle.disabled()


@pytest.fixture
def github_without_status() -> FakeGitHub:
    """In-memory GitHub backend whose new projects have no Status field."""
    return FakeGitHub(with_status_field=False)
