"""Data models for GitHub access."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LabelCreateStatus(str, Enum):
    """Outcome of a label create call."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class RepoLabel:
    """A label that exists in a repository."""

    name: str
    color: str
    description: str = ""


@dataclass(frozen=True)
class RepoIssue:
    """An existing issue (pull requests excluded)."""

    number: int
    title: str
    state: str = "open"


@dataclass(frozen=True)
class Repository:
    """A repository visible to the token owner."""

    id: int
    name: str
    full_name: str
    owner: str
    private: bool
    html_url: str
    description: str | None = None


@dataclass(frozen=True)
class RepositoryIds:
    """GraphQL node ids of a repository and its owner."""

    owner_id: str
    repo_id: str


@dataclass(frozen=True)
class CreatedProject:
    """A freshly created Projects (v2) board."""

    project_id: str
    number: int
    url: str


@dataclass(frozen=True)
class FieldOption:
    """One option of a single-select project field."""

    option_id: str
    name: str
    color: str = "GRAY"
    description: str = ""


@dataclass(frozen=True)
class NewFieldOption:
    """An option to be created on a single-select field."""

    name: str
    color: str = "GRAY"
    description: str = ""


@dataclass(frozen=True)
class SingleSelectField:
    """A single-select project field and its options in display order."""

    field_id: str
    name: str
    options: tuple[FieldOption, ...] = ()
