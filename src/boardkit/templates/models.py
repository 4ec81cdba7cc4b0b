"""Data models for project templates."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class GitHubLabel:
    """A label the template wants to exist in the repository.

    Attributes:
        name: Label name, unique within a template.
        color: Six hex characters without a leading '#'.
        description: Label description shown by GitHub.
    """

    name: str
    color: str
    description: str = ""


@dataclass(frozen=True)
class Issue:
    """An issue to be opened in the repository."""

    title: str
    body: str = ""
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()


@dataclass(frozen=True)
class Phase:
    """A named group of issues, usually mapped to a board column."""

    name: str
    description: str = ""
    issues: tuple[Issue, ...] = ()
    duration: str | None = None


@dataclass(frozen=True)
class Template:
    """Declarative description of the labels and issues a repository should have.

    ``name``, ``description``, ``icon`` and ``category`` are display metadata
    only; generation reads ``labels`` and ``phases``.
    """

    id: str
    name: str
    description: str = ""
    category: str = ""
    icon: str = ""
    labels: tuple[GitHubLabel, ...] = ()
    phases: tuple[Phase, ...] = ()
    estimated_issues: int | None = None

    @property
    def issue_count(self) -> int:
        """Number of issues across all phases."""
        return sum(len(phase.issues) for phase in self.phases)

    @property
    def phase_names(self) -> list[str]:
        return [phase.name for phase in self.phases]

    def iter_issues(self) -> Iterator[tuple[Phase, Issue]]:
        """Yield ``(phase, issue)`` pairs in phase order, then issue order."""
        for phase in self.phases:
            for issue in phase.issues:
                yield phase, issue
