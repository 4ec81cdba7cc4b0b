"""GitHubGraphClient - Projects (v2) operations over the GitHub GraphQL API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from boardkit.github.exceptions import (
    GitHubError,
    GraphQLError,
    NotFoundError,
    RateLimitError,
    RepositoryAccessError,
)
from boardkit.github.models import (
    CreatedProject,
    FieldOption,
    NewFieldOption,
    RepositoryIds,
    SingleSelectField,
)
from boardkit.github.rest import check_response
from boardkit.github.schema import (
    AddItemData,
    CreateFieldData,
    CreateProjectData,
    IssueNodeData,
    ProjectFieldsData,
    RepositoryIdsData,
    UpdateFieldData,
    UpdateItemFieldData,
    decode,
)
from boardkit.logging import sanitize_for_log

logger = logging.getLogger("boardkit.github")

SINGLE_SELECT_FIELD_FRAGMENT = """
fragment SingleSelectFieldParts on ProjectV2SingleSelectField {
    id
    name
    options {
        id
        name
        color
        description
    }
}
"""

RESOLVE_IDS_QUERY = """
query($owner: String!, $repo: String!) {
    repository(owner: $owner, name: $repo) {
        id
        owner {
            id
        }
    }
}
"""

CREATE_PROJECT_MUTATION = """
mutation($ownerId: ID!, $title: String!, $repositoryId: ID) {
    createProjectV2(input: { ownerId: $ownerId, title: $title, repositoryId: $repositoryId }) {
        projectV2 {
            id
            number
            url
        }
    }
}
"""

PROJECT_FIELDS_QUERY = (
    """
query($projectId: ID!) {
    node(id: $projectId) {
        ... on ProjectV2 {
            fields(first: 50) {
                nodes {
                    ...SingleSelectFieldParts
                }
            }
        }
    }
}
"""
    + SINGLE_SELECT_FIELD_FRAGMENT
)

UPDATE_FIELD_OPTIONS_MUTATION = (
    """
mutation($fieldId: ID!, $options: [ProjectV2SingleSelectFieldOptionInput!]) {
    updateProjectV2Field(input: { fieldId: $fieldId, singleSelectOptions: $options }) {
        projectV2Field {
            ...SingleSelectFieldParts
        }
    }
}
"""
    + SINGLE_SELECT_FIELD_FRAGMENT
)

CREATE_FIELD_MUTATION = (
    """
mutation(
    $projectId: ID!
    $name: String!
    $options: [ProjectV2SingleSelectFieldOptionInput!]
) {
    createProjectV2Field(
        input: {
            projectId: $projectId
            dataType: SINGLE_SELECT
            name: $name
            singleSelectOptions: $options
        }
    ) {
        projectV2Field {
            ...SingleSelectFieldParts
        }
    }
}
"""
    + SINGLE_SELECT_FIELD_FRAGMENT
)

ISSUE_NODE_QUERY = """
query($owner: String!, $repo: String!, $number: Int!) {
    repository(owner: $owner, name: $repo) {
        issue(number: $number) {
            id
        }
    }
}
"""

ADD_ITEM_MUTATION = """
mutation($projectId: ID!, $contentId: ID!) {
    addProjectV2ItemById(input: { projectId: $projectId, contentId: $contentId }) {
        item {
            id
        }
    }
}
"""

SET_FIELD_VALUE_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
    updateProjectV2ItemFieldValue(
        input: {
            projectId: $projectId
            itemId: $itemId
            fieldId: $fieldId
            value: { singleSelectOptionId: $optionId }
        }
    ) {
        projectV2Item {
            id
        }
    }
}
"""


def _option_input(name: str, color: str, description: str) -> dict[str, str]:
    return {"name": name, "color": color, "description": description}


class GitHubGraphClient:
    """Client for GitHub Projects (ProjectsV2) via GraphQL.

    Implements the ProjectGraphAccess contract. GitHub edits single-select
    options by replacing the whole option list, so option create and delete
    read the field's current options and write back the modified list.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com/graphql",
    ) -> None:
        """Initialize the GraphQL client.

        Args:
            token: GitHub token with project scope
            base_url: GitHub GraphQL API URL (for testing/enterprise)
        """
        self.token = token
        self.base_url = base_url
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for GraphQL API."""
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        reraise=True,
    )
    def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Response data

        Raises:
            GitHubAuthError: If the token is rejected
            RateLimitError: If rate limited after retries
            GraphQLError: If the query returns errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = self.client.post(self.base_url, json=payload)
        check_response(response)

        if response.status_code != 200:
            raise GitHubError(
                f"GraphQL request failed: {response.status_code} - "
                f"{sanitize_for_log(response.text)}"
            )

        data: dict[str, Any] = response.json()
        errors = data.get("errors")
        if errors:
            if any(error.get("type") == "RATE_LIMITED" for error in errors):
                raise RateLimitError(f"GraphQL rate limit hit: {errors}")
            raise GraphQLError(f"GraphQL errors: {errors}")

        return dict(data.get("data") or {})

    def resolve_owner_and_repo_ids(self, owner: str, repo: str) -> RepositoryIds:
        """Look up node ids of the repository and its owner.

        Raises:
            RepositoryAccessError: If the repository is not visible
        """
        data = decode(
            RepositoryIdsData,
            self._graphql(RESOLVE_IDS_QUERY, {"owner": owner, "repo": repo}),
        )
        if data.repository is None:
            raise RepositoryAccessError(f"Repository {owner}/{repo} not found")
        return RepositoryIds(owner_id=data.repository.owner.id, repo_id=data.repository.id)

    def create_project(
        self, owner_id: str, title: str, repository_id: str | None = None
    ) -> CreatedProject:
        """Create a project under the owner, optionally linked to a repository."""
        logger.info("Creating project %r", title)
        data = decode(
            CreateProjectData,
            self._graphql(
                CREATE_PROJECT_MUTATION,
                {"ownerId": owner_id, "title": title, "repositoryId": repository_id},
            ),
        )
        project = data.payload.project
        logger.info("Created project #%d: %s", project.number, project.url)
        return CreatedProject(project_id=project.id, number=project.number, url=project.url)

    def get_single_select_fields(self, project_id: str) -> list[SingleSelectField]:
        """List the project's single-select fields."""
        data = decode(
            ProjectFieldsData,
            self._graphql(PROJECT_FIELDS_QUERY, {"projectId": project_id}),
        )
        if data.node is None:
            raise NotFoundError(f"Project {project_id} not found")
        return [
            node.to_field()
            for node in data.node.fields.nodes
            if node is not None and node.is_single_select
        ]

    def _get_field(self, project_id: str, field_id: str) -> SingleSelectField:
        for field in self.get_single_select_fields(project_id):
            if field.field_id == field_id:
                return field
        raise NotFoundError(f"Field {field_id} not found in project {project_id}")

    def _replace_options(
        self, field_id: str, options: Sequence[dict[str, str]]
    ) -> SingleSelectField:
        data = decode(
            UpdateFieldData,
            self._graphql(
                UPDATE_FIELD_OPTIONS_MUTATION,
                {"fieldId": field_id, "options": list(options)},
            ),
        )
        return data.payload.field.to_field()

    def delete_field_option(self, project_id: str, field_id: str, option_id: str) -> None:
        """Remove one option from a single-select field.

        Raises:
            NotFoundError: If the field or option does not exist
        """
        field = self._get_field(project_id, field_id)
        remaining = [opt for opt in field.options if opt.option_id != option_id]
        if len(remaining) == len(field.options):
            raise NotFoundError(f"Option {option_id} not found on field {field.name}")
        self._replace_options(
            field_id,
            [_option_input(opt.name, opt.color, opt.description) for opt in remaining],
        )
        logger.debug("Deleted option %s from field %s", option_id, field.name)

    def create_field_option(
        self,
        project_id: str,
        field_id: str,
        name: str,
        color: str,
        description: str = "",
    ) -> FieldOption:
        """Append an option to a single-select field.

        Returns:
            The created option as reported back by GitHub
        """
        field = self._get_field(project_id, field_id)
        options = [_option_input(opt.name, opt.color, opt.description) for opt in field.options]
        options.append(_option_input(name, color, description))
        updated = self._replace_options(field_id, options)
        # Last option with this name is the one just appended
        for option in reversed(updated.options):
            if option.name == name:
                logger.debug("Created option %r on field %s", name, updated.name)
                return option
        raise GraphQLError(f"Option '{name}' missing after update of field {updated.name}")

    def create_single_select_field(
        self, project_id: str, name: str, options: Sequence[NewFieldOption]
    ) -> SingleSelectField:
        """Create a single-select field with its initial options."""
        data = decode(
            CreateFieldData,
            self._graphql(
                CREATE_FIELD_MUTATION,
                {
                    "projectId": project_id,
                    "name": name,
                    "options": [
                        _option_input(opt.name, opt.color, opt.description) for opt in options
                    ],
                },
            ),
        )
        field = data.payload.field.to_field()
        logger.info("Created field %s with %d option(s)", field.name, len(field.options))
        return field

    def resolve_issue_node_id(self, owner: str, repo: str, issue_number: int) -> str:
        """Look up the node id of an issue.

        Raises:
            NotFoundError: If the issue does not exist
        """
        data = decode(
            IssueNodeData,
            self._graphql(
                ISSUE_NODE_QUERY,
                {"owner": owner, "repo": repo, "number": issue_number},
            ),
        )
        if data.repository is None or data.repository.issue is None:
            raise NotFoundError(f"Issue #{issue_number} not found in {owner}/{repo}")
        return data.repository.issue.id

    def add_item_to_project(self, project_id: str, content_id: str) -> str:
        """Add an issue to the project and return the project item id."""
        data = decode(
            AddItemData,
            self._graphql(ADD_ITEM_MUTATION, {"projectId": project_id, "contentId": content_id}),
        )
        return data.payload.item.id

    def set_single_select_field_value(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> None:
        """Set a single-select field value on a project item."""
        decode(
            UpdateItemFieldData,
            self._graphql(
                SET_FIELD_VALUE_MUTATION,
                {
                    "projectId": project_id,
                    "itemId": item_id,
                    "fieldId": field_id,
                    "optionId": option_id,
                },
            ),
        )
