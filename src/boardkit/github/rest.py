"""GitHubRestClient - Label, issue and repository operations over GitHub REST."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from boardkit.github.exceptions import (
    GitHubAuthError,
    GitHubError,
    NotFoundError,
    RateLimitError,
)
from boardkit.github.models import (
    LabelCreateStatus,
    RepoIssue,
    RepoLabel,
    Repository,
)
from boardkit.logging import sanitize_for_log

logger = logging.getLogger("boardkit.github")

PER_PAGE = 100


def is_rate_limited(response: httpx.Response) -> bool:
    """Whether GitHub rejected the request for rate limiting.

    Primary limits answer 403/429 with ``x-ratelimit-remaining: 0``; secondary
    limits answer 403/429 with a ``retry-after`` header.
    """
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    headers = response.headers
    return headers.get("x-ratelimit-remaining") == "0" or "retry-after" in headers


def check_response(response: httpx.Response) -> None:
    """Raise for authentication and rate-limit failures common to every call."""
    if response.status_code == 401:
        raise GitHubAuthError("GitHub rejected the token (401 Unauthorized)")
    if is_rate_limited(response):
        raise RateLimitError(
            f"GitHub rate limit hit ({response.status_code}), "
            f"retry after {response.headers.get('retry-after', 'unknown')}s"
        )


class GitHubRestClient:
    """Client for the GitHub REST API.

    Implements the IssueAccess contract used by the generation engine plus
    the repository listing and scope check used by the HTTP service.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
    ) -> None:
        """Initialize the REST client.

        Args:
            token: GitHub token (OAuth or personal access token)
            base_url: GitHub API base URL (for testing/enterprise)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for GitHub API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
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
    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying with backoff while rate limited.

        Raises:
            GitHubAuthError: If the token is rejected
            RateLimitError: If still rate limited after retries
        """
        response = self.client.request(method, url, **kwargs)
        check_response(response)
        return response

    def _paginate(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint by following Link headers."""
        items: list[dict[str, Any]] = []
        url: str | None = path
        query: dict[str, Any] | None = {"per_page": PER_PAGE, **(params or {})}
        while url:
            response = self._request("GET", url, params=query)
            if response.status_code == 404:
                raise NotFoundError(f"Not found: {path}")
            if response.status_code != 200:
                raise GitHubError(
                    f"Failed to list {path}: {response.status_code} - "
                    f"{sanitize_for_log(response.text)}"
                )
            items.extend(response.json())
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            query = None
        return items

    def list_labels(self, owner: str, repo: str) -> list[RepoLabel]:
        """List every label in the repository."""
        data = self._paginate(f"/repos/{owner}/{repo}/labels")
        labels = [
            RepoLabel(
                name=item["name"],
                color=item.get("color") or "",
                description=item.get("description") or "",
            )
            for item in data
        ]
        logger.debug("Found %d label(s) in %s/%s", len(labels), owner, repo)
        return labels

    def create_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> LabelCreateStatus:
        """Create a label.

        Returns:
            CREATED, or ALREADY_EXISTS when GitHub answers 422

        Raises:
            GitHubError: If creation fails for any other reason
        """
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/labels",
            json={"name": name, "color": color, "description": description},
        )
        if response.status_code == 201:
            logger.info("Created label %s in %s/%s", name, owner, repo)
            return LabelCreateStatus.CREATED
        if response.status_code == 422:
            logger.debug("Label %s already exists in %s/%s", name, owner, repo)
            return LabelCreateStatus.ALREADY_EXISTS
        raise GitHubError(
            f"Failed to create label '{name}': {response.status_code} - "
            f"{sanitize_for_log(response.text)}"
        )

    def update_label(
        self, owner: str, repo: str, name: str, color: str, description: str
    ) -> None:
        """Update color and description of an existing label.

        Raises:
            NotFoundError: If the label does not exist
            GitHubError: If the update fails
        """
        response = self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/labels/{quote(name, safe='')}",
            json={"color": color, "description": description},
        )
        if response.status_code == 404:
            raise NotFoundError(f"Label '{name}' not found in {owner}/{repo}")
        if response.status_code != 200:
            raise GitHubError(
                f"Failed to update label '{name}': {response.status_code} - "
                f"{sanitize_for_log(response.text)}"
            )
        logger.info("Updated label %s in %s/%s", name, owner, repo)

    def list_issues(self, owner: str, repo: str, state: str = "all") -> list[RepoIssue]:
        """List issues in the given state, skipping pull requests."""
        data = self._paginate(f"/repos/{owner}/{repo}/issues", {"state": state})
        issues = [
            RepoIssue(
                number=item["number"],
                title=item["title"],
                state=item.get("state", "open"),
            )
            for item in data
            if "pull_request" not in item
        ]
        logger.debug("Found %d issue(s) in %s/%s", len(issues), owner, repo)
        return issues

    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Sequence[str],
        assignees: Sequence[str],
    ) -> int:
        """Create an issue.

        Returns:
            The new issue number

        Raises:
            GitHubError: If creation fails
        """
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues",
            json={
                "title": title,
                "body": body,
                "labels": list(labels),
                "assignees": list(assignees),
            },
        )
        if response.status_code != 201:
            raise GitHubError(
                f"Failed to create issue '{title}': {response.status_code} - "
                f"{sanitize_for_log(response.text)}"
            )
        number = int(response.json()["number"])
        logger.info("Created issue #%d: %s", number, title)
        return number

    def verify_access(self, owner: str, repo: str) -> bool:
        """Whether the repository exists and the token can see it.

        Raises:
            GitHubAuthError: If the token itself is rejected
        """
        response = self._request("GET", f"/repos/{owner}/{repo}")
        if response.status_code == 200:
            return True
        logger.warning(
            "No access to %s/%s: %s", owner, repo, response.status_code
        )
        return False

    def list_user_repos(self) -> list[Repository]:
        """List repositories owned by the authenticated user, most recently updated first."""
        response = self._request(
            "GET",
            "/user/repos",
            params={"sort": "updated", "per_page": PER_PAGE, "affiliation": "owner"},
        )
        if response.status_code != 200:
            raise GitHubError(
                f"Failed to list repositories: {response.status_code} - "
                f"{sanitize_for_log(response.text)}"
            )
        return [
            Repository(
                id=item["id"],
                name=item["name"],
                full_name=item["full_name"],
                owner=item["owner"]["login"],
                private=bool(item.get("private", False)),
                html_url=item["html_url"],
                description=item.get("description"),
            )
            for item in response.json()
        ]

    def get_token_scopes(self) -> list[str]:
        """OAuth scopes granted to the token, from the ``x-oauth-scopes`` header."""
        response = self._request("GET", "/user")
        if response.status_code != 200:
            raise GitHubError(f"Failed to read token scopes: {response.status_code}")
        header = response.headers.get("x-oauth-scopes", "")
        return [scope.strip() for scope in header.split(",") if scope.strip()]
