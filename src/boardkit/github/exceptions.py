"""Custom exceptions for GitHub access."""


class GitHubError(Exception):
    """Base exception for GitHub API errors."""


class GitHubAuthError(GitHubError):
    """Token missing, invalid or expired."""


class RepositoryAccessError(GitHubError):
    """Repository does not exist or the token cannot reach it."""


class NotFoundError(GitHubError):
    """Requested GitHub resource does not exist."""


class RateLimitError(GitHubError):
    """GitHub rate limit (primary or secondary) was hit."""


class GraphQLError(GitHubError):
    """GraphQL request returned errors."""


class ResponseShapeError(GitHubError):
    """GitHub response did not have the expected shape."""
