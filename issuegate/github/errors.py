"""GitHub issue client errors."""

from __future__ import annotations


class GitHubError(RuntimeError):
    """Base exception for all GitHub issue client errors."""


class GitHubAPIError(GitHubError):
    """Raised when GitHub returns an error response or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"GitHub REST HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> GitHubAPIError:
        """Return an error for request timeouts."""
        return cls("GitHub REST request timed out")

    @classmethod
    def network_error(cls, detail: str) -> GitHubAPIError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"GitHub REST network error: {detail}")


class GitHubResponseShapeError(GitHubError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing or mistyped response field."""
        return cls(f"GitHub REST response missing expected field: {field}")


class GitHubConfigError(GitHubError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_repository(cls, repository: str) -> GitHubConfigError:
        """Return an error for a repository that is not an ``owner/name`` slug."""
        return cls(f"Invalid GitHub repository {repository!r}; expected 'owner/name'")
