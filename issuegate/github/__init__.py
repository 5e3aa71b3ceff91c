"""GitHub issues client used by the submission handler."""

from __future__ import annotations

from .client import GitHubIssuesClient, GitHubIssuesConfig, IssueTracker
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubError,
    GitHubResponseShapeError,
)
from .models import IssueComment, IssueRequest, IssueResult

__all__ = [
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubError",
    "GitHubIssuesClient",
    "GitHubIssuesConfig",
    "GitHubResponseShapeError",
    "IssueComment",
    "IssueRequest",
    "IssueResult",
    "IssueTracker",
]
