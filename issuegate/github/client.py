"""GitHub REST client for creating issues and issue comments."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from issuegate.common.env import env_float, env_url, require_env
from issuegate.common.slug import parse_repo_slug

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import IssueComment, IssueRequest, IssueResult

_DEFAULT_API_BASE = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 10.0
_API_VERSION = "2022-11-28"
_HTTP_ERROR_STATUS_THRESHOLD = 400

_StructT = typ.TypeVar("_StructT", bound=msgspec.Struct)


class IssueTracker(typ.Protocol):
    """Interface the interaction handlers need from the issue tracker."""

    async def create_issue(self, request: IssueRequest) -> IssueResult:
        """Create an issue and return its number and URL."""
        ...

    async def create_comment(self, issue_number: int, body: str) -> IssueComment:
        """Add a comment to an existing issue."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubIssuesConfig:
    """Configuration for the GitHub issues client."""

    token: str = dataclasses.field(repr=False)
    repository: str
    api_base: str = _DEFAULT_API_BASE
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "issuegate/0.1"

    @classmethod
    def from_env(cls) -> GitHubIssuesConfig:
        """Build configuration from ``ISSUEGATE_GITHUB_*`` variables.

        Raises
        ------
        ConfigError
            If the token or repository is unset, the API base is not an http(s)
            URL or the timeout is invalid.

        """
        token = require_env("ISSUEGATE_GITHUB_TOKEN")
        repository = require_env("ISSUEGATE_GITHUB_REPO")
        return cls(
            token=token,
            repository=repository,
            api_base=env_url("ISSUEGATE_GITHUB_API_BASE", _DEFAULT_API_BASE),
            timeout_s=env_float("ISSUEGATE_GITHUB_TIMEOUT_S", _DEFAULT_TIMEOUT_S),
        )


class GitHubIssuesClient:
    """Async GitHub REST client bound to a single repository.

    Parameters
    ----------
    config
        Token, repository and transport settings.
    http_client
        Optional client for testing. When omitted the instance creates and
        owns one.

    """

    def __init__(
        self,
        config: GitHubIssuesConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client and validate the repository slug."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()
        try:
            owner, name = parse_repo_slug(config.repository)
        except ValueError as exc:
            raise GitHubConfigError.invalid_repository(config.repository) from exc

        self._config = config
        self._issues_url = f"{config.api_base.rstrip('/')}/repos/{owner}/{name}/issues"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def repository(self) -> str:
        """Return the ``owner/name`` slug issues are filed against."""
        return self._config.repository

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def create_issue(self, request: IssueRequest) -> IssueResult:
        """Create an issue in the configured repository.

        Parameters
        ----------
        request
            Title, body and optional labels.

        Returns
        -------
        IssueResult
            Number and browser URL of the new issue.

        Raises
        ------
        GitHubAPIError
            On transport failures or HTTP errors.
        GitHubResponseShapeError
            If the reply lacks ``number`` or ``html_url``.

        """
        response = await self._post(self._issues_url, msgspec.json.encode(request))
        return self._decode(response, IssueResult, "number/html_url")

    async def create_comment(self, issue_number: int, body: str) -> IssueComment:
        """Add a comment to issue ``issue_number``."""
        url = f"{self._issues_url}/{issue_number}/comments"
        response = await self._post(url, msgspec.json.encode({"body": body}))
        return self._decode(response, IssueComment, "id/html_url")

    async def _post(self, url: str, content: bytes) -> httpx.Response:
        try:
            response = await self._client.post(
                url,
                content=content,
                headers={
                    "Authorization": f"Bearer {self._config.token}",
                    "Accept": "application/vnd.github+json",
                    "Content-Type": "application/json",
                    "User-Agent": self._config.user_agent,
                    "X-GitHub-Api-Version": _API_VERSION,
                },
            )
        except httpx.TimeoutException as exc:
            raise GitHubAPIError.timeout() from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise GitHubAPIError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code)
        return response

    @staticmethod
    def _decode(
        response: httpx.Response, kind: type[_StructT], fields: str
    ) -> _StructT:
        try:
            return msgspec.json.decode(response.content, type=kind)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.missing(fields) from exc
