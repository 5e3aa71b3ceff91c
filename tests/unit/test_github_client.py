"""Unit tests for the GitHub issues REST client."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from issuegate.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubIssuesClient,
    GitHubIssuesConfig,
    GitHubResponseShapeError,
    IssueComment,
    IssueRequest,
    IssueResult,
)

_TOKEN = secrets.token_hex(8)
_ISSUES_URL = "https://github.test/repos/acme/appsec/issues"

Handler = typ.Callable[[httpx.Request], httpx.Response]


def _make_client(handler: Handler) -> tuple[GitHubIssuesClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
    client = GitHubIssuesClient(
        GitHubIssuesConfig(
            token=_TOKEN,
            repository="acme/appsec",
            api_base="https://github.test/",
        ),
        http_client=http_client,
    )
    return client, requests


def _created(_: httpx.Request) -> httpx.Response:
    return httpx.Response(
        201,
        json={
            "id": 1,
            "number": 42,
            "html_url": "https://github.test/acme/appsec/issues/42",
            "state": "open",
        },
    )


class TestCreateIssue:
    """Tests for GitHubIssuesClient.create_issue()."""

    @pytest.mark.asyncio
    async def test_posts_issue_with_rest_headers(self) -> None:
        """The issue is posted with token, media type and API version."""
        client, requests = _make_client(_created)

        result = await client.create_issue(IssueRequest(title="Bug X", body="repro"))

        assert result == IssueResult(
            number=42, html_url="https://github.test/acme/appsec/issues/42"
        )
        request = requests[0]
        assert str(request.url) == _ISSUES_URL
        assert request.headers["Authorization"] == f"Bearer {_TOKEN}"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert request.headers["User-Agent"].startswith("issuegate/")
        assert json.loads(request.content) == {"title": "Bug X", "body": "repro"}

    @pytest.mark.asyncio
    async def test_labels_are_sent_when_present(self) -> None:
        """Non-empty labels are included in the body."""
        client, requests = _make_client(_created)

        await client.create_issue(
            IssueRequest(title="Bug X", body="repro", labels=("security",))
        )

        assert json.loads(requests[0].content)["labels"] == ["security"]

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        """Non-2xx statuses raise GitHubAPIError with the status."""
        client, _ = _make_client(
            lambda _: httpx.Response(422, json={"message": "Validation Failed"})
        )

        with pytest.raises(GitHubAPIError) as excinfo:
            await client.create_issue(IssueRequest(title="Bug X", body="repro"))
        assert excinfo.value.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_fields_raise_shape_error(self) -> None:
        """A 2xx reply without number/html_url is a shape error."""
        client, _ = _make_client(lambda _: httpx.Response(201, json={"id": 1}))

        with pytest.raises(GitHubResponseShapeError, match="number/html_url"):
            await client.create_issue(IssueRequest(title="Bug X", body="repro"))

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        """Transport timeouts become GitHubAPIError."""

        def _timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client, _ = _make_client(_timeout)

        with pytest.raises(GitHubAPIError, match="timed out"):
            await client.create_issue(IssueRequest(title="Bug X", body="repro"))


@pytest.mark.asyncio
async def test_create_comment_posts_body() -> None:
    """Comments are posted to the issue's comments endpoint."""

    def _comment(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201,
            json={"id": 7, "html_url": "https://github.test/c/7", "body": "tips"},
        )

    client, requests = _make_client(_comment)

    comment = await client.create_comment(42, "tips")

    assert comment == IssueComment(id=7, html_url="https://github.test/c/7")
    assert str(requests[0].url) == f"{_ISSUES_URL}/42/comments"
    assert json.loads(requests[0].content) == {"body": "tips"}


@pytest.mark.parametrize(
    ("token", "repository", "error"),
    [
        ("", "acme/appsec", "non-empty"),
        (_TOKEN, "acme", "owner/name"),
        (_TOKEN, "acme/appsec/extra", "owner/name"),
    ],
)
def test_invalid_config_rejected(token: str, repository: str, error: str) -> None:
    """Blank tokens and malformed repository slugs are rejected."""
    with pytest.raises(GitHubConfigError, match=error):
        GitHubIssuesClient(GitHubIssuesConfig(token=token, repository=repository))


def test_repository_property() -> None:
    """The configured slug is exposed for logging."""
    client, _ = _make_client(_created)
    assert client.repository == "acme/appsec"


@pytest.mark.asyncio
async def test_unparseable_api_base_raises_api_error() -> None:
    """A malformed base URL surfaces as GitHubAPIError."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_created))
    client = GitHubIssuesClient(
        GitHubIssuesConfig(
            token=_TOKEN, repository="acme/appsec", api_base="https://github.test:bad"
        ),
        http_client=http_client,
    )

    with pytest.raises(GitHubAPIError, match="network error"):
        await client.create_issue(IssueRequest(title="t", body="b"))
