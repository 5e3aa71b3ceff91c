"""Unit tests for the Azure OpenAI completion client."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from issuegate.completion import (
    EMPTY_COMPLETION_TEXT,
    SYSTEM_PROMPT,
    AzureOpenAICompletionClient,
    CompletionAPIError,
    CompletionConfig,
    CompletionConfigError,
    CompletionResponseShapeError,
    build_remediation_prompt,
)

_API_KEY = secrets.token_hex(8)

Handler = typ.Callable[[httpx.Request], httpx.Response]


def _config(**overrides: typ.Any) -> CompletionConfig:
    values: dict[str, typ.Any] = {
        "endpoint": "https://aoai.test/",
        "api_key": _API_KEY,
        "deployment": "gpt-4o-mini",
    }
    values.update(overrides)
    return CompletionConfig(**values)


def _make_client(
    handler: Handler,
) -> tuple[AzureOpenAICompletionClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
    return AzureOpenAICompletionClient(_config(), http_client=http_client), requests


def _answer(content: object) -> Handler:
    def _handler(_: httpx.Request) -> httpx.Response:
        message = {"role": "assistant", "content": content}
        return httpx.Response(
            200, json={"choices": [{"index": 0, "message": message}]}
        )

    return _handler


class TestComplete:
    """Tests for AzureOpenAICompletionClient.complete()."""

    @pytest.mark.asyncio
    async def test_posts_system_and_user_messages(self) -> None:
        """The request carries the key, prompt pair and sampling settings."""
        client, requests = _make_client(_answer("Escape output."))

        answer = await client.complete("How do I fix XSS?")

        assert answer == "Escape output."
        request = requests[0]
        assert str(request.url) == (
            "https://aoai.test/openai/deployments/gpt-4o-mini"
            "/chat/completions?api-version=2024-02-01"
        )
        assert request.headers["api-key"] == _API_KEY
        assert json.loads(request.content) == {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": "How do I fix XSS?"},
            ],
            "temperature": 0.3,
            "max_tokens": 300,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   \n", None])
    async def test_blank_answer_becomes_placeholder(self, content: str | None) -> None:
        """Empty, whitespace-only or null content yields "No response."."""
        client, _ = _make_client(_answer(content))
        assert await client.complete("q") == EMPTY_COMPLETION_TEXT

    @pytest.mark.asyncio
    async def test_answer_is_trimmed(self) -> None:
        """Surrounding whitespace is removed from the answer."""
        client, _ = _make_client(_answer("  Escape output.\n\n"))
        assert await client.complete("q") == "Escape output."

    @pytest.mark.asyncio
    async def test_unparseable_endpoint_raises_api_error(self) -> None:
        """A malformed endpoint surfaces as CompletionAPIError."""
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(_answer("unused"))
        )
        client = AzureOpenAICompletionClient(
            _config(endpoint="https://x.test:notaport"), http_client=http_client
        )

        with pytest.raises(CompletionAPIError, match="network error"):
            await client.complete("q")

    @pytest.mark.asyncio
    async def test_rate_limit_includes_retry_after(self) -> None:
        """429 responses raise with the Retry-After hint."""
        client, _ = _make_client(
            lambda _: httpx.Response(429, headers={"Retry-After": "12"}, json={})
        )

        with pytest.raises(CompletionAPIError, match="retry after 12s") as excinfo:
            await client.complete("q")
        assert excinfo.value.status_code == 429

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        """Other error statuses raise CompletionAPIError."""
        client, _ = _make_client(lambda _: httpx.Response(500, text="boom"))

        with pytest.raises(CompletionAPIError) as excinfo:
            await client.complete("q")
        assert excinfo.value.status_code == 500

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        """Transport timeouts become CompletionAPIError."""

        def _timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = _make_client(_timeout)

        with pytest.raises(CompletionAPIError, match="timed out"):
            await client.complete("q")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("handler", "error"),
        [
            (lambda _: httpx.Response(200, text="not json"), "Failed to parse JSON"),
            (lambda _: httpx.Response(200, json=[1, 2]), "Failed to parse JSON"),
            (lambda _: httpx.Response(200, json={"choices": []}), "choices"),
            (lambda _: httpx.Response(200, json={"choices": ["x"]}), "choices"),
            (_answer(42), "message.content"),
        ],
    )
    async def test_malformed_body_raises_shape_error(
        self, handler: Handler, error: str
    ) -> None:
        """Bodies without assistant content raise a shape error."""
        client, _ = _make_client(handler)

        with pytest.raises(CompletionResponseShapeError, match=error):
            await client.complete("q")


@pytest.mark.parametrize("field", ["endpoint", "api_key", "deployment"])
def test_blank_required_setting_rejected(field: str) -> None:
    """Blank endpoint, key or deployment are rejected up front."""
    with pytest.raises(CompletionConfigError, match=field):
        AzureOpenAICompletionClient(_config(**{field: " "}))


def test_url_quotes_deployment_and_version() -> None:
    """The deployment path segment and api-version are URL encoded."""
    config = _config(deployment="my model", api_version="2024-10-21")
    assert config.url == (
        "https://aoai.test/openai/deployments/my%20model"
        "/chat/completions?api-version=2024-10-21"
    )


def test_remediation_prompt_includes_title_and_description() -> None:
    """The remediation prompt embeds the issue's title and description."""
    prompt = build_remediation_prompt("SQL injection", "login form")

    assert prompt.startswith("Suggest remediation steps for this security issue.")
    assert "Title: SQL injection" in prompt
    assert prompt.endswith("login form")
