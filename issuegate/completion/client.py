"""Azure OpenAI chat completions client."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from .errors import (
    CompletionAPIError,
    CompletionConfigError,
    CompletionResponseShapeError,
)
from .prompts import EMPTY_COMPLETION_TEXT, SYSTEM_PROMPT

if typ.TYPE_CHECKING:
    from .config import CompletionConfig

__all__ = ["AzureOpenAICompletionClient", "TextGenerator"]

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_RATE_LIMITED = 429


class TextGenerator(typ.Protocol):
    """Produces a short text answer for a user prompt."""

    async def complete(self, prompt: str) -> str:
        """Return generated text for ``prompt``."""
        ...


def _get_retry_after(response: httpx.Response) -> int | None:
    """Extract Retry-After header value if present and numeric."""
    retry_after = response.headers.get("Retry-After")
    if retry_after and retry_after.isdigit():
        return int(retry_after)
    return None


def _get_nested(data: dict[str, object], *keys: str) -> object:
    """Traverse nested dict path, returning None for missing keys."""
    current: object = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current_dict = typ.cast("dict[str, object]", current)
        current = current_dict.get(key)
    return current


class AzureOpenAICompletionClient:
    """Chat completions client for an Azure OpenAI deployment.

    Parameters
    ----------
    config
        Deployment configuration.
    http_client
        Optional httpx.AsyncClient for testing. If not provided,
        the instance creates and owns its own client.

    """

    def __init__(
        self,
        config: CompletionConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        for field in ("endpoint", "api_key", "deployment"):
            if not getattr(config, field).strip():
                raise CompletionConfigError.empty_field(field)

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def config(self) -> CompletionConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def complete(self, prompt: str) -> str:
        """Return the assistant's answer to ``prompt``.

        The answer is trimmed; a blank answer is replaced with ``"No response."``.

        Raises
        ------
        CompletionAPIError
            If the request fails, times out or returns an error status.
        CompletionResponseShapeError
            If the body is not JSON or lacks the assistant content.

        """
        response = await self._send_request(self._build_payload(prompt))
        self._check_response_errors(response)
        content = self._extract_content(self._parse_json(response))
        answer = content.strip()
        return answer or EMPTY_COMPLETION_TEXT

    def _build_payload(self, prompt: str) -> dict[str, object]:
        return {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }

    async def _send_request(self, payload: dict[str, object]) -> httpx.Response:
        """Perform HTTP POST request to the deployment's completions URL.

        Raises
        ------
        CompletionAPIError
            If a timeout or network error occurs.

        """
        try:
            return await self._client.post(
                self._config.url,
                content=msgspec.json.encode(payload),
                headers={
                    "api-key": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        except httpx.TimeoutException as exc:
            raise CompletionAPIError.timeout() from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise CompletionAPIError.network_error(str(exc)) from exc

    def _check_response_errors(self, response: httpx.Response) -> None:
        if response.status_code == _HTTP_RATE_LIMITED:
            raise CompletionAPIError.rate_limited(_get_retry_after(response))

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise CompletionAPIError.http_error(response.status_code)

    def _parse_json(self, response: httpx.Response) -> dict[str, object]:
        try:
            data = msgspec.json.decode(response.content)
        except msgspec.DecodeError as exc:
            raise CompletionResponseShapeError.invalid_json(response.text) from exc
        if not isinstance(data, dict):
            raise CompletionResponseShapeError.invalid_json(response.text)
        return typ.cast("dict[str, object]", data)

    def _extract_content(self, data: dict[str, object]) -> str:
        """Extract assistant message content from API response.

        Raises
        ------
        CompletionResponseShapeError
            If the response is missing expected fields.

        """
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise CompletionResponseShapeError.missing("choices")

        first_choice = choices[0]
        if not isinstance(first_choice, dict):
            raise CompletionResponseShapeError.missing("choices[0]")

        first_choice_dict = typ.cast("dict[str, object]", first_choice)
        content = _get_nested(first_choice_dict, "message", "content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise CompletionResponseShapeError.missing("choices[0].message.content")
        return content
