"""Slack Web API and response-URL client built on httpx."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import httpx
import msgspec

from issuegate.common.env import env_float, env_url, require_env

from .errors import SlackAPIError, SlackConfigError, SlackResponseShapeError

__all__ = [
    "EphemeralMessage",
    "SlackClient",
    "SlackConfig",
    "SlackWebClient",
]

_DEFAULT_API_BASE = "https://slack.com/api"
_DEFAULT_TIMEOUT_S = 2.5
_HTTP_ERROR_STATUS_THRESHOLD = 400


class EphemeralMessage(msgspec.Struct, kw_only=True, frozen=True):
    """Message delivered to a slash command's ``response_url``."""

    text: str
    response_type: str = "ephemeral"
    replace_original: bool = False


class SlackClient(typ.Protocol):
    """Interface the interaction handlers need from Slack."""

    async def open_view(self, trigger_id: str, view: dict[str, typ.Any]) -> None:
        """Present ``view`` as a modal for ``trigger_id``."""
        ...

    async def post_response(self, response_url: str, message: EphemeralMessage) -> None:
        """Deliver ``message`` to a response URL."""
        ...


@dc.dataclass(frozen=True, slots=True)
class SlackConfig:
    """Configuration for the Slack Web API client.

    Attributes
    ----------
    bot_token
        Bot token used for ``views.open``. Never sent to response URLs.
    api_base
        Web API base URL.
    timeout_s
        Per-request timeout; ``views.open`` sits on the synchronous path so
        this stays below the platform's three second deadline.

    """

    bot_token: str = dc.field(repr=False)
    api_base: str = _DEFAULT_API_BASE
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> SlackConfig:
        """Build configuration from ``ISSUEGATE_SLACK_*`` variables.

        Reads ``ISSUEGATE_SLACK_BOT_TOKEN`` (required),
        ``ISSUEGATE_SLACK_API_BASE`` and ``ISSUEGATE_SLACK_TIMEOUT_S``.
        """
        return cls(
            bot_token=require_env("ISSUEGATE_SLACK_BOT_TOKEN"),
            api_base=env_url("ISSUEGATE_SLACK_API_BASE", _DEFAULT_API_BASE),
            timeout_s=env_float("ISSUEGATE_SLACK_TIMEOUT_S", _DEFAULT_TIMEOUT_S),
        )


class _WebAPIReply(msgspec.Struct, kw_only=True):
    ok: bool
    error: str | None = None


class SlackWebClient:
    """Async Slack client for modal presentation and delayed responses.

    Parameters
    ----------
    config
        Slack configuration.
    http_client
        Optional client for testing. When omitted the instance creates and
        owns one.

    """

    def __init__(
        self,
        config: SlackConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        if not config.bot_token.strip():
            raise SlackConfigError.empty_bot_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def open_view(self, trigger_id: str, view: dict[str, typ.Any]) -> None:
        """Call ``views.open`` for ``trigger_id``.

        Raises
        ------
        SlackAPIError
            On transport failures, HTTP errors or ``{"ok": false}`` replies.
        SlackResponseShapeError
            If the reply is not a Web API JSON object.

        """
        method = "views.open"
        response = await self._send(
            method,
            f"{self._config.api_base.rstrip('/')}/{method}",
            {"trigger_id": trigger_id, "view": view},
            headers={"Authorization": f"Bearer {self._config.bot_token}"},
        )
        try:
            reply = msgspec.json.decode(response.content, type=_WebAPIReply)
        except msgspec.DecodeError as exc:
            raise SlackResponseShapeError.invalid_json(method) from exc
        if not reply.ok:
            raise SlackAPIError.api_error(method, reply.error or "unknown_error")

    async def post_response(self, response_url: str, message: EphemeralMessage) -> None:
        """POST ``message`` to ``response_url``.

        Response URLs are pre-authorised by Slack, so no token is attached.

        Raises
        ------
        SlackAPIError
            On transport failures or HTTP errors.

        """
        await self._send(
            "response_url",
            response_url,
            msgspec.to_builtins(message),
        )

    async def _send(
        self,
        method: str,
        url: str,
        payload: dict[str, typ.Any],
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request_headers = {"Content-Type": "application/json; charset=utf-8"}
        if headers:
            request_headers.update(headers)
        try:
            response = await self._client.post(
                url,
                content=msgspec.json.encode(payload),
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise SlackAPIError.timeout(method) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise SlackAPIError.network_error(method, str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise SlackAPIError.http_error(method, response.status_code)
        return response
