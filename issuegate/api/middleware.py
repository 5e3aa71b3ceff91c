"""Falcon middleware for Slack request signing and service lifecycle.

``SlackSignatureMiddleware`` authenticates requests routed to resources that
declare ``requires_slack_signature = True``. It reads the raw body once, up
to a byte limit, verifies it and stores it unmodified on
``req.context.raw_body``. Other resources (health probes) are untouched and
their bodies are never read.

``ServiceLifecycleMiddleware`` drains pending follow-ups and closes the
shared HTTP clients on ASGI lifespan shutdown.

Usage
-----
Register both when creating the Falcon app::

    app = falcon.asgi.App(
        middleware=[
            SlackSignatureMiddleware(secret, max_body_bytes=65536),
            ServiceLifecycleMiddleware(tasks, closers=[slack.aclose]),
        ]
    )

"""

from __future__ import annotations

import typing as typ

from issuegate.api.errors import AuthenticationError, RequestBodyTooLargeError
from issuegate.auth.signature import IncomingRequest, SignatureCheck, check_signature
from issuegate.common.time import epoch_seconds
from issuegate.interactions.observability import InteractionEventLogger
from issuegate.logging import get_logger, log_exception, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from issuegate.background import BackgroundTasks
    from issuegate.common.time import Clock

__all__ = ["ServiceLifecycleMiddleware", "SlackSignatureMiddleware"]

logger = get_logger(__name__)

DEFAULT_MAX_BODY_BYTES = 64 * 1024


class SlackSignatureMiddleware:
    """Authenticate Slack requests before their resource runs.

    Parameters
    ----------
    signing_secret
        Slack signing secret.
    max_body_bytes
        Largest body accepted; larger bodies fail with HTTP 413 before any
        signature work.
    clock
        Returns the current epoch seconds; injectable for tests.
    event_logger
        Event logger for rejected requests.

    """

    def __init__(
        self,
        signing_secret: bytes,
        *,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        clock: Clock = epoch_seconds,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Initialize the middleware with the secret and limits."""
        self._signing_secret = signing_secret
        self._max_body_bytes = max_body_bytes
        self._clock = clock
        self._events = event_logger or InteractionEventLogger()

    async def _read_body(self, req: Request) -> bytes:
        content_length = req.content_length
        if content_length is not None and content_length > self._max_body_bytes:
            raise RequestBodyTooLargeError(self._max_body_bytes)

        chunks: list[bytes] = []
        size = 0
        async for chunk in req.stream:
            size += len(chunk)
            if size > self._max_body_bytes:
                raise RequestBodyTooLargeError(self._max_body_bytes)
            chunks.append(chunk)
        return b"".join(chunks)

    async def process_resource(
        self,
        req: Request,
        _resp: Response,
        resource: object,
        _params: dict[str, typ.Any],
    ) -> None:
        """Verify the signature for resources that require it.

        Raises
        ------
        RequestBodyTooLargeError
            If the body exceeds ``max_body_bytes``.
        AuthenticationError
            If the signature or timestamp is missing, stale or wrong.

        """
        if not getattr(resource, "requires_slack_signature", False):
            return

        received_at = self._clock()
        body = await self._read_body(req)
        incoming = IncomingRequest(
            headers={name.lower(): value for name, value in req.headers.items()},
            body=body,
            received_at=received_at,
        )
        result = check_signature(incoming, self._signing_secret, received_at)
        if result is not SignatureCheck.VALID:
            self._events.log_auth_rejected(path=req.path, reason=result)
            raise AuthenticationError(result)

        req.context.raw_body = body
        req.context.received_at = received_at


class ServiceLifecycleMiddleware:
    """Drain follow-ups and release clients on ASGI lifespan shutdown.

    Parameters
    ----------
    tasks
        Tracker holding scheduled follow-ups.
    closers
        Coroutine functions called in order after draining, usually the
        clients' ``aclose`` methods.
    grace_s
        Seconds to wait for pending follow-ups.

    """

    def __init__(
        self,
        tasks: BackgroundTasks,
        *,
        closers: cabc.Sequence[cabc.Callable[[], cabc.Awaitable[None]]] = (),
        grace_s: float = 30.0,
    ) -> None:
        """Store the tracker and shutdown hooks."""
        self._tasks = tasks
        self._closers = tuple(closers)
        self._grace_s = grace_s

    async def process_startup(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Log application startup."""
        log_info(logger, "Slack interaction endpoints ready")

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Wait for pending follow-ups, then close every client.

        A failing closer is logged and does not stop the remaining ones.
        """
        await self._tasks.drain(self._grace_s)
        for close in self._closers:
            try:
                await close()
            except Exception as exc:  # noqa: BLE001 - remaining closers must run
                log_exception(logger, "Failed to close HTTP client", exc)
