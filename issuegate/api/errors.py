"""Domain exceptions and Falcon error handlers for the API layer.

Usage
-----
Register error handlers on the Falcon app::

    from issuegate.api.errors import (
        AuthenticationError,
        handle_authentication_error,
    )

    app.add_error_handler(AuthenticationError, handle_authentication_error)

"""

from __future__ import annotations

import typing as typ

import falcon

from issuegate.interactions.observability import InteractionEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from issuegate.auth.signature import SignatureCheck
    from issuegate.interactions.decoding import PayloadDecodeError

__all__ = [
    "AuthenticationError",
    "RequestBodyTooLargeError",
    "handle_authentication_error",
    "handle_body_too_large",
    "handle_payload_decode_error",
]

AUTH_FAILED_TEXT = "invalid signature"

_event_logger = InteractionEventLogger()


class AuthenticationError(Exception):
    """Raised when a Slack request fails signature verification.

    Attributes
    ----------
    reason
        The failed check. Used for logging only; never sent to the caller.

    """

    def __init__(self, reason: SignatureCheck) -> None:
        """Initialize with the failed signature check."""
        self.reason = reason
        super().__init__(f"Slack signature rejected: {reason}")


class RequestBodyTooLargeError(Exception):
    """Raised when a request body exceeds the configured limit.

    Attributes
    ----------
    limit
        Maximum accepted body size in bytes.

    """

    def __init__(self, limit: int) -> None:
        """Initialize with the byte limit that was exceeded."""
        self.limit = limit
        super().__init__(f"Request body exceeds {limit} bytes")


async def handle_authentication_error(
    _req: Request,
    resp: Response,
    _ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to HTTP 401 ``invalid signature``.

    The rejection reason is logged by the middleware and kept out of the
    response.
    """
    resp.status = falcon.HTTP_401
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = AUTH_FAILED_TEXT


async def handle_body_too_large(
    _req: Request,
    resp: Response,
    ex: RequestBodyTooLargeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``RequestBodyTooLargeError`` to an HTTP 413 JSON response."""
    resp.status = falcon.HTTP_413
    resp.media = {
        "title": "Request body too large",
        "description": str(ex),
    }


async def handle_payload_decode_error(
    req: Request,
    resp: Response,
    ex: PayloadDecodeError,
    _params: dict[str, typ.Any],
) -> None:
    """Acknowledge an undecodable payload with an empty HTTP 200.

    The decode error is logged at WARNING and never reaches the caller.
    """
    _event_logger.log_payload_rejected(path=req.path, error=ex)
    resp.status = falcon.HTTP_200
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = ""
