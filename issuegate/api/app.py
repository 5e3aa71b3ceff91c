"""Application factory for the issuegate Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when Slack dependencies
are available, the Slack webhook endpoints.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with Slack endpoints::

    from issuegate.api.factory import build_dependencies

    app = create_app(build_dependencies(ServiceConfig.from_env()))

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import falcon.asgi

from issuegate.api.errors import (
    AuthenticationError,
    RequestBodyTooLargeError,
    handle_authentication_error,
    handle_body_too_large,
    handle_payload_decode_error,
)
from issuegate.api.health.resources import HealthResource, ReadyResource
from issuegate.api.middleware import (
    ServiceLifecycleMiddleware,
    SlackSignatureMiddleware,
)
from issuegate.api.slack.resources import SlackWebhookResource
from issuegate.interactions.decoding import PayloadDecodeError

if typ.TYPE_CHECKING:
    from issuegate.background import BackgroundTasks
    from issuegate.interactions.commands import CommandDispatcher
    from issuegate.interactions.submissions import SubmissionHandler

__all__ = ["SLACK_ROUTES", "AppDependencies", "create_app"]

SLACK_ROUTES = ("/slack/commands", "/slack/interactions")

Closer = cabc.Callable[[], cabc.Awaitable[None]]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Slack endpoints.

    Attributes
    ----------
    signing_secret
        Slack signing secret used by the signature middleware.
    dispatcher
        Slash command handler.
    submissions
        Modal submission handler.
    tasks
        Tracker for follow-ups scheduled after replies.
    max_body_bytes
        Largest inbound body accepted on Slack routes.
    shutdown_grace_s
        Seconds to wait for pending follow-ups on shutdown.
    closers
        Coroutine functions run after draining on shutdown.

    """

    signing_secret: bytes = dc.field(repr=False)
    dispatcher: CommandDispatcher
    submissions: SubmissionHandler
    tasks: BackgroundTasks
    max_body_bytes: int = 64 * 1024
    shutdown_grace_s: float = 30.0
    closers: tuple[Closer, ...] = ()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When *dependencies* is provided the app includes the signature and
    lifecycle middleware and the ``POST /slack/commands`` and
    ``POST /slack/interactions`` endpoints. Otherwise only ``/health`` and
    ``/ready`` are registered.

    Parameters
    ----------
    dependencies
        Optional Slack dependencies.  When ``None``, only health endpoints
        are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []

    if dependencies is not None:
        middleware.append(
            SlackSignatureMiddleware(
                dependencies.signing_secret,
                max_body_bytes=dependencies.max_body_bytes,
            )
        )
        middleware.append(
            ServiceLifecycleMiddleware(
                dependencies.tasks,
                closers=dependencies.closers,
                grace_s=dependencies.shutdown_grace_s,
            )
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route(
        "/ready",
        ReadyResource(dependencies.tasks if dependencies is not None else None),
    )

    if dependencies is not None:
        resource = SlackWebhookResource(
            dispatcher=dependencies.dispatcher,
            submissions=dependencies.submissions,
            tasks=dependencies.tasks,
        )
        for route in SLACK_ROUTES:
            app.add_route(route, resource)

    app.add_error_handler(AuthenticationError, handle_authentication_error)
    app.add_error_handler(RequestBodyTooLargeError, handle_body_too_large)
    app.add_error_handler(PayloadDecodeError, handle_payload_decode_error)

    return app
