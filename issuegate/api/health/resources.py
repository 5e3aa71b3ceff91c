"""Health probe resources for Kubernetes liveness and readiness checks.

These resources never require a Slack signature and are registered in both
health-only and full mode.

Usage
-----
Register health endpoints on the Falcon app::

    from issuegate.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(tasks))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from issuegate.background import BackgroundTasks

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Responds with HTTP 200 and reports whether the Slack endpoints are
    registered and how many follow-ups are still pending.

    Parameters
    ----------
    tasks
        Follow-up tracker, or ``None`` in health-only mode.

    """

    def __init__(self, tasks: BackgroundTasks | None = None) -> None:
        """Initialize with the optional follow-up tracker."""
        self._tasks = tasks

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if self._tasks is None:
            resp.media = {"status": "ready", "slack": "disabled"}
        else:
            resp.media = {
                "status": "ready",
                "slack": "enabled",
                "pending_follow_ups": self._tasks.pending,
            }
        resp.status = HTTPStatus.OK
