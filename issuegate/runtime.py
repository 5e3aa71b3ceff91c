"""issuegate runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`issuegate.api.app.create_app` for application
construction while keeping the ``issuegate.runtime:create_app`` entrypoint
stable.

When ``ISSUEGATE_SLACK_SIGNING_SECRET`` is set, the runtime loads the full
``ServiceConfig`` so the app includes the Slack endpoints. Otherwise it logs
a warning and starts in health-only mode.

Configuration is driven by environment variables:

- ``ISSUEGATE_HOST``: Bind address (default ``0.0.0.0``)
- ``ISSUEGATE_PORT``: Listen port (default ``8080``)
- ``ISSUEGATE_LOG_LEVEL``: Log level (default ``INFO``)
- ``ISSUEGATE_SLACK_SIGNING_SECRET`` and the client variables documented on
  :class:`issuegate.config.ServiceConfig`

Run the service directly with ``python -m issuegate.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from issuegate.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid ISSUEGATE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Returns
    -------
    falcon.asgi.App
        Full application when a signing secret is configured, otherwise a
        health-only application.

    Raises
    ------
    ConfigError
        If a signing secret is set but the remaining configuration is
        missing or invalid.

    """
    from issuegate.api.app import create_app as _create_api_app
    from issuegate.config import SIGNING_SECRET_ENV

    if not os.environ.get(SIGNING_SECRET_ENV, "").strip():
        log_warning(
            logger,
            "%s is not set; starting in health-only mode",
            SIGNING_SECRET_ENV,
        )
        return _create_api_app()

    from issuegate.api.factory import build_dependencies
    from issuegate.config import ServiceConfig

    config = ServiceConfig.from_env()
    log_info(
        logger,
        "Slack endpoints enabled for repository %s",
        config.github.repository,
    )
    return _create_api_app(build_dependencies(config))


def main() -> None:
    """Start the issuegate server using Granian.

    Reads ``ISSUEGATE_HOST``, ``ISSUEGATE_PORT``, and ``ISSUEGATE_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("ISSUEGATE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("ISSUEGATE_PORT", "8080"))
    log_level_str = os.environ.get("ISSUEGATE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid ISSUEGATE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting issuegate on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "issuegate.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
