"""issuegate HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives Slack slash commands and interactions.

Usage
-----
Create and run the application::

    from issuegate.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with Slack endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with
    health endpoints and optionally the Slack endpoints when
    dependencies are provided.
"""

from issuegate.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
