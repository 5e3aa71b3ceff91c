"""Slack Web API client used to open modals and answer slash commands."""

from __future__ import annotations

from .client import EphemeralMessage, SlackClient, SlackConfig, SlackWebClient
from .errors import (
    SlackAPIError,
    SlackConfigError,
    SlackError,
    SlackResponseShapeError,
)

__all__ = [
    "EphemeralMessage",
    "SlackAPIError",
    "SlackClient",
    "SlackConfig",
    "SlackConfigError",
    "SlackError",
    "SlackResponseShapeError",
    "SlackWebClient",
]
