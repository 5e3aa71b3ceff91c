"""Slack client errors."""

from __future__ import annotations


class SlackError(RuntimeError):
    """Base exception for all Slack client errors."""


class SlackAPIError(SlackError):
    """Raised when Slack rejects a call or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, status_code: int) -> SlackAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"Slack {method} HTTP {status_code}", status_code=status_code)

    @classmethod
    def api_error(cls, method: str, error: str) -> SlackAPIError:
        """Return an error for ``{"ok": false}`` Web API replies."""
        return cls(f"Slack {method} failed: {error}")

    @classmethod
    def timeout(cls, method: str) -> SlackAPIError:
        """Return an error for request timeouts."""
        return cls(f"Slack {method} timed out")

    @classmethod
    def network_error(cls, method: str, detail: str) -> SlackAPIError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"Slack {method} network error: {detail}")


class SlackResponseShapeError(SlackError):
    """Raised when a Slack reply is missing expected fields."""

    @classmethod
    def invalid_json(cls, method: str) -> SlackResponseShapeError:
        """Return an error for replies that are not a JSON object."""
        return cls(f"Slack {method} returned a non-JSON reply")


class SlackConfigError(SlackError):
    """Raised when Slack client configuration is invalid."""

    @classmethod
    def empty_bot_token(cls) -> SlackConfigError:
        """Return an error when the bot token is empty."""
        return cls("Slack bot token must be non-empty")
