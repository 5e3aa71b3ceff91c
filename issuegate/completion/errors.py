"""Custom exceptions for chat completion operations."""

from __future__ import annotations

# Content preview length for error messages
_CONTENT_PREVIEW_LIMIT = 100


class CompletionError(Exception):
    """Base exception for all completion client errors.

    The slash-command follow-up catches this single type to decide when to
    send the fallback message.
    """


class CompletionAPIError(CompletionError):
    """Raised when the completion endpoint returns an error or is unreachable.

    Attributes
    ----------
    status_code
        HTTP status code from the API response, if available.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise the error with message and optional status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> CompletionAPIError:
        """Create error for HTTP error responses."""
        return cls(f"Completion API HTTP error {status_code}", status_code=status_code)

    @classmethod
    def rate_limited(cls, retry_after: int | None = None) -> CompletionAPIError:
        """Create error for rate limit (429) responses.

        Parameters
        ----------
        retry_after
            Seconds to wait before retrying, from the Retry-After header.

        Returns
        -------
        CompletionAPIError
            Error indicating rate limiting.

        """
        msg = "Completion API rate limited"
        if retry_after is not None:
            msg = f"{msg}, retry after {retry_after}s"
        return cls(msg, status_code=429)

    @classmethod
    def timeout(cls) -> CompletionAPIError:
        """Create error for request timeouts."""
        return cls("Completion API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> CompletionAPIError:
        """Create error for network failures (DNS, connection, TLS, etc.)."""
        return cls(f"Completion API network error: {detail}")


class CompletionResponseShapeError(CompletionError):
    """Raised when a completion response is missing fields or malformed."""

    @classmethod
    def missing(cls, field: str) -> CompletionResponseShapeError:
        """Create error for a missing response field."""
        return cls(f"Completion response missing expected field: {field}")

    @classmethod
    def invalid_json(cls, content: str) -> CompletionResponseShapeError:
        """Create error for a body that is not JSON, with a truncated preview."""
        if len(content) > _CONTENT_PREVIEW_LIMIT:
            preview = content[:_CONTENT_PREVIEW_LIMIT] + "..."
        else:
            preview = content
        return cls(f"Failed to parse JSON from completion response: {preview}")


class CompletionConfigError(CompletionError):
    """Raised when completion client configuration is invalid."""

    @classmethod
    def empty_field(cls, field: str) -> CompletionConfigError:
        """Create error for a required setting that is blank."""
        return cls(f"Completion {field} must be non-empty")
