"""Emit structured observability events for Slack interaction handling.

This module defines event identifiers and a logger wrapper used by the
signature middleware, the interaction handlers and their follow-ups.
Secrets, signatures and request bodies are never passed to these methods.

Usage
-----
>>> event_logger = InteractionEventLogger()
>>> event_logger.log_issue_created(repository="octo/reef", number=42)

"""

from __future__ import annotations

import enum

from issuegate.logging import get_logger, log_error, log_info, log_warning

logger = get_logger(__name__)

__all__ = ["InteractionEventLogger", "InteractionEventType"]


class InteractionEventType(enum.StrEnum):
    """Structured log event types for interaction handling."""

    AUTH_REJECTED = "interaction.auth.rejected"
    PAYLOAD_REJECTED = "interaction.payload.rejected"
    INTERACTION_IGNORED = "interaction.ignored"
    MODAL_OPENED = "interaction.modal.opened"
    MODAL_FAILED = "interaction.modal.failed"
    ISSUE_CREATED = "interaction.issue.created"
    ISSUE_FAILED = "interaction.issue.failed"
    FOLLOW_UP_DELIVERED = "interaction.followup.delivered"
    FOLLOW_UP_FAILED = "interaction.followup.failed"
    FALLBACK_FAILED = "interaction.followup.fallback_failed"


class InteractionEventLogger:
    """Emit structured interaction events via femtologging."""

    def log_auth_rejected(self, *, path: str, reason: str) -> None:
        """Log a request rejected by signature verification.

        Parameters
        ----------
        path
            Request path that was rejected.
        reason
            ``SignatureCheck`` value naming the failed check.

        """
        log_warning(
            logger,
            "[%s] path=%s reason=%s",
            InteractionEventType.AUTH_REJECTED,
            path,
            reason,
        )

    def log_payload_rejected(self, *, path: str, error: BaseException) -> None:
        """Log an authenticated body that could not be decoded."""
        log_warning(
            logger,
            "[%s] path=%s error=%s",
            InteractionEventType.PAYLOAD_REJECTED,
            path,
            str(error),
        )

    def log_interaction_ignored(self, *, interaction_type: str) -> None:
        """Log an interaction type acknowledged without action."""
        log_info(
            logger,
            "[%s] type=%s",
            InteractionEventType.INTERACTION_IGNORED,
            interaction_type,
        )

    def log_modal_opened(self, *, command: str, user_id: str) -> None:
        """Log a successful ``views.open`` call."""
        log_info(
            logger,
            "[%s] command=%s user_id=%s",
            InteractionEventType.MODAL_OPENED,
            command,
            user_id,
        )

    def log_modal_failed(self, *, command: str, error: BaseException) -> None:
        """Log a ``views.open`` failure that was swallowed."""
        log_error(
            logger,
            "[%s] command=%s error_type=%s error_message=%s",
            InteractionEventType.MODAL_FAILED,
            command,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_issue_created(self, *, repository: str, number: int) -> None:
        """Log a created issue."""
        log_info(
            logger,
            "[%s] repository=%s number=%d",
            InteractionEventType.ISSUE_CREATED,
            repository,
            number,
        )

    def log_issue_failed(self, *, repository: str, error: BaseException) -> None:
        """Log an issue-tracker failure surfaced as an inline modal error."""
        log_error(
            logger,
            "[%s] repository=%s error_type=%s error_message=%s",
            InteractionEventType.ISSUE_FAILED,
            repository,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_follow_up_delivered(self, *, follow_up: str) -> None:
        """Log a follow-up that delivered its result."""
        log_info(
            logger,
            "[%s] follow_up=%s",
            InteractionEventType.FOLLOW_UP_DELIVERED,
            follow_up,
        )

    def log_follow_up_failed(self, *, follow_up: str, error: BaseException) -> None:
        """Log a follow-up step that failed.

        Parameters
        ----------
        follow_up
            Follow-up name, e.g. ``completion``.
        error
            The collaborator error raised by the failed step.

        """
        log_error(
            logger,
            "[%s] follow_up=%s error_type=%s error_message=%s",
            InteractionEventType.FOLLOW_UP_FAILED,
            follow_up,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_fallback_failed(self, *, follow_up: str, error: BaseException) -> None:
        """Log a fallback message that could not be delivered."""
        log_error(
            logger,
            "[%s] follow_up=%s error_type=%s error_message=%s",
            InteractionEventType.FALLBACK_FAILED,
            follow_up,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
