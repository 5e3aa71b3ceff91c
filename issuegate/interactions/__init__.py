"""Slack interaction payloads, handlers and follow-ups."""

from __future__ import annotations

from .commands import ACK_TEXT, FALLBACK_TEXT, CommandDispatcher, CompletionFollowUp
from .decoding import PayloadDecodeError, decode_payload
from .models import (
    FollowUp,
    InteractionOutcome,
    InteractionPayload,
    InteractionReply,
    SlashCommand,
    UnrecognizedInteraction,
    ViewSubmission,
)
from .observability import InteractionEventLogger, InteractionEventType
from .submissions import RemediationTipsFollowUp, SubmissionHandler

__all__ = [
    "ACK_TEXT",
    "FALLBACK_TEXT",
    "CommandDispatcher",
    "CompletionFollowUp",
    "FollowUp",
    "InteractionEventLogger",
    "InteractionEventType",
    "InteractionOutcome",
    "InteractionPayload",
    "InteractionReply",
    "PayloadDecodeError",
    "RemediationTipsFollowUp",
    "SlashCommand",
    "SubmissionHandler",
    "UnrecognizedInteraction",
    "ViewSubmission",
    "decode_payload",
]
