"""Falcon resource serving Slack slash commands and interactions.

Both ``/slack/commands`` and ``/slack/interactions`` route here; the decoded
payload shape decides which handler runs. The signature middleware has
already authenticated the request and stored its raw body on
``req.context.raw_body``.
"""

from __future__ import annotations

import typing as typ

import falcon

from issuegate.interactions.decoding import decode_payload
from issuegate.interactions.models import (
    InteractionOutcome,
    InteractionReply,
    SlashCommand,
    ViewSubmission,
)
from issuegate.interactions.observability import InteractionEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from issuegate.background import BackgroundTasks
    from issuegate.interactions.commands import CommandDispatcher
    from issuegate.interactions.submissions import SubmissionHandler

__all__ = ["SlackWebhookResource"]


class SlackWebhookResource:
    """Handle ``POST`` requests from Slack.

    Parameters
    ----------
    dispatcher
        Slash command handler.
    submissions
        Modal submission handler.
    tasks
        Tracker that runs follow-ups after the reply is sent.
    event_logger
        Event logger for ignored interactions.

    """

    requires_slack_signature = True

    def __init__(
        self,
        *,
        dispatcher: CommandDispatcher,
        submissions: SubmissionHandler,
        tasks: BackgroundTasks,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Initialize the resource with its handlers."""
        self._dispatcher = dispatcher
        self._submissions = submissions
        self._tasks = tasks
        self._events = event_logger or InteractionEventLogger()

    async def on_post(self, req: Request, resp: Response) -> None:
        """Decode the payload, dispatch it and schedule any follow-up.

        Raises
        ------
        PayloadDecodeError
            If the body is not a usable payload; mapped to an empty 200.

        """
        payload = decode_payload(req.context.raw_body)

        match payload:
            case SlashCommand():
                outcome = await self._dispatcher.handle(payload)
            case ViewSubmission():
                outcome = await self._submissions.handle(payload)
            case _:
                self._events.log_interaction_ignored(interaction_type=payload.type)
                outcome = InteractionOutcome(reply=InteractionReply.empty())

        _apply_reply(resp, outcome.reply)
        if outcome.follow_up is not None:
            self._tasks.schedule(
                resp, outcome.follow_up.run, name=outcome.follow_up.name
            )


def _apply_reply(resp: Response, reply: InteractionReply) -> None:
    resp.status = reply.status
    if reply.media is not None:
        resp.media = reply.media
        return
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = reply.text or ""
