"""Slash command handling: open the issue modal and answer free text.

Slack expects an acknowledgement within three seconds, so the dispatcher
only performs the ``views.open`` call before replying. Any free-text answer
is produced by a :class:`CompletionFollowUp` that runs after the reply has
been sent and reports back through the command's ``response_url``.
"""

from __future__ import annotations

import typing as typ

from issuegate.slack.client import EphemeralMessage

from .models import InteractionOutcome, InteractionReply
from .observability import InteractionEventLogger
from .views import build_issue_modal

if typ.TYPE_CHECKING:
    from issuegate.completion.client import TextGenerator
    from issuegate.slack.client import SlackClient

    from .models import SlashCommand

__all__ = ["ACK_TEXT", "FALLBACK_TEXT", "CommandDispatcher", "CompletionFollowUp"]

ACK_TEXT = "Opening form…"
FALLBACK_TEXT = "Sorry—AI response failed."


class CompletionFollowUp:
    """Generate an answer for free text and post it to the response URL.

    Exactly one message reaches ``response_url`` per run: the answer when it
    is generated and delivered, otherwise the fallback text. A fallback that
    cannot be delivered is logged.

    Parameters
    ----------
    slack
        Client used to post to ``response_url``.
    generator
        Text generator producing the answer.
    response_url
        Slack callback URL from the slash command.
    prompt
        Free text typed after the command.
    event_logger
        Event logger; a default instance is used when omitted.

    """

    name = "completion"

    def __init__(
        self,
        *,
        slack: SlackClient,
        generator: TextGenerator,
        response_url: str,
        prompt: str,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Store collaborators and the request values."""
        self._slack = slack
        self._generator = generator
        self._response_url = response_url
        self._prompt = prompt
        self._events = event_logger or InteractionEventLogger()

    @property
    def response_url(self) -> str:
        """Callback URL this follow-up posts to."""
        return self._response_url

    @property
    def prompt(self) -> str:
        """Prompt sent to the generator."""
        return self._prompt

    async def run(self) -> None:
        """Generate the answer and deliver it, or deliver the fallback."""
        try:
            answer = await self._generator.complete(self._prompt)
        except Exception as exc:  # noqa: BLE001 - any failure becomes the fallback
            self._events.log_follow_up_failed(follow_up=self.name, error=exc)
            await self._send_fallback()
            return

        try:
            await self._slack.post_response(
                self._response_url, EphemeralMessage(text=answer)
            )
        except Exception as exc:  # noqa: BLE001 - any failure becomes the fallback
            self._events.log_follow_up_failed(follow_up=self.name, error=exc)
            await self._send_fallback()
            return

        self._events.log_follow_up_delivered(follow_up=self.name)

    async def _send_fallback(self) -> None:
        try:
            await self._slack.post_response(
                self._response_url, EphemeralMessage(text=FALLBACK_TEXT)
            )
        except Exception as exc:  # noqa: BLE001 - nothing left to deliver
            self._events.log_fallback_failed(follow_up=self.name, error=exc)


class CommandDispatcher:
    """Handle slash commands.

    Parameters
    ----------
    slack
        Slack client for ``views.open`` and response URL delivery.
    generator
        Text generator for free-text answers.
    repository
        ``owner/name`` slug embedded in the modal's private metadata.
    event_logger
        Event logger; a default instance is used when omitted.

    """

    def __init__(
        self,
        *,
        slack: SlackClient,
        generator: TextGenerator,
        repository: str,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Store collaborators for later dispatch."""
        self._slack = slack
        self._generator = generator
        self._repository = repository
        self._events = event_logger or InteractionEventLogger()

    async def handle(self, command: SlashCommand) -> InteractionOutcome:
        """Open the issue modal and schedule an answer for any free text.

        The modal is opened before the follow-up is created. A failed
        ``views.open`` is logged and does not change the reply.

        Returns
        -------
        InteractionOutcome
            A 200 ``text/plain`` acknowledgement and, when ``text`` is
            non-empty and a response URL is present, a
            :class:`CompletionFollowUp`.

        """
        try:
            await self._slack.open_view(
                command.trigger_id, build_issue_modal(self._repository)
            )
        except Exception as exc:  # noqa: BLE001 - the command is always acknowledged
            self._events.log_modal_failed(command=command.command, error=exc)
        else:
            self._events.log_modal_opened(
                command=command.command, user_id=command.user_id
            )

        follow_up = None
        prompt = command.text.strip()
        if prompt and command.response_url is not None:
            follow_up = CompletionFollowUp(
                slack=self._slack,
                generator=self._generator,
                response_url=command.response_url,
                prompt=prompt,
                event_logger=self._events,
            )

        return InteractionOutcome(
            reply=InteractionReply.plain_text(ACK_TEXT),
            follow_up=follow_up,
        )
