"""Decoded interaction payloads and the replies handlers produce.

Usage
-----
Handlers accept one payload variant and return an ``InteractionOutcome``::

    outcome = await dispatcher.handle(command)
    outcome.reply.status  # 200
    outcome.follow_up  # None or an object with ``async run()``

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from http import HTTPStatus

__all__ = [
    "FollowUp",
    "InteractionOutcome",
    "InteractionPayload",
    "InteractionReply",
    "SlashCommand",
    "UnrecognizedInteraction",
    "ViewSubmission",
]


@dc.dataclass(frozen=True, slots=True)
class SlashCommand:
    """A slash command invocation.

    Attributes
    ----------
    trigger_id
        Short-lived identifier required to open a modal.
    response_url
        HTTPS callback URL for delayed answers, if Slack supplied one.
    text
        Free text typed after the command, stripped of surrounding space.
    command
        The command name, e.g. ``/issue``.
    user_id
        Invoking user's identifier.

    """

    trigger_id: str
    response_url: str | None = None
    text: str = ""
    command: str = ""
    user_id: str = ""


@dc.dataclass(frozen=True, slots=True)
class ViewSubmission:
    """Values submitted from the issue modal."""

    title: str
    description: str
    labels: tuple[str, ...] = ()
    ai_requested: bool = False


@dc.dataclass(frozen=True, slots=True)
class UnrecognizedInteraction:
    """Any interaction this service acknowledges without acting on."""

    type: str


InteractionPayload = SlashCommand | ViewSubmission | UnrecognizedInteraction


class FollowUp(typ.Protocol):
    """Work that runs after the synchronous reply has been sent."""

    @property
    def name(self) -> str:
        """Short label used in task names and log records."""
        ...

    async def run(self) -> None:
        """Perform the follow-up, handling its own collaborator errors."""
        ...


@dc.dataclass(frozen=True, slots=True)
class InteractionReply:
    """Synchronous HTTP reply for an interaction.

    Exactly one of ``text`` and ``media`` is set, or neither for an empty
    body.
    """

    status: HTTPStatus = HTTPStatus.OK
    text: str | None = None
    media: dict[str, typ.Any] | None = None

    @classmethod
    def plain_text(cls, text: str) -> InteractionReply:
        """Return a 200 ``text/plain`` reply."""
        return cls(text=text)

    @classmethod
    def json(cls, media: dict[str, typ.Any]) -> InteractionReply:
        """Return a 200 JSON reply."""
        return cls(media=media)

    @classmethod
    def empty(cls) -> InteractionReply:
        """Return a 200 reply with an empty body."""
        return cls(text="")


@dc.dataclass(frozen=True, slots=True)
class InteractionOutcome:
    """Reply to send now plus optional work to run afterwards."""

    reply: InteractionReply
    follow_up: FollowUp | None = None
