"""Decode raw Slack request bodies into interaction payloads.

Slack posts ``application/x-www-form-urlencoded`` bodies. Slash commands
carry their fields directly; interactive components wrap a JSON document in a
single ``payload`` field. Decoding fails closed: a body that is missing a
required field raises :class:`PayloadDecodeError` rather than producing a
partially populated payload.

Usage
-----
>>> decode_payload(b"command=%2Fissue&trigger_id=T1&text=")
SlashCommand(trigger_id='T1', response_url=None, text='', command='/issue', user_id='')

"""

from __future__ import annotations

import urllib.parse

import msgspec

from .models import (
    InteractionPayload,
    SlashCommand,
    UnrecognizedInteraction,
    ViewSubmission,
)
from .views import (
    AI_ACTION_ID,
    AI_BLOCK_ID,
    AI_TIPS_OPTION,
    DESCRIPTION_ACTION_ID,
    DESCRIPTION_BLOCK_ID,
    ISSUE_MODAL_CALLBACK_ID,
    LABELS_ACTION_ID,
    LABELS_BLOCK_ID,
    TITLE_ACTION_ID,
    TITLE_BLOCK_ID,
)

__all__ = ["PayloadDecodeError", "decode_payload", "split_labels"]

VIEW_SUBMISSION_TYPE = "view_submission"

# Slack bodies hold well under a hundred fields
_MAX_FORM_FIELDS = 100


class PayloadDecodeError(ValueError):
    """Raised when a request body is not a usable interaction payload."""

    @classmethod
    def malformed_form(cls, detail: str) -> PayloadDecodeError:
        """Create error for a body that is not a valid form encoding."""
        return cls(f"Malformed form body: {detail}")

    @classmethod
    def repeated_field(cls, name: str) -> PayloadDecodeError:
        """Create error for a form field that appears more than once."""
        return cls(f"Form field {name!r} appears more than once")

    @classmethod
    def missing(cls, field: str) -> PayloadDecodeError:
        """Create error for a required field that is absent or blank."""
        return cls(f"Missing required field: {field}")

    @classmethod
    def invalid_json(cls, detail: str) -> PayloadDecodeError:
        """Create error for an interaction ``payload`` that is not valid."""
        return cls(f"Invalid interaction payload: {detail}")

    @classmethod
    def insecure_callback(cls) -> PayloadDecodeError:
        """Create error for a ``response_url`` that is not an HTTPS URL."""
        return cls("response_url must be an absolute https URL")

    @classmethod
    def unknown_shape(cls) -> PayloadDecodeError:
        """Create error for a form body that is neither command nor payload."""
        return cls("Body is neither a slash command nor an interaction payload")


class _InteractionProbe(msgspec.Struct):
    type: str


class _SelectedOption(msgspec.Struct):
    value: str


class _ElementState(msgspec.Struct):
    value: str | None = None
    selected_options: list[_SelectedOption] = msgspec.field(default_factory=list)


class _ViewState(msgspec.Struct):
    values: dict[str, dict[str, _ElementState]] = msgspec.field(
        default_factory=dict
    )


class _View(msgspec.Struct):
    state: _ViewState
    callback_id: str | None = None
    private_metadata: str | None = None


class _ViewSubmissionEnvelope(msgspec.Struct):
    type: str
    view: _View


def _parse_form(body: bytes) -> dict[str, str]:
    try:
        text = body.decode("utf-8")
        parsed = urllib.parse.parse_qs(
            text,
            keep_blank_values=True,
            errors="strict",
            max_num_fields=_MAX_FORM_FIELDS,
        )
    except ValueError as exc:
        # UnicodeDecodeError is a ValueError subclass
        raise PayloadDecodeError.malformed_form(str(exc)) from exc

    fields: dict[str, str] = {}
    for name, values in parsed.items():
        if len(values) != 1:
            raise PayloadDecodeError.repeated_field(name)
        fields[name] = values[0]
    return fields


def _require(fields: dict[str, str], name: str) -> str:
    value = fields.get(name, "").strip()
    if not value:
        raise PayloadDecodeError.missing(name)
    return value


def _callback_url(raw: str | None) -> str | None:
    if raw is None or not raw.strip():
        return None
    url = raw.strip()
    parts = urllib.parse.urlsplit(url)
    if parts.scheme != "https" or not parts.netloc:
        raise PayloadDecodeError.insecure_callback()
    return url


def split_labels(raw: str | None) -> tuple[str, ...]:
    """Split a comma separated label string, dropping blank entries.

    Examples
    --------
    >>> split_labels(" bug, security ,,")
    ('bug', 'security')

    """
    if not raw:
        return ()
    return tuple(label for part in raw.split(",") if (label := part.strip()))


def _decode_slash_command(fields: dict[str, str]) -> SlashCommand:
    return SlashCommand(
        trigger_id=_require(fields, "trigger_id"),
        response_url=_callback_url(fields.get("response_url")),
        text=fields.get("text", "").strip(),
        command=fields.get("command", ""),
        user_id=fields.get("user_id", ""),
    )


def _element(state: _ViewState, block_id: str, action_id: str) -> _ElementState:
    return state.values.get(block_id, {}).get(action_id) or _ElementState()


def _required_value(state: _ViewState, block_id: str, action_id: str) -> str:
    value = _element(state, block_id, action_id).value
    if value is None or not value.strip():
        raise PayloadDecodeError.missing(f"{block_id}.{action_id}")
    return value.strip()


def _submission_from_view(view: _View) -> ViewSubmission:
    state = view.state
    ai_options = _element(state, AI_BLOCK_ID, AI_ACTION_ID).selected_options
    return ViewSubmission(
        title=_required_value(state, TITLE_BLOCK_ID, TITLE_ACTION_ID),
        description=_required_value(
            state, DESCRIPTION_BLOCK_ID, DESCRIPTION_ACTION_ID
        ),
        labels=split_labels(_element(state, LABELS_BLOCK_ID, LABELS_ACTION_ID).value),
        ai_requested=any(option.value == AI_TIPS_OPTION for option in ai_options),
    )


def _decode_interaction(payload: str) -> InteractionPayload:
    try:
        probe = msgspec.json.decode(payload, type=_InteractionProbe)
        if probe.type != VIEW_SUBMISSION_TYPE:
            return UnrecognizedInteraction(type=probe.type)
        envelope = msgspec.json.decode(payload, type=_ViewSubmissionEnvelope)
    except msgspec.DecodeError as exc:
        raise PayloadDecodeError.invalid_json(str(exc)) from exc

    # Submissions from other modals share the endpoint
    if envelope.view.callback_id not in {None, ISSUE_MODAL_CALLBACK_ID}:
        return UnrecognizedInteraction(type=probe.type)
    return _submission_from_view(envelope.view)


def decode_payload(body: bytes) -> InteractionPayload:
    """Decode a raw Slack request body.

    Parameters
    ----------
    body
        Raw, already authenticated request body.

    Returns
    -------
    InteractionPayload
        ``SlashCommand``, ``ViewSubmission`` or ``UnrecognizedInteraction``.

    Raises
    ------
    PayloadDecodeError
        If the body is not valid form encoding, repeats a field, lacks a
        required field, carries invalid JSON or a non-HTTPS callback URL.

    """
    fields = _parse_form(body)

    if "payload" in fields:
        return _decode_interaction(fields["payload"])
    if "command" in fields or "trigger_id" in fields:
        return _decode_slash_command(fields)
    raise PayloadDecodeError.unknown_shape()
