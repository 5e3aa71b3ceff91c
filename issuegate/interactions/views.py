"""Block Kit views for the issue modal and its confirmation.

The block and action identifiers defined here are the contract between the
modal this service opens and the submission decoder that reads it back.
"""

from __future__ import annotations

import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from issuegate.github.models import IssueResult

__all__ = [
    "AI_ACTION_ID",
    "AI_BLOCK_ID",
    "AI_TIPS_OPTION",
    "DESCRIPTION_ACTION_ID",
    "DESCRIPTION_BLOCK_ID",
    "ISSUE_MODAL_CALLBACK_ID",
    "LABELS_ACTION_ID",
    "LABELS_BLOCK_ID",
    "TITLE_ACTION_ID",
    "TITLE_BLOCK_ID",
    "build_issue_created_view",
    "build_issue_modal",
    "build_submission_errors",
]

ISSUE_MODAL_CALLBACK_ID = "create_issue_modal"

TITLE_BLOCK_ID = "title_b"
TITLE_ACTION_ID = "title"
DESCRIPTION_BLOCK_ID = "desc_b"
DESCRIPTION_ACTION_ID = "desc"
LABELS_BLOCK_ID = "labels_b"
LABELS_ACTION_ID = "labels"
AI_BLOCK_ID = "ai_b"
AI_ACTION_ID = "ai"
AI_TIPS_OPTION = "ai_tips"

_TITLE_MIN_LENGTH = 5


def _plain(text: str) -> dict[str, str]:
    return {"type": "plain_text", "text": text}


def _input_block(
    block_id: str,
    label: str,
    element: dict[str, typ.Any],
    *,
    optional: bool = False,
) -> dict[str, typ.Any]:
    block: dict[str, typ.Any] = {
        "type": "input",
        "block_id": block_id,
        "label": _plain(label),
        "element": element,
    }
    if optional:
        block["optional"] = True
    return block


def build_issue_modal(repository: str) -> dict[str, typ.Any]:
    """Return the modal used to collect a new issue.

    Parameters
    ----------
    repository
        ``owner/name`` slug embedded in ``private_metadata``. Informational
        only; submissions always target the configured repository.

    Returns
    -------
    dict[str, Any]
        A ``modal`` view with title, description, labels and AI-tips inputs.

    """
    return {
        "type": "modal",
        "callback_id": ISSUE_MODAL_CALLBACK_ID,
        "private_metadata": msgspec.json.encode({"repo": repository}).decode(),
        "title": _plain("Create GitHub Issue"),
        "submit": _plain("Create"),
        "close": _plain("Cancel"),
        "blocks": [
            _input_block(
                TITLE_BLOCK_ID,
                "Title",
                {
                    "type": "plain_text_input",
                    "action_id": TITLE_ACTION_ID,
                    "min_length": _TITLE_MIN_LENGTH,
                },
            ),
            _input_block(
                DESCRIPTION_BLOCK_ID,
                "Description",
                {
                    "type": "plain_text_input",
                    "action_id": DESCRIPTION_ACTION_ID,
                    "multiline": True,
                },
            ),
            _input_block(
                LABELS_BLOCK_ID,
                "Labels (comma separated)",
                {"type": "plain_text_input", "action_id": LABELS_ACTION_ID},
                optional=True,
            ),
            _input_block(
                AI_BLOCK_ID,
                "AI remediation tips",
                {
                    "type": "checkboxes",
                    "action_id": AI_ACTION_ID,
                    "options": [
                        {
                            "text": _plain("Yes, generate remediation tips"),
                            "value": AI_TIPS_OPTION,
                        }
                    ],
                },
                optional=True,
            ),
        ],
    }


def build_issue_created_view(issue: IssueResult) -> dict[str, typ.Any]:
    """Return the ``update`` response that replaces the modal with a link.

    Examples
    --------
    >>> from issuegate.github.models import IssueResult
    >>> reply = build_issue_created_view(
    ...     IssueResult(number=42, html_url="https://example/42")
    ... )
    >>> reply["view"]["blocks"][0]["text"]["text"]
    'Created issue: <https://example/42|#42>'

    """
    return {
        "response_action": "update",
        "view": {
            "type": "modal",
            "title": _plain("Done"),
            "close": _plain("Close"),
            "blocks": [
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": f"Created issue: <{issue.html_url}|#{issue.number}>",
                    },
                }
            ],
        },
    }


def build_submission_errors(message: str) -> dict[str, typ.Any]:
    """Return an ``errors`` response that keeps the modal open.

    The message is attached to the title block so Slack renders it inline.
    """
    return {"response_action": "errors", "errors": {TITLE_BLOCK_ID: message}}
