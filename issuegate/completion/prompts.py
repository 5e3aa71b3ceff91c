"""Prompt templates for the completion client."""

from __future__ import annotations

SYSTEM_PROMPT = "You are an AppSec helper. Be concise (<=150 words)."

EMPTY_COMPLETION_TEXT = "No response."


def build_remediation_prompt(title: str, description: str) -> str:
    """Build the user prompt asking for remediation tips on a new issue.

    Examples
    --------
    >>> print(build_remediation_prompt("XSS in search", "Query is echoed."))
    Suggest remediation steps for this security issue.
    <BLANKLINE>
    Title: XSS in search
    <BLANKLINE>
    Query is echoed.

    """
    return (
        "Suggest remediation steps for this security issue.\n\n"
        f"Title: {title}\n\n"
        f"{description}"
    )
