"""Typed request and response models for the GitHub issues API."""

from __future__ import annotations

import msgspec


class IssueRequest(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Body of ``POST /repos/{owner}/{name}/issues``.

    ``labels`` is omitted from the encoded body when empty.
    """

    title: str
    body: str
    labels: tuple[str, ...] = ()


class IssueResult(msgspec.Struct, kw_only=True, frozen=True):
    """Fields the service needs from a created issue."""

    number: int
    html_url: str


class IssueComment(msgspec.Struct, kw_only=True, frozen=True):
    """Fields the service needs from a created issue comment."""

    id: int
    html_url: str
