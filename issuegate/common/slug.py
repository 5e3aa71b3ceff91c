"""Repository slug utilities.

Issue-tracker repositories are identified by GitHub slugs in ``owner/name``
format. They end up inside request paths, so they are validated once at
configuration time rather than trusted as free text.
"""

from __future__ import annotations

import re

_SEGMENT = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug is not two non-empty segments of GitHub-safe characters.

    Examples
    --------
    >>> parse_repo_slug("acme/appsec")
    ('acme', 'appsec')

    """
    if slug.count("/") != 1:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    owner, name = slug.split("/")
    if not _SEGMENT.match(owner) or not _SEGMENT.match(name) or name in {".", ".."}:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name
