"""Slack request signature verification.

Slack signs every request with HMAC-SHA256 over
``v0:<timestamp>:<raw body>`` using the app's signing secret and sends the
result as ``X-Slack-Signature: v0=<hex digest>`` alongside
``X-Slack-Request-Timestamp``. A request is authentic when the recomputed
signature matches and the timestamp lies within five minutes of the
verifier's clock.

All functions here are pure: they read only their arguments and never raise
on attacker-controlled input.

Usage
-----
>>> body = b"token=x&trigger_id=123.456"
>>> headers = {
...     TIMESTAMP_HEADER: "1700000000",
...     SIGNATURE_HEADER: sign(b"secret", "1700000000", body),
... }
>>> request = IncomingRequest(headers=headers, body=body, received_at=1700000010)
>>> verify(request, b"secret", 1700000010)
True

"""

from __future__ import annotations

import dataclasses as dc
import enum
import hashlib
import hmac
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = [
    "MAX_CLOCK_SKEW_S",
    "SIGNATURE_HEADER",
    "SIGNATURE_VERSION",
    "TIMESTAMP_HEADER",
    "IncomingRequest",
    "SignatureCheck",
    "SignatureProof",
    "check_signature",
    "sign",
    "verify",
]

SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"
SIGNATURE_VERSION = "v0"
MAX_CLOCK_SKEW_S = 300

# Slack timestamps are ten-digit epoch seconds; anything much longer is junk.
_MAX_TIMESTAMP_CHARS = 20


@dc.dataclass(frozen=True, slots=True)
class IncomingRequest:
    """Immutable view of an inbound HTTP request.

    Attributes
    ----------
    headers
        Header mapping with lower-cased names.
    body
        Raw request body exactly as received.
    received_at
        Epoch seconds at which the request was received.

    """

    headers: cabc.Mapping[str, str]
    body: bytes
    received_at: int

    def header(self, name: str) -> str | None:
        """Return a header value by case-insensitive name."""
        return self.headers.get(name.lower())


@dc.dataclass(frozen=True, slots=True)
class SignatureProof:
    """Claimed and recomputed signature for a single verification."""

    claimed_signature: str
    claimed_timestamp: str
    expected_signature: str


class SignatureCheck(enum.StrEnum):
    """Outcome of a signature check; only ``VALID`` authenticates."""

    VALID = "valid"
    MISSING_HEADERS = "missing_headers"
    MALFORMED_TIMESTAMP = "malformed_timestamp"
    STALE_TIMESTAMP = "stale_timestamp"
    MALFORMED_SIGNATURE = "malformed_signature"
    MISMATCH = "mismatch"


def _base_string(timestamp: str, body: bytes) -> bytes:
    return f"{SIGNATURE_VERSION}:{timestamp}:".encode("ascii") + body


def sign(signing_secret: bytes, timestamp: str, body: bytes) -> str:
    """Compute the ``X-Slack-Signature`` value for ``body``.

    Parameters
    ----------
    signing_secret
        Shared signing secret.
    timestamp
        Request timestamp exactly as sent in ``X-Slack-Request-Timestamp``.
    body
        Raw request body.

    Returns
    -------
    str
        ``"v0=" + hex(HMAC-SHA256(secret, "v0:" + timestamp + ":" + body))``.

    """
    digest = hmac.new(
        signing_secret, _base_string(timestamp, body), hashlib.sha256
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def _parse_timestamp(raw: str) -> int | None:
    if len(raw) > _MAX_TIMESTAMP_CHARS or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def _signatures_match(proof: SignatureProof) -> bool:
    try:
        claimed = proof.claimed_signature.encode("ascii")
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(proof.expected_signature.encode("ascii"), claimed)


def check_signature(
    request: IncomingRequest,
    signing_secret: bytes,
    now_epoch_seconds: int,
) -> SignatureCheck:
    """Classify whether ``request`` carries a fresh, valid signature.

    Parameters
    ----------
    request
        Inbound request carrying headers and the raw body.
    signing_secret
        Shared signing secret.
    now_epoch_seconds
        Wall-clock time of verification.

    Returns
    -------
    SignatureCheck
        ``VALID`` for authentic requests; otherwise the first failed check.

    """
    claimed_signature = request.header(SIGNATURE_HEADER)
    claimed_timestamp = request.header(TIMESTAMP_HEADER)
    if not claimed_signature or not claimed_timestamp:
        return SignatureCheck.MISSING_HEADERS

    timestamp = _parse_timestamp(claimed_timestamp)
    if timestamp is None:
        return SignatureCheck.MALFORMED_TIMESTAMP
    if abs(now_epoch_seconds - timestamp) > MAX_CLOCK_SKEW_S:
        return SignatureCheck.STALE_TIMESTAMP

    proof = SignatureProof(
        claimed_signature=claimed_signature,
        claimed_timestamp=claimed_timestamp,
        expected_signature=sign(signing_secret, claimed_timestamp, request.body),
    )
    if not proof.claimed_signature.isascii():
        return SignatureCheck.MALFORMED_SIGNATURE
    if not _signatures_match(proof):
        return SignatureCheck.MISMATCH
    return SignatureCheck.VALID


def verify(
    request: IncomingRequest,
    signing_secret: bytes,
    now_epoch_seconds: int,
) -> bool:
    """Return whether ``request`` was signed with ``signing_secret`` recently.

    Never raises: missing or malformed headers, stale timestamps and
    mismatching signatures all return ``False``.
    """
    return check_signature(request, signing_secret, now_epoch_seconds) is (
        SignatureCheck.VALID
    )
