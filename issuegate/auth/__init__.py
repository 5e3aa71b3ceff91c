"""Inbound request authentication.

Public API
----------
IncomingRequest
    Immutable headers, raw body and receive time of an inbound request.
SignatureCheck
    Classified outcome of a signature check.
check_signature
    Classify a request's signature and timestamp.
verify
    Boolean form of ``check_signature``.
sign
    Compute the signature header value for a body.

"""

from __future__ import annotations

from issuegate.auth.signature import (
    MAX_CLOCK_SKEW_S,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    IncomingRequest,
    SignatureCheck,
    SignatureProof,
    check_signature,
    sign,
    verify,
)

__all__ = [
    "MAX_CLOCK_SKEW_S",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "IncomingRequest",
    "SignatureCheck",
    "SignatureProof",
    "check_signature",
    "sign",
    "verify",
]
