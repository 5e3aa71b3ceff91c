"""Sign a request body with the Slack signing scheme for local testing."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from issuegate.auth.signature import sign
from issuegate.common.time import epoch_seconds
from issuegate.config import SIGNING_SECRET_ENV


def _read_body(args: argparse.Namespace) -> bytes:
    if args.body is not None:
        return args.body.encode("utf-8")
    body_file: Path = args.body_file
    return body_file.read_bytes()


def main(argv: list[str] | None = None) -> int:
    """Print the timestamp and signature headers for a request body.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when no signing secret is available or the
        body file cannot be read.

    Examples
    --------
    Pipe the output into curl headers::

        issuegate-sign --secret s3cr3t --body 'command=/issue&trigger_id=T1'

    """
    parser = argparse.ArgumentParser(description=__doc__)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "body_file", type=Path, nargs="?", help="File holding the raw body"
    )
    source.add_argument("--body", default=None, help="Raw body text")
    parser.add_argument(
        "--secret",
        default=None,
        help=f"Signing secret (defaults to ${SIGNING_SECRET_ENV})",
    )
    parser.add_argument(
        "--timestamp",
        type=int,
        default=None,
        help="Epoch seconds to sign with (defaults to now)",
    )
    args = parser.parse_args(argv)

    secret = args.secret or os.environ.get(SIGNING_SECRET_ENV, "")
    if not secret:
        print(
            f"No signing secret: pass --secret or set {SIGNING_SECRET_ENV}",
            file=sys.stderr,
        )
        return 1

    try:
        body = _read_body(args)
    except OSError as exc:
        print(f"Cannot read body: {exc}", file=sys.stderr)
        return 1

    timestamp = str(args.timestamp if args.timestamp is not None else epoch_seconds())
    print(f"X-Slack-Request-Timestamp: {timestamp}")
    print(f"X-Slack-Signature: {sign(secret.encode('utf-8'), timestamp, body)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
