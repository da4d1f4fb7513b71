"""Slack request signature verification.

See https://api.slack.com/authentication/verifying-requests-from-slack for the
protocol. In short:

    base_string = "v0:{timestamp}:{raw_body}"
    signature   = "v0=" + hex(HMAC_SHA256(signing_key, base_string))

Every failure mode (missing header, stale or malformed timestamp, mismatched
signature) returns False without saying which check failed. A missing signing
key or raw body is a ConfigurationError instead: that is a broken deployment,
not a malicious caller.
"""

import hashlib
import hmac
import re
import time
from dataclasses import dataclass, field
from typing import Mapping

from slash.config import FRESHNESS_WINDOW_SECONDS
from slash.errors import ConfigurationError


SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"
VERSION = "v0"

# Decimal unix seconds, length-bounded before int()
_TIMESTAMP_RE = re.compile(r"\d{1,15}", re.ASCII)


@dataclass(frozen=True)
class VerificationContext:
    """Everything needed to check one request. Never logged."""
    signing_key: str = field(repr=False)
    signature: str | None = field(repr=False)
    timestamp: str | None
    raw_body: bytes = field(repr=False)


def generate(signing_key: str, timestamp: str, raw_body: bytes) -> str:
    """Compute the ``v0=<hex>`` signature Slack would send for this body."""
    base = f"{VERSION}:{timestamp}:".encode() + raw_body
    digest = hmac.new(signing_key.encode(), base, hashlib.sha256).hexdigest()
    return f"{VERSION}={digest}"


def verify(expected: str, signature: str) -> bool:
    """Constant-time comparison of two signatures."""
    return hmac.compare_digest(expected.encode(), signature.encode())


def valid_timestamp(timestamp: str, now: float | None = None) -> bool:
    """Check a decimal unix timestamp is within the freshness window of now.

    Timestamps from the future are held to the same window as old ones.
    """
    if not _TIMESTAMP_RE.fullmatch(timestamp):
        return False
    try:
        sent = int(timestamp)
    except ValueError:
        return False
    current = int(now if now is not None else time.time())
    return abs(current - sent) < FRESHNESS_WINDOW_SECONDS


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def build_context(
    signing_key: str | None,
    headers: Mapping[str, str],
    raw_body: bytes | None,
) -> VerificationContext:
    """Collect the verification inputs, failing loudly on deployment errors."""
    if not signing_key:
        raise ConfigurationError("Cannot verify Slack requests without a signing key.")
    if raw_body is None:
        raise ConfigurationError(
            "The raw request body was not preserved. Signature verification needs "
            "the exact bytes Slack sent, read before the form is parsed."
        )
    return VerificationContext(
        signing_key=signing_key,
        signature=_header(headers, SIGNATURE_HEADER),
        timestamp=_header(headers, TIMESTAMP_HEADER),
        raw_body=bytes(raw_body),
    )


def verify_context(ctx: VerificationContext, now: float | None = None) -> bool:
    if not ctx.signature or not ctx.timestamp:
        return False
    if not valid_timestamp(ctx.timestamp, now=now):
        return False
    expected = generate(ctx.signing_key, ctx.timestamp, ctx.raw_body)
    return verify(expected, ctx.signature)


def verify_request(
    signing_key: str | None,
    headers: Mapping[str, str],
    raw_body: bytes | None,
    now: float | None = None,
) -> bool:
    """Verify a request came from Slack.

    Args:
        signing_key: The app's signing secret
        headers: Request headers (any case)
        raw_body: Body bytes exactly as received, before form parsing
        now: Current unix time, defaults to time.time()

    Returns:
        True only if both headers are present, the timestamp is fresh and the
        signature matches.

    Raises:
        ConfigurationError: if the signing key or the raw body is missing.
    """
    return verify_context(build_context(signing_key, headers, raw_body), now=now)
