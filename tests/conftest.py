"""Pytest configuration and shared fixtures."""

import os
import time
from urllib.parse import urlencode

import pytest

# Set a signing key before importing modules that resolve it
os.environ.setdefault("SLACK_SIGNING_SECRET", "test-signing-secret")

SIGNING_KEY = "8f742231b10e8888abcd99yyyzzz85a5"


@pytest.fixture
def signing_key():
    return SIGNING_KEY


@pytest.fixture
def make_fields():
    """Build Slack slash command form fields."""
    def _make(text="greet alice", **overrides):
        fields = {
            "token": "xyzz0WbapA4vBCDEFasx0q6G",
            "team_id": "T1DC2JH3J",
            "channel_id": "G8PSS9T3V",
            "user_id": "U2CERLKJA",
            "command": "/bot",
            "text": text,
            "response_url": "https://hooks.slack.com/commands/T1DC2JH3J/397700885554/96rGlfmibIGlgcZRskXaIFfN",
            "trigger_id": "398738663015.47445629121.803a0bc887a14d10d2c447fce8b6703c",
        }
        fields.update(overrides)
        return {k: v for k, v in fields.items() if v is not None}
    return _make


@pytest.fixture
def sign():
    """Return (raw_body, headers) for fields, signed like Slack would."""
    from slash.signature import generate

    def _sign(fields, key=SIGNING_KEY, timestamp=None):
        body = urlencode(fields).encode()
        ts = str(timestamp if timestamp is not None else int(time.time()))
        headers = {
            "content-type": "application/x-www-form-urlencoded",
            "x-slack-request-timestamp": ts,
            "x-slack-signature": generate(key, ts, body),
        }
        return body, headers
    return _sign
