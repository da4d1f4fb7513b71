"""Tests for signing key configuration."""

import pytest


class TestSigningKeyEnvVar:
    """Tests for per-router environment variable names."""

    def test_simple_name(self):
        from slash.config import signing_key_env_var

        assert signing_key_env_var("Slack") == "SLASH_SLACK_SIGNING_KEY"

    def test_spaces_and_punctuation_collapse(self):
        from slash.config import signing_key_env_var

        assert signing_key_env_var("Custom Bot!") == "SLASH_CUSTOM_BOT_SIGNING_KEY"
        assert signing_key_env_var("ops-bot v2") == "SLASH_OPS_BOT_V2_SIGNING_KEY"


class TestGetSigningKey:
    """Tests for resolving a router's signing key."""

    def test_router_specific_key_wins(self, monkeypatch):
        from slash.config import get_signing_key

        monkeypatch.setenv("SLACK_SIGNING_SECRET", "shared")
        monkeypatch.setenv("SLASH_OPS_BOT_SIGNING_KEY", "ops")

        assert get_signing_key("Ops Bot") == "ops"
        assert get_signing_key("Other Bot") == "shared"

    def test_missing_key_returns_none(self, monkeypatch):
        from slash.config import get_signing_key

        monkeypatch.delenv("SLACK_SIGNING_SECRET", raising=False)
        monkeypatch.delenv("SLASH_NOBODY_SIGNING_KEY", raising=False)

        assert get_signing_key("Nobody") is None

    def test_require_raises_with_instructions(self, monkeypatch):
        from slash.config import require_signing_key
        from slash.errors import ConfigurationError

        monkeypatch.delenv("SLACK_SIGNING_SECRET", raising=False)
        monkeypatch.delenv("SLASH_NOBODY_SIGNING_KEY", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            require_signing_key("Nobody")

        message = str(exc_info.value)
        assert "SLASH_NOBODY_SIGNING_KEY" in message
        assert "SLACK_SIGNING_SECRET" in message


class TestFreshnessWindow:
    """The freshness window is fixed at sixty seconds."""

    def test_window_is_sixty_seconds(self):
        from slash.config import FRESHNESS_WINDOW_SECONDS

        assert FRESHNESS_WINDOW_SECONDS == 60

    def test_environment_cannot_widen_window(self, monkeypatch, signing_key):
        from slash.signature import generate, verify_request

        monkeypatch.setenv("SLASH_FRESHNESS_WINDOW_SECONDS", "300")
        now = 1_700_000_000
        ts = str(now - 120)
        headers = {
            "x-slack-request-timestamp": ts,
            "x-slack-signature": generate(signing_key, ts, b"text=greet"),
        }

        assert verify_request(signing_key, headers, b"text=greet", now=now) is False
