import os
import re

from dotenv import load_dotenv

from slash.errors import ConfigurationError

load_dotenv()

# Shared fallback when a deployment runs a single router
DEFAULT_SIGNING_KEY_VAR = "SLACK_SIGNING_SECRET"

# Maximum age, in seconds, of a signed request
FRESHNESS_WINDOW_SECONDS = 60


def signing_key_env_var(router_name: str) -> str:
    """Environment variable holding the signing key for one router.

    "Custom Bot" -> "SLASH_CUSTOM_BOT_SIGNING_KEY"
    """
    slug = re.sub(r"[^A-Za-z0-9]+", "_", router_name).strip("_").upper()
    return f"SLASH_{slug}_SIGNING_KEY"


def get_signing_key(router_name: str) -> str | None:
    """Look up a router's signing key, falling back to SLACK_SIGNING_SECRET."""
    return os.getenv(signing_key_env_var(router_name)) or os.getenv(DEFAULT_SIGNING_KEY_VAR)


def require_signing_key(router_name: str) -> str:
    """Like get_signing_key(), but a missing key is a deployment error."""
    key = get_signing_key(router_name)
    if not key:
        raise ConfigurationError(
            f"No signing key configured for router {router_name!r}. "
            f"Set {signing_key_env_var(router_name)} or {DEFAULT_SIGNING_KEY_VAR} "
            f"to the signing secret from your Slack app settings."
        )
    return key
