"""Exceptions raised by the slash router."""


class SlashError(Exception):
    """Base class for all router errors."""


class ConfigurationError(SlashError):
    """The router was built or deployed incorrectly.

    Raised loudly, at construction time wherever possible. Never used for
    authentication failures, which are plain ``False`` results.
    """


class GuardReturnError(ConfigurationError):
    """A guard returned something other than ``Ok(command)`` or ``Err(message)``."""


class MalformedRequest(SlashError, ValueError):
    """The inbound fields are missing required identity values."""
