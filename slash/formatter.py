"""Command name formatters.

A formatter maps an internal command name (``greet_user``) to the name users
type in Slack (``greet-user``). The same formatter is used for the dispatch
table and for guard applicability, so both always agree.
"""

from abc import ABC, abstractmethod


class Formatter(ABC):
    """Base class for command name formatters.

    To create a new formatter:
    1. Subclass Formatter
    2. Implement `to_command_name()` as a pure function
    3. Pass an instance as `formatter=` when building a Router
    """

    @abstractmethod
    def to_command_name(self, name: str) -> str:
        """Return the external command name for an internal one."""
        pass


class Dasherized(Formatter):
    """Lowercase, underscores to hyphens: ``Greet_User`` -> ``greet-user``."""

    def to_command_name(self, name: str) -> str:
        return str(name).lower().replace("_", "-")
