"""Command registry - compiles command declarations into a dispatch table."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from slash.command import Command
from slash.errors import ConfigurationError
from slash.formatter import Formatter
from slash.help import CATCH_ALL_PLACEHOLDER, HelpPages
from slash.response import Response
from slash.utils import call_handler


HELP_COMMAND = "help"


@dataclass(frozen=True)
class SlashCommand:
    """A command registered on a Router.

    `name` is the internal name (``greet_user``); the router's formatter turns
    it into the name users type (``greet-user``). A command with no name is the
    catch-all and receives every command nothing else matched.
    """
    name: str | None
    handler: Callable[[Command], Any]
    help: str | None = None

    @property
    def is_catch_all(self) -> bool:
        return self.name is None


def catch_all(handler: Callable[[Command], Any], help: str | None = None) -> SlashCommand:
    """Declare the fallback command, e.g. for ``/bot <anything>`` styles."""
    return SlashCommand(name=None, handler=handler, help=help)


class DispatchTable:
    """Maps external command names to handlers, with a single fallback policy.

    - an exact name match always wins
    - with a catch-all, every other name goes to it, except ``help``
    - without one, every other name gets the help listing
    """

    def __init__(
        self,
        routes: Mapping[str, SlashCommand],
        catch_all: SlashCommand | None,
        help_pages: HelpPages,
    ):
        self._routes = MappingProxyType(dict(routes))
        self._catch_all = catch_all
        self.help_pages = help_pages

    @property
    def names(self) -> list[str]:
        return list(self._routes)

    @property
    def catch_all(self) -> SlashCommand | None:
        return self._catch_all

    def resolve(self, name: str) -> SlashCommand | None:
        """The command that handles `name`, or None when help should answer."""
        if name in self._routes:
            return self._routes[name]
        if self._catch_all is not None and name != HELP_COMMAND:
            return self._catch_all
        return None

    async def match_command(self, name: str, command: Command) -> Response:
        target = self.resolve(name)
        if target is None:
            return self.help_pages.aggregate()
        return await call_handler(target.handler, command)


def compile_commands(
    commands: Iterable[SlashCommand],
    formatter: Formatter,
    router_name: str,
) -> DispatchTable:
    """Build the dispatch table and help pages for a list of commands.

    Raises:
        ConfigurationError: if two commands format to the same name, more than
            one catch-all is declared, or a handler isn't callable.
    """
    routes: dict[str, SlashCommand] = {}
    fallback: SlashCommand | None = None
    help_entries: list[tuple[str, str | None]] = []

    for cmd in commands:
        if not callable(cmd.handler):
            raise ConfigurationError(f"Handler for command {cmd.name!r} is not callable.")

        if cmd.is_catch_all:
            if fallback is not None:
                raise ConfigurationError("Only one catch-all command may be declared.")
            fallback = cmd
            help_entries.append((CATCH_ALL_PLACEHOLDER, cmd.help))
            continue

        external = formatter.to_command_name(str(cmd.name))
        if external in routes:
            raise ConfigurationError(
                f"Commands {routes[external].name!r} and {cmd.name!r} both map to "
                f"/{external}. Command names must be unique after formatting."
            )
        routes[external] = cmd
        help_entries.append((external, cmd.help))

    return DispatchTable(routes, fallback, HelpPages(router_name, help_entries))
