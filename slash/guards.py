"""Before-dispatch guards.

A guard is a function ``guard(command) -> Ok(command) | Err(message)`` that runs
before the command handler. Guards run in registration order and may:

- approve: ``return Ok(command)``
- enrich: ``return Ok(put_data(command, "user", user))``
- reject: ``return Err("User not authorized")``, which stops the chain and
  sends the message back to the user

Guards can be limited to some commands with ``only=[...]`` or skip some with
``exclude=[...]``. Names are internal command names and go through the same
formatter as the dispatch table.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from slash.command import Command
from slash.errors import ConfigurationError, GuardReturnError
from slash.formatter import Formatter
from slash.utils import call_handler, callable_name


@dataclass(frozen=True)
class Ok:
    """Guard passed; continue with `command`."""
    command: Command


@dataclass(frozen=True)
class Err:
    """Guard rejected the command; `message` is shown to the user."""
    message: str


GuardResult = Ok | Err


@dataclass(frozen=True)
class Guard:
    """Declares a guard for a Router.

    `handler` is a callable, or the name of one defined on the router's
    namespace (e.g. ``Guard("verify_user")``).
    """
    handler: Callable[[Command], Any] | str
    only: Iterable[str] | None = None
    exclude: Iterable[str] | None = None


@dataclass(frozen=True)
class CompiledGuard:
    name: str
    handler: Callable[[Command], Any]
    only: frozenset[str] | None = None
    exclude: frozenset[str] | None = None

    def applies_to(self, command_name: str) -> bool:
        if self.only is not None:
            return command_name in self.only
        if self.exclude is not None:
            return command_name not in self.exclude
        return True


class GuardChain:
    """The compiled, immutable guard chain.

    Calling it runs every applicable guard in order and returns the final
    ``Ok(command)``, or the first ``Err(message)``.
    """

    def __init__(self, guards: Iterable[CompiledGuard] = ()):
        self._guards = tuple(guards)

    @property
    def guards(self) -> tuple[CompiledGuard, ...]:
        return self._guards

    def __len__(self) -> int:
        return len(self._guards)

    async def __call__(self, command: Command) -> GuardResult:
        for guard in self._guards:
            if not guard.applies_to(command.command):
                continue

            result = await call_handler(guard.handler, command)

            if isinstance(result, Err):
                return result
            if not isinstance(result, Ok) or not isinstance(result.command, Command):
                raise GuardReturnError(
                    f"Expected guard {guard.name} to return Ok(command) or Err(message).\n\n"
                    f"Got {result!r}."
                )
            command = result.command

        return Ok(command)


def _resolve_handler(handler: Callable | str, namespace: Any) -> Callable:
    if not isinstance(handler, str):
        if not callable(handler):
            raise ConfigurationError(f"Guard handler {handler!r} is not callable.")
        return handler

    func = getattr(namespace, handler, None) if namespace is not None else None
    if not callable(func):
        owner = getattr(namespace, "__name__", None) or repr(namespace)
        raise ConfigurationError(f"Expected {owner} to define {handler}(command).")
    return func


def _format_names(names: Iterable[str] | None, formatter: Formatter) -> frozenset[str] | None:
    if names is None:
        return None
    if isinstance(names, str):
        names = [names]
    return frozenset(formatter.to_command_name(str(name)) for name in names)


def compile_guards(
    guards: Iterable[Guard],
    formatter: Formatter,
    namespace: Any = None,
) -> GuardChain:
    """Compile guard declarations into a GuardChain.

    Raises:
        ConfigurationError: for an undefined guard name, a non-callable
            handler, or a guard given both `only` and `exclude`.
    """
    compiled = []
    for guard in guards:
        if guard.only is not None and guard.exclude is not None:
            raise ConfigurationError(
                f"Guard {guard.handler!r} may set `only` or `exclude`, not both."
            )
        handler = _resolve_handler(guard.handler, namespace)
        compiled.append(CompiledGuard(
            name=guard.handler if isinstance(guard.handler, str) else callable_name(handler),
            handler=handler,
            only=_format_names(guard.only, formatter),
            exclude=_format_names(guard.exclude, formatter),
        ))
    return GuardChain(compiled)
