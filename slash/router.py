"""The Router - runs one slash command request from form fields to JSON reply."""

import asyncio
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from slash.command import Command, from_fields
from slash.config import require_signing_key
from slash.errors import MalformedRequest
from slash.formatter import Dasherized, Formatter
from slash.guards import Err, Guard, GuardResult, compile_guards
from slash.registry import SlashCommand, compile_commands
from slash.response import AsyncAck, build_response_payload
from slash.signature import verify_request
from slash.utils import call_handler

if TYPE_CHECKING:
    from fastapi import BackgroundTasks


DEFAULT_ROUTER_NAME = "Slack"

INVALID_REQUEST_TEXT = "Invalid"
INVALID_SIGNATURE_TEXT = "Invalid signature"
HANDLER_FAILED_TEXT = "Failed to execute the command."

# Detached AsyncAck work scheduled outside a FastAPI request. Holding a
# reference keeps the task from being garbage collected mid-flight.
_detached_tasks: set[asyncio.Task] = set()


class Stage(Enum):
    """The last pipeline stage a request completed before its response was built.

    Every request ends responded; `stage` records where it stopped. A guard
    rejection stops at VERIFIED, a handler error at GUARDS_PASSED.
    """
    RECEIVED = "received"
    PARSED = "parsed"
    VERIFIED = "verified"
    GUARDS_PASSED = "guards_passed"
    DISPATCHED = "dispatched"


@dataclass(frozen=True)
class SlashResponse:
    """Status code and JSON body to send back to Slack, plus the last stage completed."""
    status_code: int
    body: dict = field(default_factory=dict)
    stage: Stage = Stage.RECEIVED


class Router:
    """A Slack slash command router.

    Built once from an ordered list of commands and guards. The dispatch table,
    guard chain and help pages are compiled here and never change afterwards.

    Example:
        def greet(command):
            if len(command.args) == 1:
                return f"Hello {command.args[0]}!"
            return "Please pass name to greet"

        router = Router(
            name="Bot",
            commands=[SlashCommand("greet", greet, help="Sends you a hearty hello!")],
            guards=[Guard(verify_user, only=["greet"])],
            signing_key=os.getenv("SLACK_SIGNING_SECRET"),
        )

    Guards may also be given by name, resolved against `namespace` (or the
    router itself, for subclasses that define guard methods).
    """

    def __init__(
        self,
        name: str = DEFAULT_ROUTER_NAME,
        commands: Iterable[SlashCommand] = (),
        guards: Iterable[Guard] = (),
        signing_key: str | None = None,
        formatter: Formatter | None = None,
        namespace: Any = None,
    ):
        self.name = name
        self.formatter = formatter or Dasherized()
        self._signing_key = signing_key or require_signing_key(name)
        self.commands = tuple(commands)
        self.dispatch_table = compile_commands(self.commands, self.formatter, name)
        self.guard_chain = compile_guards(
            guards,
            self.formatter,
            namespace=namespace if namespace is not None else self,
        )

    def __repr__(self) -> str:
        return f"<Router {self.name!r} commands={self.dispatch_table.names}>"

    def verify_request(
        self,
        headers: Mapping[str, str],
        raw_body: bytes | None,
        now: float | None = None,
    ) -> bool:
        return verify_request(self._signing_key, headers, raw_body, now=now)

    async def run_guards(self, command: Command) -> GuardResult:
        return await self.guard_chain(command)

    async def match_command(self, name: str, command: Command):
        return await self.dispatch_table.match_command(name, command)

    def help_page(self, name: str | None = None) -> dict:
        """The help page for one command, or the full listing."""
        if name is None:
            return self.dispatch_table.help_pages.aggregate()
        return self.dispatch_table.help_pages.page(name)

    async def handle(
        self,
        fields: Mapping[str, Any],
        headers: Mapping[str, str],
        raw_body: bytes | None,
        background_tasks: "BackgroundTasks | None" = None,
        now: float | None = None,
    ) -> SlashResponse:
        """Run a request through parse -> verify -> guards -> dispatch.

        Args:
            fields: Parsed form fields from Slack
            headers: Request headers
            raw_body: Body bytes exactly as received, before form parsing
            background_tasks: Where to queue AsyncAck work; when None the work
                runs as a detached asyncio task
            now: Current unix time, for signature freshness

        Returns:
            SlashResponse. Only a handler error is caught here; configuration
            errors propagate.
        """
        try:
            command = from_fields(fields)
        except MalformedRequest as e:
            print(f"· [SLASH] {self.name}: invalid request ({e}) → 400", flush=True)
            return SlashResponse(400, {"text": INVALID_REQUEST_TEXT}, Stage.RECEIVED)

        if not self.verify_request(headers, raw_body, now=now):
            print(f"· [SLASH] {self.name}: invalid signature → 401", flush=True)
            return SlashResponse(401, {"text": INVALID_SIGNATURE_TEXT}, Stage.PARSED)

        result = await self.run_guards(command)
        if isinstance(result, Err):
            print(f"· [SLASH] /{command.command} rejected by guard", flush=True)
            return SlashResponse(200, {"text": result.message}, Stage.VERIFIED)
        command = result.command

        try:
            response = await self.match_command(command.command, command)
            payload = build_response_payload(response)
        except Exception as e:
            print(f"❌ [SLASH] Error while processing command '{command.command}': {e}.", flush=True)
            traceback.print_exc()
            return SlashResponse(200, {"text": HANDLER_FAILED_TEXT}, Stage.GUARDS_PASSED)

        if isinstance(response, AsyncAck) and response.task is not None:
            self._schedule(response, command, background_tasks)

        return SlashResponse(200, payload, Stage.DISPATCHED)

    def _schedule(
        self,
        ack: AsyncAck,
        command: Command,
        background_tasks: "BackgroundTasks | None",
    ) -> None:
        print(f"▶ [SLASH] /{command.command} acknowledged, work deferred", flush=True)
        if background_tasks is not None:
            background_tasks.add_task(run_deferred, ack, command.command)
            return
        task = asyncio.get_running_loop().create_task(run_deferred(ack, command.command))
        _detached_tasks.add(task)
        task.add_done_callback(_detached_tasks.discard)


async def run_deferred(ack: AsyncAck, command_name: str) -> None:
    """Run AsyncAck work. Errors are logged; nobody is waiting on the result."""
    try:
        await call_handler(ack.task)
    except Exception as e:
        print(f"❌ [SLASH] Deferred work for '{command_name}' failed: {e}", flush=True)
        traceback.print_exc()
