"""The Command passed to guards and handlers."""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from slash.errors import MalformedRequest


# Fields a Slack slash command payload must carry for us to know who ran it
REQUIRED_FIELDS = ("user_id", "channel_id")


@dataclass(frozen=True)
class Command:
    """A parsed slash command invocation.

    For `/bot greet alice bob` Slack sends ``text="greet alice bob"``, which
    parses to ``command="greet"``, ``text="alice bob"`` and
    ``args=("alice", "bob")``.
    """
    command: str
    text: str = ""
    args: tuple[str, ...] = ()
    user_id: str = ""
    channel_id: str = ""
    team_id: str = ""
    response_url: str = ""
    trigger_id: str = ""
    data: Mapping[str, Any] = field(default_factory=dict)


def from_fields(fields: Mapping[str, Any]) -> Command:
    """Build a Command from the transport's parsed form fields.

    Raises:
        MalformedRequest: if ``user_id`` or ``channel_id`` is missing or empty.
    """
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise MalformedRequest(f"Missing required fields: {', '.join(missing)}")

    # Split on first whitespace run: "greet  alice bob" -> "greet", "alice bob"
    parts = str(fields.get("text") or "").strip().split(None, 1)
    command_word = parts[0] if parts else ""
    remainder = parts[1] if len(parts) > 1 else ""

    return Command(
        command=command_word,
        text=remainder,
        args=tuple(remainder.split()),
        user_id=str(fields["user_id"]),
        channel_id=str(fields["channel_id"]),
        team_id=str(fields.get("team_id") or ""),
        response_url=str(fields.get("response_url") or ""),
        trigger_id=str(fields.get("trigger_id") or ""),
        data={},
    )


def put_data(command: Command, key: str, value: Any) -> Command:
    """Return a copy of `command` with `key` set in its data.

    Guards use this to enrich a command for later guards and the handler:

        def verify_user(command):
            user = accounts.find_by_slack_id(command.user_id)
            if user is None:
                return Err("User not authorized")
            return Ok(put_data(command, "user", user))
    """
    return replace(command, data={**command.data, key: value})
