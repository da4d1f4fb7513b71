"""Handler return values and the JSON envelope sent back to Slack.

Handlers may return:

- a ``str``, sent as ``{"text": ...}``
- a ``dict``, sent unchanged (e.g. ``{"blocks": [...]}``)
- an ``AsyncAck``, sent as ``{}`` so Slack shows nothing yet. The handler is
  responsible for posting the real answer to ``command.response_url`` later.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable


@dataclass(frozen=True)
class AsyncAck:
    """Acknowledge now, answer later.

    `task` is optional work the router schedules after acknowledging. The
    router never awaits it, never retries it and never times it out.
    """
    task: Callable[[], Any] | None = field(default=None, repr=False)


def defer(func: Callable[..., Any], *args: Any, **kwargs: Any) -> AsyncAck:
    """Acknowledge immediately and run ``func(*args, **kwargs)`` afterwards.

    Example:
        def report(command):
            return defer(build_and_post_report, command.response_url)
    """
    return AsyncAck(task=partial(func, *args, **kwargs))


Response = str | dict | AsyncAck


def build_response_payload(response: Response) -> dict:
    """Turn a handler's return value into the JSON body for Slack."""
    if isinstance(response, AsyncAck):
        return {}
    if isinstance(response, str):
        return {"text": response}
    if isinstance(response, dict):
        return response
    raise TypeError(
        f"Expected command handler to return a str, dict or AsyncAck. Got {response!r}."
    )
