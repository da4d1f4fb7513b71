"""Small helpers shared by the guard chain and dispatch table."""

import inspect
from typing import Any, Callable

from starlette.concurrency import run_in_threadpool


async def call_handler(func: Callable[..., Any], *args: Any) -> Any:
    """Call a guard or command handler, sync or async.

    Coroutine functions are awaited on the event loop; plain functions run on
    the threadpool so a slow handler can't stall other requests.
    """
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    result = await run_in_threadpool(func, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def callable_name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)
