"""
Weave Engine — Completions
============================
Uniform handling of results that may or may not be awaitable.

settle(value)  → concurrent.futures.Future for any call result
defer(fn, ...) → run fn without blocking the current delivery

Rules:
- Plain values settle immediately
- Awaitables run as tasks on the running asyncio loop; with no loop
  running they are driven to completion on the spot
- Futures are passed through unchanged
- defer() uses loop.call_soon when a loop is running; otherwise it
  appends to the caller's pending queue, or calls inline without one
"""

from __future__ import annotations

import asyncio
import inspect
from concurrent.futures import Future
from functools import partial
from typing import Any, Callable, MutableSequence, Optional


def _running_loop():
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


async def _await(awaitable: Any) -> Any:
    return await awaitable


def _transfer(task: "asyncio.Future", future: Future) -> None:
    if task.cancelled():
        future.cancel()
        return
    error = task.exception()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(task.result())


def settle(value: Any) -> Future:
    """Wrap any call result as a Future."""
    if isinstance(value, Future):
        return value

    future: Future = Future()

    if not inspect.isawaitable(value):
        future.set_result(value)
        return future

    loop = _running_loop()
    if loop is not None:
        task = asyncio.ensure_future(value)
        task.add_done_callback(lambda done: _transfer(done, future))
        return future

    try:
        future.set_result(asyncio.run(_await(value)))
    except Exception as exc:
        future.set_exception(exc)
    return future


def when_done(future: Future, callback: Callable[[Future], None]) -> None:
    """Run callback now if the future is settled, else on settlement."""
    if future.done():
        callback(future)
    else:
        future.add_done_callback(callback)


def defer(
    callback: Callable[..., Any],
    *args: Any,
    pending: Optional[MutableSequence[Callable[[], Any]]] = None,
) -> None:
    loop = _running_loop()
    if loop is not None:
        loop.call_soon(callback, *args)
    elif pending is not None:
        pending.append(partial(callback, *args))
    else:
        callback(*args)
