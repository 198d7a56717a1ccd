"""Utilities to execute coroutines on the main asyncio loop from sync contexts.

Flask handlers run on WSGI worker threads; anything that must not hold up a
response (webhooks) is handed to the loop that owns the aiohttp server.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from typing import Coroutine, Optional, TypeVar


_loop: Optional[asyncio.AbstractEventLoop] = None
T = TypeVar("T")


def set_main_loop(loop: Optional[asyncio.AbstractEventLoop]) -> None:
    global _loop
    _loop = loop


def get_main_loop() -> Optional[asyncio.AbstractEventLoop]:
    return _loop


def run_coroutine_sync(coro: Coroutine[object, object, T], timeout: Optional[float] = None) -> T:
    """Run a coroutine to completion from a worker thread.

    Falls back to a private event loop when the main loop is not running,
    which is the case under the Flask dev server and the test client.
    """
    if _loop is None or not _loop.is_running():
        return asyncio.run(coro)
    future = asyncio.run_coroutine_threadsafe(coro, _loop)
    return future.result(timeout=timeout)


def submit_coroutine(coro: Coroutine[object, object, T]) -> Future:
    if _loop is None or _loop.is_closed():
        raise RuntimeError("Asyncio loop is not initialized")
    return asyncio.run_coroutine_threadsafe(coro, _loop)
