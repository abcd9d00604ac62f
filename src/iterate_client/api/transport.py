"""
Shared HTTP transport.

Every APIClient that is not given its own ``httpx.AsyncClient`` shares one
per event loop, so connections are pooled without crossing loops. Calls
made outside any event loop run on a background worker thread that owns
its own loop.
"""

import asyncio
import logging
import threading
import weakref
from concurrent.futures import Future
from typing import Coroutine, Optional

import httpx


logger = logging.getLogger(__name__)

# Pooled connections are bound to the loop that opened them
_shared_clients: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, httpx.AsyncClient]" = (
    weakref.WeakKeyDictionary()
)
_shared_lock = threading.Lock()


def shared_transport() -> httpx.AsyncClient:
    """Return the shared client for the running loop, creating it on first use."""
    loop = asyncio.get_running_loop()

    with _shared_lock:
        client = _shared_clients.get(loop)
        if client is None or client.is_closed:
            client = httpx.AsyncClient()
            _shared_clients[loop] = client
            logger.debug("Created shared HTTP transport")

    return client


async def close_shared_transport() -> None:
    """Close the running loop's shared client if one was created."""
    loop = asyncio.get_running_loop()

    with _shared_lock:
        client = _shared_clients.pop(loop, None)

    if client is not None:
        await client.aclose()
        logger.debug("Closed shared HTTP transport")


class BackgroundLoop:
    """
    Event loop running on a daemon thread.

    Used to run requests for callers that are not inside an event loop.
    The thread starts on first use.
    """

    def __init__(self, name: str = "iterate-transport"):
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def thread(self) -> Optional[threading.Thread]:
        return self._thread

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._thread is None or not self._thread.is_alive():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    name=self.name,
                    daemon=True
                )
                self._thread.start()
                logger.debug(f"Started background loop thread {self.name!r}")
            return self._loop

    def submit(self, coro: Coroutine) -> Future:
        """Schedule ``coro`` on the background loop."""
        loop = self._ensure_started()
        return asyncio.run_coroutine_threadsafe(coro, loop)


_background_loop = BackgroundLoop()


def background_loop() -> BackgroundLoop:
    """Return the process-wide background loop."""
    return _background_loop
