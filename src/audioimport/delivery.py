"""Delivery contexts for progress and result callbacks.

Pipeline work runs on worker threads, but callbacks must run on a single
consumer context. A delivery context accepts callbacks from any thread and
runs them, in posting order, on that consumer.
"""

import asyncio
import logging
import queue
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class DeliveryContext(Protocol):
    """Something that runs callbacks posted from worker threads."""

    def post(self, callback: Callable[..., Any], *args: Any) -> None: ...


class LoopDelivery:
    """Deliver callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            self.loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Closed loop: nothing is left to receive the callback
            logger.warning("Event loop closed, dropping %s", getattr(callback, "__name__", callback))


class QueueDelivery:
    """Buffer callbacks until the consumer thread drains them.

    The consumer calls run_pending() (e.g. once per frame or after waiting on
    a run's future) to execute everything posted so far.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[tuple[Callable[..., Any], tuple[Any, ...]]] = (
            queue.SimpleQueue()
        )

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.put((callback, args))

    def run_pending(self) -> int:
        """Run all queued callbacks and return how many ran."""
        count = 0
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                return count
            callback(*args)
            count += 1

    def __len__(self) -> int:
        return self._queue.qsize()


def default_delivery() -> DeliveryContext:
    """Deliver on the running event loop if there is one, else through a queue."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop, callbacks will be queued")
        return QueueDelivery()
    return LoopDelivery(loop)
