"""Deferred callback scheduling for lifecycle notifications.

Work handed to a scheduler never runs inside the call that schedules it; it
runs after the current synchronous work, in FIFO order with other work
scheduled the same way.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from natsmock.observability import get_logger


class Scheduler(ABC):
    """Abstract base class for deferral strategies."""

    @abstractmethod
    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue `callback(*args)` to run after the current synchronous work."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DeferredQueue(Scheduler):
    """Explicit FIFO task queue drained by the owner with run_pending()."""

    def __init__(self) -> None:
        self._queue: Deque[Tuple[Callable[..., Any], Tuple[Any, ...]]] = deque()
        self._logger = get_logger("natsmock.scheduler")

    @property
    def pending(self) -> int:
        return len(self._queue)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.append((callback, args))

    def run_pending(self) -> int:
        """Run queued callbacks until the queue is empty, including any queued meanwhile.

        A raising callback propagates; callbacks still queued stay queued.
        """
        ran = 0
        while self._queue:
            callback, args = self._queue.popleft()
            callback(*args)
            ran += 1
        if ran:
            self._logger.debug("deferred_ran", extra={"count": ran})
        return ran


class AsyncioScheduler(Scheduler):
    """Defers through an asyncio event loop's call_soon.

    Without an explicit loop the running loop is looked up at schedule time,
    so scheduling outside a running loop raises RuntimeError.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        loop.call_soon(callback, *args)


class AutoScheduler(DeferredQueue):
    """Uses the running asyncio loop when there is one, else queues for run_pending().

    Work queued while no loop was running is handed to the loop, ahead of the
    new callback, the next time something is scheduled from inside a loop.
    """

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            super().call_soon(callback, *args)
            return
        while self._queue:
            queued, queued_args = self._queue.popleft()
            loop.call_soon(queued, *queued_args)
        loop.call_soon(callback, *args)
