"""Cancellable timers for the hover dwell delay.

The editor only ever needs one outstanding timer. Where the callback runs
is decided by the scheduler: hosts with an event loop should use one that
calls back on that loop so every state change stays on a single thread.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Something that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Schedules callbacks on ``threading.Timer`` daemon threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop.

    Args:
        loop: Loop to schedule on. Defaults to the running loop at call time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by an explicit clock, for headless replay and tests.

    Example:
        >>> fired = []
        >>> scheduler = ManualScheduler()
        >>> _ = scheduler.call_later(1.0, lambda: fired.append("hover"))
        >>> scheduler.advance(0.5)
        >>> fired
        []
        >>> scheduler.advance(0.5)
        >>> fired
        ['hover']
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not fired or been cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that comes due."""
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                callback()
        self.now = deadline


def default_scheduler() -> Scheduler:
    """Asyncio scheduling inside a running loop, threads otherwise."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return ThreadingScheduler()
    return AsyncioScheduler(loop)


class HoverTimer:
    """A single cancellable timer: starting it again cancels the previous run.

    Each run carries a token. A callback whose run was cancelled or
    replaced does nothing when it fires, even if a timer thread had
    already started it.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        self._scheduler = scheduler
        self.delay = delay
        self._handle: TimerHandle | None = None
        self._token: object | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._token is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        token = object()

        def fire() -> None:
            with self._lock:
                if self._token is not token:
                    return
                self._token = None
                self._handle = None
            callback()

        with self._lock:
            self._token = token
        handle = self._scheduler.call_later(self.delay, fire)
        with self._lock:
            if self._token is token:
                self._handle = handle

    def cancel(self) -> None:
        with self._lock:
            handle, self._handle = self._handle, None
            was_active = self._token is not None
            self._token = None
        if handle is not None:
            handle.cancel()
        if was_active:
            logger.debug("Hover timer cancelled")
