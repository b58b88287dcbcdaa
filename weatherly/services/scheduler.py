"""Cancellable delayed tasks keyed by a monotonic token.

Each key (e.g. "search") holds at most one pending task. Scheduling again
under the same key cancels the previous task and issues a new token, so a
callback can check whether it is still the latest one before touching
shared state.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Set

TaskFactory = Callable[[int], Awaitable[Any]]


@dataclass
class TaskScheduler:
    """Delayed and background tasks on the running event loop.

    Usage:
        scheduler = TaskScheduler()
        scheduler.schedule("search", 0.25, lambda token: run_search(token))
        scheduler.is_current("search", token)
        await scheduler.drain()
    """

    _counter: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)
    _tokens: Dict[str, int] = field(default_factory=dict, repr=False)
    _keyed: Dict[str, asyncio.Task[Any]] = field(default_factory=dict, repr=False)
    _tasks: Set[asyncio.Task[Any]] = field(default_factory=set, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def next_token(self, key: str) -> int:
        """Issue a new token for ``key``, invalidating the previous one."""
        token = next(self._counter)
        self._tokens[key] = token
        return token

    def is_current(self, key: str, token: int) -> bool:
        return self._tokens.get(key) == token

    def schedule(self, key: str, delay: float, factory: TaskFactory) -> int:
        """Run ``factory(token)`` after ``delay`` seconds, replacing any pending timer.

        Only the timer is cancellable; once it fires, the work runs to
        completion and is expected to check its token.

        Returns:
            The token the task was issued with.
        """
        self.cancel(key)
        token = self.next_token(key)

        async def _delayed() -> None:
            if delay > 0:
                await asyncio.sleep(delay)
            self.spawn(factory(token))

        task = self.spawn(_delayed())
        self._keyed[key] = task
        return token

    def spawn(self, awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
        """Run ``awaitable`` in the background and keep track of it."""
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def cancel(self, key: str) -> bool:
        """Cancel the pending timer for ``key`` and invalidate its token."""
        self._tokens.pop(key, None)
        task = self._keyed.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        self._tokens.clear()
        self._keyed.clear()
        for task in list(self._tasks):
            task.cancel()

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    async def drain(self) -> None:
        """Wait until no tracked task is left, including ones spawned meanwhile."""
        while True:
            tasks = [task for task in self._tasks if not task.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        for key, keyed in list(self._keyed.items()):
            if keyed is task:
                del self._keyed[key]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error(
                "Background task failed",
                exc_info=exc,
            )
