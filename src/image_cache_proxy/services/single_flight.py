"""Per-key coalescing of concurrent async operations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Collapse concurrent calls for the same key into one running task.

    The first caller starts the task; callers arriving while it runs await
    the same task. The entry is dropped once the task settles, so the next
    call after that starts a fresh operation.

    Callers await through ``asyncio.shield``: a cancelled caller (e.g. a
    client that disconnected) stops waiting, but the shared task keeps
    running for the others and is never interrupted mid-write.
    """

    def __init__(self) -> None:
        self._calls: dict[str, asyncio.Task[T]] = {}

    async def do(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func`` for ``key`` unless a run is already in flight.

        Args:
            key: Coalescing key
            func: Zero-argument callable returning an awaitable

        Returns:
            The result of the shared run

        Raises:
            Whatever the shared run raised
        """
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._calls[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.debug(f"Joining in-flight operation for {key}")
        return await asyncio.shield(task)

    async def wait(self) -> None:
        """Wait until every running operation has settled.

        Failures are left to the callers that awaited them.
        """
        while self._calls:
            await asyncio.gather(*self._calls.values(), return_exceptions=True)

    def in_flight(self, key: str) -> bool:
        """Whether an operation for the key is currently running."""
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    def _forget(self, key: str, task: asyncio.Task[T]) -> None:
        if self._calls.get(key) is task:
            del self._calls[key]
        # Mark the exception as retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()
