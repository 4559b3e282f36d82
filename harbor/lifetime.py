"""Tracking of asynchronous work that outlives an event's response.

An event handler may answer immediately while refreshes, trims and
notification side effects continue. The host settles the lifetime before
tearing down resources the outstanding work depends on.
"""

import asyncio
from collections.abc import Awaitable, Coroutine
from typing import Any

from harbor.observability.logging import get_logger

logger = get_logger(__name__)


class EventLifetime:
    """Set of tasks an event must wait for before it is finished."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Future[Any]] = set()

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def wait_until(self, awaitable: Awaitable[Any]) -> asyncio.Future[Any]:
        """Extend the lifetime until awaitable completes."""
        future = asyncio.ensure_future(awaitable)
        self._tasks.add(future)
        return future

    def detach(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Future[Any]:
        """Spawn a fire-and-forget task with its own error boundary.

        The caller never awaits the task; failures are logged here.
        """

        async def _guarded() -> None:
            try:
                await coro
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(
                    "detached_task_failed",
                    task=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return self.wait_until(asyncio.create_task(_guarded(), name=name))

    async def settle(self) -> None:
        """Wait for all outstanding work, including work spawned meanwhile."""
        while self._tasks:
            batch = list(self._tasks)
            self._tasks.clear()
            results = await asyncio.gather(*batch, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    logger.warning(
                        "extended_work_failed",
                        error=str(result),
                        error_type=type(result).__name__,
                    )
