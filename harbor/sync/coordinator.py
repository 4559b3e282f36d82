"""Drains the sync queue to the remote endpoint."""

import asyncio
from typing import Any

from harbor.http.fetcher import Fetcher
from harbor.http.models import Request
from harbor.messaging.clients import ClientRegistry
from harbor.messaging.models import SyncCompletedNotice
from harbor.observability.logging import get_logger
from harbor.observability.metrics import SYNC_DRAINS, SYNC_QUEUE_DEPTH
from harbor.sync.models import SyncBatch, SyncItem, SyncResult, SyncState
from harbor.sync.queue import SyncQueue
from harbor.sync.retry import RetryEngine
from harbor.timeutils import epoch_ms

logger = get_logger(__name__)


class SyncCoordinator:
    """Owns the sync queue and drives drain cycles.

    A drain submits the whole queue as one batch through the retry engine.
    Success removes exactly the drained items and notifies clients;
    exhaustion leaves the queue untouched for the next trigger. Triggers
    that arrive while a drain is running join it.
    """

    def __init__(
        self,
        queue: SyncQueue,
        fetcher: Fetcher,
        retry_engine: RetryEngine,
        endpoint_url: str,
        clients: ClientRegistry | None = None,
        max_attempts: int = 3,
    ) -> None:
        self._queue = queue
        self._fetcher = fetcher
        self._retry = retry_engine
        self._endpoint_url = endpoint_url
        self._clients = clients
        self._max_attempts = max_attempts
        self._state = SyncState.IDLE
        self._inflight: asyncio.Future[SyncResult] | None = None

    @property
    def state(self) -> SyncState:
        return self._state

    async def enqueue(self, payload: dict[str, Any]) -> SyncItem:
        """Queue a write for the next drain."""
        item = SyncItem(payload=payload)
        await self._queue.enqueue(item)
        logger.info("sync_item_enqueued", item_id=str(item.id))
        return item

    async def pending(self) -> list[SyncItem]:
        return await self._queue.items()

    async def sync(self) -> SyncResult:
        """Run a drain, or join the one already running."""
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._drain())
        return await asyncio.shield(self._inflight)

    async def _drain(self) -> SyncResult:
        self._state = SyncState.DRAINING
        try:
            return await self._drain_once()
        finally:
            self._state = SyncState.IDLE
            self._inflight = None

    async def _drain_once(self) -> SyncResult:
        try:
            items = await self._queue.items()
        except Exception as e:
            logger.error("sync_queue_read_failed", error=str(e), error_type=type(e).__name__)
            SYNC_DRAINS.labels(outcome="queue_error").inc()
            return SyncResult(success=False, timestamp=epoch_ms())

        SYNC_QUEUE_DEPTH.set(len(items))
        if not items:
            logger.debug("sync_queue_empty")
            SYNC_DRAINS.labels(outcome="empty").inc()
            return SyncResult(success=True, timestamp=epoch_ms())

        batch = SyncBatch(items=items, timestamp=epoch_ms())
        request = Request(
            method="POST",
            url=self._endpoint_url,
            headers={"Content-Type": "application/json"},
            body=batch.model_dump_json().encode("utf-8"),
        )

        logger.info("sync_drain_started", item_count=len(items), endpoint=self._endpoint_url)
        report = await self._retry.run(
            lambda: self._fetcher.fetch(request),
            max_attempts=self._max_attempts,
        )

        if not report.succeeded:
            logger.warning(
                "sync_drain_failed",
                item_count=len(items),
                outcome=report.outcome.value,
                attempts=len(report.attempts),
            )
            SYNC_DRAINS.labels(outcome=report.outcome.value).inc()
            return SyncResult(success=False, timestamp=epoch_ms(), item_count=len(items))

        try:
            await self._queue.remove([item.id for item in items])
        except Exception as e:
            # Remote accepted the batch; it will be resent on the next trigger
            logger.error(
                "sync_queue_remove_failed",
                item_count=len(items),
                error=str(e),
            )

        timestamp = epoch_ms()
        SYNC_DRAINS.labels(outcome="success").inc()
        SYNC_QUEUE_DEPTH.set(0)
        logger.info("sync_drain_completed", item_count=len(items), attempts=len(report.attempts))
        await self._notify_completed(timestamp)
        return SyncResult(success=True, timestamp=timestamp, item_count=len(items))

    async def _notify_completed(self, timestamp: int) -> None:
        if self._clients is None:
            return
        try:
            await self._clients.broadcast(SyncCompletedNotice(timestamp=timestamp))
        except Exception as e:
            logger.warning("sync_completed_notice_failed", error=str(e))
