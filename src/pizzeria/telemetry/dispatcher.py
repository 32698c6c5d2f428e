"""Non-blocking shipping of telemetry payloads.

Request handlers hand payloads to :meth:`TelemetryDispatcher.submit`, which
never waits. A single worker task drains the queue and posts each payload.
When the queue is full the newest payload is dropped and counted.
"""

import asyncio

import httpx

from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)


class TelemetryDispatcher:
    """Bounded queue plus one shipping worker, started with the app lifespan."""

    def __init__(self, max_size: int = 1000, timeout: float = 5.0, transport=None) -> None:
        self.max_size = max_size
        self.timeout = timeout
        self.transport = transport
        self.dropped = 0
        self.sent = 0
        self.failed = 0
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_size)
        self._worker_task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None

    @property
    def running(self) -> bool:
        return self._worker_task is not None and not self._worker_task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, url: str, payload: dict, headers: dict | None = None) -> bool:
        """Queue a payload for delivery. Returns False when it was dropped."""
        if not url:
            return False
        try:
            self._queue.put_nowait((url, payload, headers or {}))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug("telemetry_dropped", url=url, dropped=self.dropped)
            return False
        return True

    async def start(self) -> None:
        if self.running:
            return

        # Rebind the queue to the running loop, keeping anything already queued
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_size)
        while not self._queue.empty():
            queue.put_nowait(self._queue.get_nowait())
        self._queue = queue

        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        self._worker_task = asyncio.create_task(self._worker())
        logger.info("telemetry_dispatcher_started", queue_size=self.max_size)

    async def stop(self, drain_timeout: float = 2.0) -> None:
        if self._worker_task is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except TimeoutError:
            logger.debug("telemetry_drain_timeout", pending=self.pending)

        self._worker_task.cancel()
        try:
            await self._worker_task
        except asyncio.CancelledError:
            pass
        self._worker_task = None

        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("telemetry_dispatcher_stopped", sent=self.sent, failed=self.failed, dropped=self.dropped)

    async def _worker(self) -> None:
        while True:
            url, payload, headers = await self._queue.get()
            try:
                response = await self._client.post(url, json=payload, headers=headers)
                if response.is_success:
                    self.sent += 1
                else:
                    self.failed += 1
                    logger.debug("telemetry_rejected", url=url, status=response.status_code)
            except httpx.HTTPError as exc:
                self.failed += 1
                logger.debug("telemetry_send_failed", url=url, error=str(exc))
            finally:
                self._queue.task_done()
