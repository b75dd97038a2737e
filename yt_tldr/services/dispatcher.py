"""
Bounded worker pool in front of the summarization pipeline.
"""
import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator, Awaitable, Callable, Optional

from loguru import logger

from yt_tldr.core.constants import DispatcherConfig
from yt_tldr.core.exceptions import ClientDisconnectedError, OverloadedError
from yt_tldr.models import SummarizeRequest, SummarizeResponse
from yt_tldr.services.summarization import SummarizationService

DisconnectCheck = Callable[[], Awaitable[bool]]


class WorkerPool:
    """
    Runs at most ``workers`` pipelines at once.

    Requests beyond that wait in FIFO order for a free slot. When
    ``queue_size`` is non-zero and that many requests are already waiting,
    new submissions are rejected immediately with OverloadedError.

    Slots and queue positions are held by ``slot()``, an async context
    manager, so they are returned on every exit path including errors and
    cancellation. Counters are only touched from the event loop thread.
    """

    def __init__(
        self,
        service: SummarizationService,
        workers: int,
        queue_size: int = 0,
        poll_interval: float = DispatcherConfig.DISCONNECT_POLL_INTERVAL,
    ):
        """
        Initialize the WorkerPool.

        Args:
            service: The pipeline executed for each request.
            workers: Number of concurrent pipeline slots.
            queue_size: Max waiting requests; 0 means unbounded.
            poll_interval: Seconds between client disconnect checks.
        """
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.service = service
        self.workers = workers
        self.queue_size = queue_size
        self.poll_interval = poll_interval
        self._semaphore = asyncio.Semaphore(workers)
        self._in_flight = 0
        self._queued = 0

    @property
    def in_flight(self) -> int:
        """Number of pipelines currently running."""
        return self._in_flight

    @property
    def queued(self) -> int:
        """Number of requests waiting for a slot."""
        return self._queued

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one worker slot for the duration of the block."""
        if self.queue_size and self._semaphore.locked() and self._queued >= self.queue_size:
            logger.warning(
                f"Rejecting request: {self._in_flight} running, {self._queued} queued"
            )
            raise OverloadedError(retry_after=DispatcherConfig.RETRY_AFTER_SECONDS)

        self._queued += 1
        try:
            await self._semaphore.acquire()
        finally:
            self._queued -= 1

        self._in_flight += 1
        logger.debug(f"Slot acquired ({self._in_flight}/{self.workers} busy)")
        try:
            yield
        finally:
            self._in_flight -= 1
            self._semaphore.release()

    async def submit(
        self,
        request: SummarizeRequest,
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> SummarizeResponse:
        """
        Run one request through the pool.

        If ``is_disconnected`` is given it is polled while the request waits
        and while it runs; once it reports True the pipeline is cancelled
        at its next await point and ClientDisconnectedError is raised.

        Raises:
            OverloadedError: The waiting queue is full.
            ClientDisconnectedError: The client went away.
        """
        if is_disconnected is None:
            return await self._run(request)

        job = asyncio.create_task(self._run(request))
        watcher = asyncio.create_task(self._watch(is_disconnected))
        try:
            done, _ = await asyncio.wait(
                {job, watcher}, return_when=asyncio.FIRST_COMPLETED
            )
            if job in done:
                return job.result()
            # re-raises a failing liveness check
            watcher.result()
            logger.info("Client disconnected, abandoning summarization")
            raise ClientDisconnectedError()
        finally:
            watcher.cancel()
            if not job.done():
                job.cancel()
                with suppress(asyncio.CancelledError):
                    await job

    async def _run(self, request: SummarizeRequest) -> SummarizeResponse:
        async with self.slot():
            return await self.service.summarize(request)

    async def _watch(self, is_disconnected: DisconnectCheck) -> None:
        while not await is_disconnected():
            await asyncio.sleep(self.poll_interval)
