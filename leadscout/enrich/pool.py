"""Concurrency-bounded batch processing with per-item retry."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from leadscout.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class EnrichmentOutcome(Generic[T, R]):
    """Terminal outcome for one input item."""

    item: T
    result: Optional[R] = None
    error: Optional[str] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class EnrichmentWorkerPool(Generic[T, R]):
    """Run an async handler over items with a fixed number of workers.

    Workers claim indices from a shared queue, so no index is processed twice.
    Each item gets ``max_retries + 1`` immediate attempts; an item that fails
    every attempt is recorded with its error and the batch carries on.
    ``run`` returns outcomes positionally aligned with the input.
    """

    def __init__(
        self,
        handler: Callable[[T], Awaitable[R]],
        concurrency: Optional[int] = None,
        max_retries: Optional[int] = None,
        attempt_timeout: Optional[float] = None,
    ):
        self.handler = handler
        self.concurrency = max(1, concurrency or settings.enrichment_concurrency)
        self.max_retries = max(0, settings.enrichment_max_retries if max_retries is None else max_retries)
        self.attempt_timeout = attempt_timeout or settings.enrichment_attempt_timeout

    async def run(self, items: Sequence[T]) -> list[EnrichmentOutcome[T, R]]:
        items = list(items)
        if not items:
            return []

        outcomes: list[Optional[EnrichmentOutcome[T, R]]] = [None] * len(items)
        queue: asyncio.Queue[int] = asyncio.Queue()
        for index in range(len(items)):
            queue.put_nowait(index)

        workers = [
            asyncio.create_task(self._worker(queue, items, outcomes))
            for _ in range(min(self.concurrency, len(items)))
        ]
        await asyncio.gather(*workers)

        return outcomes

    async def _worker(
        self,
        queue: "asyncio.Queue[int]",
        items: list[T],
        outcomes: list,
    ):
        while True:
            try:
                index = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            outcomes[index] = await self._process(index, items[index])

    async def _process(self, index: int, item: T) -> EnrichmentOutcome[T, R]:
        total = self.max_retries + 1
        last_error = None

        for attempt in range(1, total + 1):
            try:
                result = await asyncio.wait_for(self.handler(item), timeout=self.attempt_timeout)
                return EnrichmentOutcome(item=item, result=result, attempts=attempt)
            except asyncio.TimeoutError:
                last_error = f"Timed out after {self.attempt_timeout:g}s"
            except Exception as e:
                last_error = str(e) or type(e).__name__

            logger.warning(f"Item {index} attempt {attempt}/{total} failed: {last_error}")

        logger.error(f"Item {index} failed after {total} attempts: {last_error}")
        return EnrichmentOutcome(
            item=item,
            error=last_error or "Failed after retries",
            attempts=total,
        )


async def enrich(
    candidates: Sequence[T],
    handler: Callable[[T], Awaitable[R]],
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> list[EnrichmentOutcome[T, R]]:
    """Enrich candidates with handler; ``output[i]`` corresponds to ``candidates[i]``."""
    pool = EnrichmentWorkerPool(handler, concurrency=concurrency, max_retries=max_retries)
    return await pool.run(candidates)
