"""
Bounded notification channel.

Each watcher signal (modified, moved, stopped, change reports) is delivered
through its own channel with exactly one producer, the watcher's poll loop.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from pollwatch.config.settings import OverflowPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """
    Single-producer bounded queue with an explicit overflow policy.

    BLOCK makes the producer wait until the consumer makes room, so a consumer
    that never drains the channel stalls the producing watcher. DROP_NEWEST and
    DROP_OLDEST never wait and count the items they discard instead.
    """

    def __init__(self, maxsize: int = 64, policy: OverflowPolicy | str = OverflowPolicy.BLOCK, name: str = ""):
        if maxsize < 1:
            raise ValueError("channel maxsize must be at least 1")
        self.name = name
        self.policy = OverflowPolicy(policy)
        self.dropped = 0
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    async def send(self, item: T, abort: asyncio.Event | None = None) -> bool:
        """
        Hand an item off to the consumer.

        Args:
            item: Value to deliver
            abort: Event that withdraws a send still waiting for room (BLOCK only)

        Returns:
            True if the item was enqueued, False if it was dropped or withdrawn
        """
        if self.policy is OverflowPolicy.BLOCK:
            if abort is None:
                await self._queue.put(item)
                return True
            return await self._put_unless(item, abort)

        if self._queue.full():
            self.dropped += 1
            if self.policy is OverflowPolicy.DROP_NEWEST:
                logger.debug("Channel %s full, dropping newest item", self.name)
                return False
            self._queue.get_nowait()
            logger.debug("Channel %s full, dropping oldest item", self.name)

        self._queue.put_nowait(item)
        return True

    async def _put_unless(self, item: T, abort: asyncio.Event) -> bool:
        if abort.is_set():
            return False
        if not self._queue.full():
            self._queue.put_nowait(item)
            return True

        put = asyncio.ensure_future(self._queue.put(item))
        aborted = asyncio.ensure_future(abort.wait())
        try:
            await asyncio.wait({put, aborted}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            aborted.cancel()
            if not put.done():
                put.cancel()

        if put.done() and not put.cancelled():
            return True
        logger.debug("Channel %s send withdrawn", self.name)
        return False

    async def receive(self) -> T:
        """Wait for and return the next item."""
        return await self._queue.get()

    def receive_nowait(self) -> T:
        """
        Return the next item without waiting.

        Raises:
            asyncio.QueueEmpty: If nothing is pending
        """
        return self._queue.get_nowait()

    def drain(self) -> list[T]:
        """Return every pending item without waiting."""
        items = []
        while not self._queue.empty():
            items.append(self._queue.get_nowait())
        return items

    def empty(self) -> bool:
        return self._queue.empty()

    def qsize(self) -> int:
        return self._queue.qsize()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        while True:
            yield await self._queue.get()

    def __repr__(self) -> str:
        return f"Channel({self.name!r}, {self.qsize()}/{self.maxsize}, policy={self.policy.value})"
