"""Broadcast channel for slot availability counts."""

import asyncio
import logging
from collections import deque
from enum import Enum
from typing import Optional

from .errors import ChannelClosedError

logger = logging.getLogger(__name__)


class OverflowPolicy(str, Enum):
    """What a subscriber buffer does when it is full."""

    DROP_OLDEST = "drop_oldest"
    UNBOUNDED = "unbounded"


class AvailabilitySubscription:
    """
    One subscriber's view of the availability feed.

    Iterate with ``async for`` to receive free-slot counts as they are
    published. Iteration ends once the channel is closed and the buffer
    has been drained.
    """

    def __init__(self, channel: "AvailabilityChannel", maxlen: Optional[int]):
        self._channel = channel
        self._buffer: deque[int] = deque(maxlen=maxlen)
        self._ready = asyncio.Event()
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def _push(self, count: int) -> None:
        if self._buffer.maxlen is not None and len(self._buffer) == self._buffer.maxlen:
            self.dropped += 1
        self._buffer.append(count)
        self._ready.set()

    def _close(self) -> None:
        self._closed = True
        self._ready.set()

    def drain(self) -> list[int]:
        """Return and clear everything buffered, without waiting."""
        items = list(self._buffer)
        self._buffer.clear()
        return items

    async def get(self) -> Optional[int]:
        """Wait for the next count. Returns None once the stream has ended."""
        while not self._buffer:
            if self._closed:
                return None
            self._ready.clear()
            await self._ready.wait()
        return self._buffer.popleft()

    def unsubscribe(self) -> None:
        """Stop receiving events."""
        self._channel._remove(self)
        self._close()

    def __aiter__(self):
        return self

    async def __anext__(self) -> int:
        count = await self.get()
        if count is None:
            raise StopAsyncIteration
        return count

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.unsubscribe()


class AvailabilityChannel:
    """
    Fan-out channel carrying free-slot counts.

    Publishing never waits on subscribers. With DROP_OLDEST each subscriber
    keeps at most ``buffer_size`` pending counts and loses the oldest when
    full; with UNBOUNDED pending counts accumulate until read.
    """

    def __init__(
        self,
        overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST,
        buffer_size: int = 100,
    ):
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.overflow = OverflowPolicy(overflow)
        self.buffer_size = buffer_size
        self._subscribers: list[AvailabilitySubscription] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> AvailabilitySubscription:
        """Register a new subscriber. Subscribing to a closed channel yields an ended stream."""
        maxlen = self.buffer_size if self.overflow == OverflowPolicy.DROP_OLDEST else None
        subscription = AvailabilitySubscription(self, maxlen)
        if self._closed:
            subscription._close()
        else:
            self._subscribers.append(subscription)
        return subscription

    def publish(self, count: int) -> None:
        """
        Deliver a free-slot count to every subscriber.

        Raises:
            ChannelClosedError: If the channel has been closed
        """
        if self._closed:
            raise ChannelClosedError("Availability channel is closed")
        for subscription in self._subscribers:
            subscription._push(count)
        logger.debug(f"Published availability {count} to {len(self._subscribers)} subscriber(s)")

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscribers:
            subscription._close()
        self._subscribers.clear()

    def _remove(self, subscription: AvailabilitySubscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
