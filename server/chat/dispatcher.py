"""
Dispatcher module.

Single consumer of the inbound queue and the only component that removes
sessions from the registry for liveness reasons.
"""

import asyncio
from typing import List

from common.constants import DISPATCH_INTERVAL, MAX_QUEUE_SIZE
from common.protocol_definitions import ChatEvent, create_left_event
from server.chat.broadcaster import Broadcaster
from server.chat.events import EventHub
from server.chat.registry import Registry
from server.utils.logger import logger


class Dispatcher:
    """Drains queued chat events in order and reaps dead sessions."""

    def __init__(self, registry: Registry, broadcaster: Broadcaster, events: EventHub,
                 interval: float = DISPATCH_INTERVAL, max_queue_size: int = MAX_QUEUE_SIZE):
        self.registry = registry
        self.broadcaster = broadcaster
        self.events = events
        self.interval = interval
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self.running = False
        self._wakeup = asyncio.Event()

    async def put(self, event: ChatEvent):
        """Queue an event; waits while the queue is full."""
        await self.queue.put(event)
        self._wakeup.set()

    async def run(self):
        """
        Tick until stopped.

        Each tick wakes on the first queued event or after `interval`
        seconds, whichever comes first, then drains the queue and reaps.
        """
        self.running = True
        logger.info("Dispatcher started")
        try:
            while self.running:
                await self.tick()
        finally:
            self.running = False
            logger.info("Dispatcher stopped")

    async def tick(self):
        try:
            await asyncio.wait_for(self._wakeup.wait(), self.interval)
        except asyncio.TimeoutError:
            pass
        self._wakeup.clear()
        await self.drain()
        await self.reap()

    async def drain(self) -> int:
        """Broadcast every event currently queued, in arrival order."""
        count = 0
        while True:
            try:
                event = self.queue.get_nowait()
            except asyncio.QueueEmpty:
                return count
            await self._dispatch(event)
            self.queue.task_done()
            count += 1

    async def reap(self) -> List[str]:
        """Remove sessions whose read loop has ended and announce them."""
        removed = []
        for session in await self.registry.snapshot():
            if not session.finished:
                continue
            if await self.registry.remove(session.nickname, session) is None:
                continue
            removed.append(session.nickname)
            self.events.log(f"User '{session.nickname}' disconnected")
            self.events.user_left(session.nickname)
            await self._dispatch(create_left_event(session.nickname))
        return removed

    def stop(self):
        self.running = False
        self._wakeup.set()

    async def _dispatch(self, event: ChatEvent):
        try:
            await self.broadcaster.broadcast(event.payload())
        except Exception as e:
            logger.error(f"Broadcasting [{event.payload()}] failed: {e}")
