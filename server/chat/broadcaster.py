"""
Broadcaster module.

Formats a payload with the current time and fans it out to every registered
session.
"""

import asyncio
from typing import Optional

from common.protocol_definitions import format_line
from server.chat.events import EventHub
from server.chat.registry import Registry
from server.utils.logger import logger


class Broadcaster:
    """Stateless formatting + fan-out over a registry snapshot."""

    def __init__(self, registry: Registry, events: Optional[EventHub] = None):
        self.registry = registry
        self.events = events or EventHub()

    async def broadcast(self, payload: str) -> str:
        """
        Send `[HH:MM:SS]<payload>` to every session and return the line.

        Each session only queues the line, so a peer that stopped reading
        delays nobody else and a failing one never raises here.
        """
        line = format_line(payload)
        logger.log_chat(line)
        self.events.chat_line(line)

        sessions = await self.registry.snapshot()
        if not sessions:
            return line

        results = await asyncio.gather(
            *(session.send(line) for session in sessions),
            return_exceptions=True
        )
        for session, result in zip(sessions, results):
            if isinstance(result, Exception):
                logger.error(f"Broadcast to '{session.nickname}' raised: {result}")
        return line
