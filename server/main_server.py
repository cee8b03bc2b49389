#!/usr/bin/env python3
"""
Chat Relay Server - command surface

`ChatRelayServer` wires the acceptor, registry, dispatcher and broadcaster
together and exposes the operations a presentation layer calls: start, stop,
admin broadcast and kick. Notifications flow back through `ServerListener`s.
"""

import asyncio
import logging
from typing import List, Optional

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.protocol_definitions import (
    format_admin_payload, format_kicked_notice, format_kicked_private_notice,
    format_line, format_shutdown_notice, split_admin_text
)
from server.chat.acceptor import Acceptor
from server.chat.broadcaster import Broadcaster
from server.chat.dispatcher import Dispatcher
from server.chat.events import EventHub, ServerListener
from server.chat.registry import Registry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ServerState:
    STOPPED = 'stopped'
    RUNNING = 'running'


class ChatRelayServer:
    """Main server class that integrates all functionality."""

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.events = EventHub()
        self.state = ServerState.STOPPED
        self.port: Optional[int] = None
        self.last_error: Optional[str] = None

        self.registry: Optional[Registry] = None
        self.broadcaster: Optional[Broadcaster] = None
        self.dispatcher: Optional[Dispatcher] = None
        self.acceptor: Optional[Acceptor] = None
        self.dispatcher_task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self.state == ServerState.RUNNING

    def add_listener(self, listener: ServerListener):
        """Subscribe a presentation layer to server notifications."""
        self.events.add_listener(listener)

    def remove_listener(self, listener: ServerListener):
        self.events.remove_listener(listener)

    def nicknames(self) -> List[str]:
        """Currently registered nicknames."""
        if self.registry is None:
            return []
        return self.registry.nicknames()

    async def start(self, port: Optional[int] = None) -> bool:
        """
        Bind the listening socket and launch the acceptor and dispatcher.

        Returns False when already running or when the bind fails; in the
        latter case `last_error` holds the reason and the server stays stopped.
        """
        if self.is_running:
            logger.warning("Start requested while the server is already running")
            return False

        connection = self.config.get_connection_info()
        port = connection['port'] if port is None else port
        self.last_error = None
        self.registry = Registry()
        self.broadcaster = Broadcaster(self.registry, self.events)
        self.dispatcher = Dispatcher(
            self.registry,
            self.broadcaster,
            self.events,
            **self.config.get_dispatch_settings()
        )
        self.acceptor = Acceptor(self.config, self.registry, self.dispatcher, self.events)

        try:
            self.port = await self.acceptor.start(connection['host'], port)
        except OSError as e:
            self.last_error = f"Cannot start server on port {port}: {e}"
            self.events.log(self.last_error, logging.ERROR)
            self.acceptor = None
            return False

        self.state = ServerState.RUNNING
        self._stopped = asyncio.Event()
        self.dispatcher_task = asyncio.create_task(self.dispatcher.run())
        self.dispatcher_task.add_done_callback(self._dispatcher_done)
        self.events.log(f"Server started on port {self.port}")
        return True

    async def stop(self) -> bool:
        """
        Announce shutdown, close the listener and every session.

        Events still queued are broadcast before the shutdown notice.
        """
        if not self.is_running:
            logger.warning("Stop requested while the server is not running")
            return False

        self.dispatcher.stop()
        try:
            await self.dispatcher_task
        except Exception as e:
            logger.log_error("dispatcher", e)
        await self.dispatcher.drain()

        await self.broadcaster.broadcast(format_shutdown_notice())

        self.state = ServerState.STOPPED
        self.acceptor.close()

        sessions = await self.registry.clear()
        for session in sessions:
            session.close()
            self.events.user_left(session.nickname)
        if sessions:
            try:
                await asyncio.wait_for(
                    asyncio.gather(*(session.wait_closed() for session in sessions)),
                    timeout=self.config.send_timeout
                )
            except asyncio.TimeoutError:
                logger.warning("Some connections did not close in time, aborting them")
                for session in sessions:
                    session.close(abort=True)
        await self.acceptor.wait_closed()

        self.events.log("Server stopped")
        self._stopped.set()
        return True

    async def admin_broadcast(self, text: str) -> int:
        """Broadcast each non-blank line of `text` as an admin line; returns lines sent."""
        if not self.is_running:
            return 0
        lines = split_admin_text(text)
        for line in lines:
            await self.broadcaster.broadcast(format_admin_payload(line))
        return len(lines)

    async def kick(self, nickname: str) -> bool:
        """
        Forcibly disconnect a client.

        Returns False when no such nickname is registered.
        """
        if not self.is_running:
            return False
        session = await self.registry.get(nickname)
        if session is None:
            return False

        await self.broadcaster.broadcast(format_kicked_notice(nickname))
        await session.send(format_line(format_kicked_private_notice()))

        removed = await self.registry.remove(nickname, session)
        session.close()
        if removed is not None:
            self.events.log(f"User '{nickname}' kicked")
            self.events.user_left(nickname)
        return True

    async def wait_stopped(self):
        """Block until `stop` has completed."""
        if self._stopped is not None:
            await self._stopped.wait()

    def _dispatcher_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        if task.exception():
            logger.error(f"Dispatcher task failed with exception: {task.exception()}")
