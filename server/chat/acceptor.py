"""
Acceptor module.

Owns the listening socket and turns raw connections into registered
sessions through the nickname handshake.
"""

import asyncio
from typing import Optional, Set

from common.constants import Replies
from common.protocol_definitions import (
    create_joined_event, decode_line, encode_line, is_reserved_nickname
)
from server.chat.dispatcher import Dispatcher
from server.chat.events import EventHub
from server.chat.registry import Registry
from server.chat.session import Session
from server.utils.config import ServerConfig
from server.utils.logger import logger


class Acceptor:
    """Accepts connections, runs the handshake and hosts each session."""

    def __init__(self, config: ServerConfig, registry: Registry, dispatcher: Dispatcher,
                 events: EventHub):
        self.config = config
        self.registry = registry
        self.dispatcher = dispatcher
        self.events = events
        self.server: Optional[asyncio.AbstractServer] = None
        self.running = False
        self.pending: Set[asyncio.StreamWriter] = set()  # connections still in handshake

    async def start(self, host: str, port: int) -> int:
        """Bind and listen; returns the bound port. Raises OSError on bind failure."""
        self.server = await asyncio.start_server(
            self.handle_connection,
            host,
            port,
            limit=self.config.max_line_length
        )
        self.running = True
        bound_port = self.server.sockets[0].getsockname()[1]
        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Server listening on {addr}")
        return bound_port

    def close(self):
        """Stop accepting and drop connections that never finished the handshake."""
        self.running = False
        if self.server is None:
            return
        self.server.close()
        for writer in list(self.pending):
            writer.close()
        self.pending.clear()

    async def wait_closed(self):
        """Wait for the listener to shut down; call after sessions are closed."""
        if self.server is None:
            return
        try:
            await asyncio.wait_for(self.server.wait_closed(), timeout=self.config.send_timeout)
        except asyncio.TimeoutError:
            logger.warning("Listener did not close cleanly, continuing shutdown")
        self.server = None

    async def handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Per-connection task: handshake, then the session's read loop."""
        addr = writer.get_extra_info('peername')
        if not self.running:
            writer.close()
            return

        logger.log_connection(addr)
        self.pending.add(writer)
        try:
            session = await self.handshake(reader, writer, addr)
        except (OSError, ValueError, asyncio.IncompleteReadError) as e:
            if self.running:
                logger.warning(f"Handshake with {addr} failed: {e}")
            writer.close()
            return
        finally:
            self.pending.discard(writer)

        if session is None:
            return

        await session.read_loop()

    async def handshake(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                        addr) -> Optional[Session]:
        """
        Read the proposed nickname and reply `OK` or `INVALID`.

        Returns the registered session, or None when the nickname was
        rejected or the peer left first.
        """
        try:
            if self.config.idle_timeout is not None:
                data = await asyncio.wait_for(reader.readline(), self.config.idle_timeout)
            else:
                data = await reader.readline()
        except asyncio.TimeoutError:
            logger.info(f"Handshake with {addr} timed out")
            writer.close()
            return None

        if not data:
            logger.info(f"{addr} disconnected before sending a nickname")
            writer.close()
            return None

        nickname = decode_line(data).strip()
        session = Session(
            nickname,
            reader,
            writer,
            self.dispatcher.put,
            **self.config.get_session_settings()
        )

        if not nickname:
            reason = 'empty nickname'
        elif is_reserved_nickname(nickname):
            reason = 'reserved nickname'
        elif not await self.registry.add(session):
            reason = 'nickname in use'
        elif not self.running:
            await self.registry.remove(nickname, session)
            reason = 'server stopping'
        else:
            reason = None

        if reason is not None:
            logger.log_rejected(nickname, addr, reason)
            writer.write(encode_line(Replies.INVALID))
            await writer.drain()
            writer.close()
            return None

        try:
            writer.write(encode_line(Replies.OK))
            await writer.drain()
        except OSError as e:
            logger.warning(f"Lost {addr} while confirming '{nickname}': {e}")
            await self.registry.remove(nickname, session)
            session.close(abort=True)
            return None

        if not self.running:
            # Stopped while the reply was in flight
            await self.registry.remove(nickname, session)
            session.close()
            return None

        self.events.log(f"User '{nickname}' joined from {addr}")
        self.events.user_joined(nickname)
        await self.dispatcher.put(create_joined_event(nickname))
        return session
