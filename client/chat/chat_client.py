"""
Chat client module.

This module handles client-side chat messaging functionality.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Union

from common.constants import CONNECT_TIMEOUT, MAX_LINE_LENGTH, Replies
from common.protocol_definitions import decode_line, encode_line, is_valid_nickname
from client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self):
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.nickname: Optional[str] = None
        self.connected = False
        self.message_handler: Optional[Callable[[str], Union[None, Awaitable[None]]]] = None

    def set_message_handler(self, handler: Callable[[str], Union[None, Awaitable[None]]]):
        """Set the handler called with every line received from the server."""
        self.message_handler = handler

    async def connect(self, host: str, port: int, nickname: str,
                      timeout: float = CONNECT_TIMEOUT) -> bool:
        """
        Open a connection and register `nickname`.

        Returns True when the server answered `OK`. Invalid nicknames are
        refused locally without contacting the server. Connection errors
        propagate to the caller.
        """
        if not is_valid_nickname(nickname):
            logger.log_login(nickname, False)
            return False

        self.reader, self.writer = await asyncio.wait_for(
            asyncio.open_connection(host, port, limit=MAX_LINE_LENGTH),
            timeout=timeout
        )
        logger.log_connection(host, port, True)

        try:
            self.writer.write(encode_line(nickname.strip()))
            await self.writer.drain()
            reply = await asyncio.wait_for(self.reader.readline(), timeout=timeout)
        except (OSError, asyncio.TimeoutError):
            await self.disconnect()
            raise

        if decode_line(reply) != Replies.OK:
            logger.log_login(nickname, False)
            await self.disconnect()
            return False

        self.nickname = nickname.strip()
        self.connected = True
        logger.log_login(self.nickname, True)
        return True

    async def send_line(self, line: str) -> bool:
        """Send one raw line."""
        if not self.connected or self.writer is None:
            logger.error("Not connected to server")
            return False
        try:
            self.writer.write(encode_line(line))
            await self.writer.drain()
            return True
        except (OSError, RuntimeError) as e:
            logger.log_error("send", e)
            return False

    async def send_chat(self, text: str) -> int:
        """Send each non-blank line of `text`; returns the number sent."""
        sent = 0
        for line in text.splitlines():
            if not line.strip():
                continue
            if not await self.send_line(line):
                break
            logger.log_chat_sent(line)
            sent += 1
        return sent

    async def listen(self):
        """Deliver received lines to the message handler until the server closes."""
        try:
            while self.connected and self.reader is not None:
                data = await self.reader.readline()
                if not data:
                    break
                await self.handle_message(decode_line(data))
        except (OSError, ValueError) as e:
            logger.log_error("receive", e)
        finally:
            await self.disconnect()

    async def handle_message(self, line: str):
        if self.message_handler is None:
            print(line)
            return
        result = self.message_handler(line)
        if asyncio.iscoroutine(result):
            await result

    async def disconnect(self):
        """Close the connection; safe to call more than once."""
        self.connected = False
        writer, self.writer = self.writer, None
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, RuntimeError):
            pass
