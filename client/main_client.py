#!/usr/bin/env python3
"""
Chat Relay Client - console client

Connects, registers a nickname and relays stdin lines to the chat room while
printing everything the server broadcasts.
"""

import asyncio
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.console_input import start_stdin_reader
from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger

QUIT_COMMAND = '/quit'


class ConsoleClient:
    """Interactive terminal front end over `ChatClient`."""

    def __init__(self, config: ClientConfig):
        self.config = config
        self.chat_client = ChatClient()
        self.chat_client.set_message_handler(self.show_line)

    def show_line(self, line: str):
        print(line, flush=True)

    async def connect(self) -> bool:
        """Connect and register; reports problems instead of raising."""
        if not self.config.is_valid_port():
            logger.error(f"Port {self.config.port} is not in the 1024-65535 range")
            return False
        info = self.config.get_connection_info()
        try:
            if await self.chat_client.connect(info['host'], info['port'], info['nickname'] or '',
                                              timeout=self.config.connect_timeout):
                return True
        except (OSError, asyncio.TimeoutError) as e:
            logger.log_connection(self.config.host, self.config.port, False)
            logger.log_error("connection", e)
            return False
        logger.error("Nickname is invalid or already in use")
        return False

    async def interactive_mode(self):
        """Run client with interactive chat input."""
        if not await self.connect():
            return

        listener_task = asyncio.create_task(self.chat_client.listen())
        logger.show_interactive_mode_info()
        lines = start_stdin_reader(asyncio.get_running_loop())

        try:
            while self.chat_client.connected:
                input_task = asyncio.ensure_future(lines.get())
                done, _ = await asyncio.wait(
                    {input_task, listener_task},
                    return_when=asyncio.FIRST_COMPLETED
                )
                if listener_task in done:
                    input_task.cancel()
                    logger.info("[INFO] Server closed the connection")
                    break
                user_input = input_task.result()
                if not user_input or user_input.strip() == QUIT_COMMAND:
                    break
                await self.chat_client.send_chat(user_input)
        finally:
            await self.chat_client.disconnect()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass
            logger.info("[INFO] Disconnected from server")
