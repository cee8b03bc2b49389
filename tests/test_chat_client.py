#!/usr/bin/env python3
"""
Tests for client/chat/chat_client.py against a live relay.
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import Notices
from client.chat.chat_client import ChatClient
from server.main_server import ChatRelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger as server_logger

TIMEOUT = 2.0


class TestChatClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for the client library."""

    async def asyncSetUp(self):
        server_logger.transcript_enabled = False
        self.server = ChatRelayServer(ServerConfig(host='127.0.0.1', port=0))
        self.assertTrue(await self.server.start())
        self.clients = []

    async def asyncTearDown(self):
        for client in self.clients:
            await client.disconnect()
        if self.server.is_running:
            await self.server.stop()
        server_logger.transcript_enabled = True

    async def make_client(self, nickname):
        client = ChatClient()
        self.clients.append(client)
        received = asyncio.Queue()
        client.set_message_handler(received.put_nowait)
        ok = await client.connect('127.0.0.1', self.server.port, nickname, timeout=TIMEOUT)
        return client, received, ok

    async def next_payload(self, received):
        line = await asyncio.wait_for(received.get(), TIMEOUT)
        return line[10:]

    async def test_connect_and_chat(self):
        client, received, ok = await self.make_client("alice")
        self.assertTrue(ok)
        self.assertTrue(client.connected)
        listener = asyncio.create_task(client.listen())

        self.assertEqual(await self.next_payload(received), f"alice：{Notices.JOINED}")
        self.assertEqual(await client.send_chat("first\n\nsecond"), 2)
        self.assertEqual(await self.next_payload(received), "alice：first")
        self.assertEqual(await self.next_payload(received), "alice：second")

        await client.disconnect()
        await asyncio.wait_for(listener, TIMEOUT)
        self.assertFalse(client.connected)

    async def test_duplicate_nickname_refused(self):
        _, _, ok = await self.make_client("bob")
        self.assertTrue(ok)
        client, _, ok = await self.make_client("bob")
        self.assertFalse(ok)
        self.assertFalse(client.connected)

    async def test_invalid_nickname_refused_locally(self):
        client = ChatClient()
        self.assertFalse(await client.connect('127.0.0.1', 1, "Admin"))
        self.assertFalse(await client.connect('127.0.0.1', 1, "  "))
        self.assertIsNone(client.writer)

    async def test_connection_refused_raises(self):
        port = self.server.port
        await self.server.stop()
        client = ChatClient()
        with self.assertRaises(OSError):
            await client.connect('127.0.0.1', port, "carol", timeout=TIMEOUT)
        self.assertFalse(client.connected)

    async def test_listen_ends_on_server_stop(self):
        client, received, _ = await self.make_client("dave")
        listener = asyncio.create_task(client.listen())
        await self.next_payload(received)

        await self.server.stop()

        self.assertEqual(await self.next_payload(received), f"Admin：{Notices.SHUTDOWN}")
        await asyncio.wait_for(listener, TIMEOUT)
        self.assertFalse(client.connected)

    async def test_send_when_disconnected(self):
        client = ChatClient()
        self.assertFalse(await client.send_line("x"))
        self.assertEqual(await client.send_chat("x"), 0)

    async def test_async_message_handler(self):
        client, _, _ = await self.make_client("erin")
        seen = []

        async def handler(line):
            seen.append(line)

        client.set_message_handler(handler)
        await client.handle_message("[00:00:00]x：y")
        self.assertEqual(seen, ["[00:00:00]x：y"])


if __name__ == '__main__':
    unittest.main()
