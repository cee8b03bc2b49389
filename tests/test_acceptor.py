#!/usr/bin/env python3
"""
Unit tests for the nickname handshake in server/chat/acceptor.py
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, Mock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import Replies
from common.protocol_definitions import encode_line
from server.chat.acceptor import Acceptor
from server.chat.events import EventHub, ServerListener
from server.chat.registry import Registry
from server.utils.config import ServerConfig

ADDR = ('127.0.0.1', 50000)


def make_writer():
    writer = Mock()
    writer.get_extra_info.return_value = ADDR
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    return writer


class TestHandshake(unittest.IsolatedAsyncioTestCase):
    """Test cases for accepting or refusing a nickname."""

    def setUp(self):
        self.registry = Registry()
        self.dispatcher = Mock()
        self.dispatcher.put = AsyncMock()
        self.events = EventHub()
        self.listener = ServerListener()
        self.listener.on_user_joined = Mock()
        self.events.add_listener(self.listener)
        self.acceptor = Acceptor(ServerConfig(host='127.0.0.1', port=0), self.registry,
                                 self.dispatcher, self.events)
        self.acceptor.running = True

    def reader_for(self, data: bytes):
        reader = asyncio.StreamReader()
        reader.feed_data(data)
        return reader

    def replies(self, writer):
        return [c.args[0] for c in writer.write.call_args_list]

    async def test_accepts_and_announces(self):
        writer = make_writer()
        session = await self.acceptor.handshake(self.reader_for(b"alice\n"), writer, ADDR)

        self.assertEqual(session.nickname, "alice")
        self.assertEqual(self.replies(writer), [encode_line(Replies.OK)])
        self.assertEqual(self.registry.nicknames(), ["alice"])
        self.listener.on_user_joined.assert_called_once_with("alice")
        self.dispatcher.put.assert_awaited_once()

    async def test_session_uses_configured_timeouts(self):
        self.acceptor.config.send_timeout = 1.5
        self.acceptor.config.idle_timeout = 30
        session = await self.acceptor.handshake(self.reader_for(b"alice\n"), make_writer(), ADDR)
        self.assertEqual(session.send_timeout, 1.5)
        self.assertEqual(session.idle_timeout, 30)

    async def test_rejects_taken_nickname(self):
        await self.acceptor.handshake(self.reader_for(b"alice\n"), make_writer(), ADDR)
        writer = make_writer()
        session = await self.acceptor.handshake(self.reader_for(b"alice\n"), writer, ADDR)

        self.assertIsNone(session)
        self.assertEqual(self.replies(writer), [encode_line(Replies.INVALID)])
        writer.close.assert_called_once()

    async def test_stop_during_reply_unregisters(self):
        writer = make_writer()
        # The server stops while the OK reply is still being flushed
        writer.drain.side_effect = lambda: self.acceptor.close()

        session = await self.acceptor.handshake(self.reader_for(b"alice\n"), writer, ADDR)

        self.assertIsNone(session)
        self.assertEqual(self.registry.nicknames(), [])
        self.listener.on_user_joined.assert_not_called()
        self.dispatcher.put.assert_not_awaited()
        writer.close.assert_called_once()

    async def test_peer_gone_before_nickname(self):
        reader = asyncio.StreamReader()
        reader.feed_eof()
        writer = make_writer()
        self.assertIsNone(await self.acceptor.handshake(reader, writer, ADDR))
        writer.write.assert_not_called()


if __name__ == '__main__':
    unittest.main()
