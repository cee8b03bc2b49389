#!/usr/bin/env python3
"""
Unit tests for server/chat/broadcaster.py
"""

import unittest
from unittest.mock import AsyncMock, Mock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.chat.broadcaster import Broadcaster
from server.chat.events import EventHub, ServerListener
from server.chat.registry import Registry
from server.utils.logger import logger


def make_session(nickname, result=True):
    session = Mock()
    session.nickname = nickname
    session.send = AsyncMock(return_value=result)
    return session


class TestBroadcaster(unittest.IsolatedAsyncioTestCase):
    """Test cases for fan-out."""

    def setUp(self):
        logger.transcript_enabled = False
        self.registry = Registry()
        self.events = EventHub()
        self.broadcaster = Broadcaster(self.registry, self.events)

    def tearDown(self):
        logger.transcript_enabled = True

    async def test_every_session_gets_the_same_line(self):
        sessions = [make_session(n) for n in ("alice", "bob", "carol")]
        for session in sessions:
            await self.registry.add(session)

        line = await self.broadcaster.broadcast("alice：hi")

        self.assertRegex(line, r"^\[\d{2}:\d{2}:\d{2}\]alice：hi$")
        for session in sessions:
            session.send.assert_awaited_once_with(line)

    async def test_no_sessions(self):
        line = await self.broadcaster.broadcast("Admin：anyone?")
        self.assertTrue(line.endswith("Admin：anyone?"))

    async def test_failing_session_does_not_affect_others(self):
        broken = make_session("broken")
        broken.send.side_effect = RuntimeError("boom")
        dead = make_session("dead", result=False)
        healthy = make_session("healthy")
        for session in (broken, dead, healthy):
            await self.registry.add(session)

        line = await self.broadcaster.broadcast("x：y")

        healthy.send.assert_awaited_once_with(line)
        dead.send.assert_awaited_once_with(line)

    async def test_listeners_see_broadcast_line(self):
        listener = ServerListener()
        listener.on_chat_line = Mock()
        self.events.add_listener(listener)

        line = await self.broadcaster.broadcast("bob：hey")

        listener.on_chat_line.assert_called_once_with(line)


if __name__ == '__main__':
    unittest.main()
