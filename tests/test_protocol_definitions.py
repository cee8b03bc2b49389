#!/usr/bin/env python3
"""
Unit tests for the line formats in common/protocol_definitions.py
"""

import unittest
from datetime import datetime

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import ADMIN_NAME, EventKinds, Notices
from common.protocol_definitions import (
    create_chat_event, create_joined_event, create_left_event, decode_line,
    encode_line, format_admin_payload, format_kicked_notice,
    format_kicked_private_notice, format_line, format_shutdown_notice,
    format_timestamp, is_reserved_nickname, is_valid_nickname, split_admin_text
)


class TestFormatting(unittest.TestCase):
    """Timestamp prefix and payload shapes."""

    def test_timestamp_is_zero_padded(self):
        self.assertEqual(format_timestamp(datetime(2024, 1, 1, 9, 5, 3)), "[09:05:03]")

    def test_line_is_prefix_plus_payload(self):
        now = datetime(2024, 1, 1, 14, 3, 22)
        self.assertEqual(format_line("alice：hi", now), "[14:03:22]alice：hi")

    def test_current_time_prefix_shape(self):
        line = format_line("x")
        self.assertRegex(line, r"^\[\d{2}:\d{2}:\d{2}\]x$")

    def test_chat_event_payload(self):
        event = create_chat_event("alice", "hi")
        self.assertEqual(event.kind, EventKinds.CHAT)
        self.assertEqual(event.payload(), "alice：hi")

    def test_empty_chat_text_is_kept(self):
        self.assertEqual(create_chat_event("alice", "").payload(), "alice：")

    def test_joined_and_left_payloads(self):
        self.assertEqual(create_joined_event("bob").payload(), "bob：【entered the chat room】")
        self.assertEqual(create_left_event("bob").payload(), "bob：【left the chat room】")

    def test_admin_and_kick_notices(self):
        self.assertEqual(format_admin_payload("hello"), f"{ADMIN_NAME}：hello")
        self.assertEqual(format_kicked_notice("carol"), "carol：【removed for violation】")
        self.assertEqual(format_kicked_private_notice(), f"{ADMIN_NAME}：{Notices.KICKED_PRIVATE}")
        self.assertEqual(format_shutdown_notice(), f"{ADMIN_NAME}：{Notices.SHUTDOWN}")


class TestNicknames(unittest.TestCase):
    """Registry-independent nickname rules."""

    def test_valid(self):
        self.assertTrue(is_valid_nickname("alice"))
        self.assertTrue(is_valid_nickname("Admin2"))

    def test_blank_and_missing(self):
        self.assertFalse(is_valid_nickname(None))
        self.assertFalse(is_valid_nickname(""))
        self.assertFalse(is_valid_nickname("   "))

    def test_reserved_is_case_insensitive(self):
        for name in ("Admin", "admin", "ADMIN", " Admin "):
            with self.subTest(name=name):
                self.assertTrue(is_reserved_nickname(name))
                self.assertFalse(is_valid_nickname(name))


class TestFraming(unittest.TestCase):
    """Line encoding and admin text splitting."""

    def test_encode_appends_newline(self):
        self.assertEqual(encode_line("héllo"), "héllo".encode('utf-8') + b'\n')

    def test_decode_strips_terminators(self):
        self.assertEqual(decode_line(b"hi\r\n"), "hi")
        self.assertEqual(decode_line(b"hi\n"), "hi")
        self.assertEqual(decode_line(b"hi"), "hi")

    def test_decode_replaces_invalid_bytes(self):
        self.assertEqual(decode_line(b"a\xffb\n"), "a�b")

    def test_split_admin_text_drops_blank_lines(self):
        self.assertEqual(split_admin_text("one\n\n  \ntwo\r\nthree"), ["one", "two", "three"])
        self.assertEqual(split_admin_text("   "), [])


if __name__ == '__main__':
    unittest.main()
