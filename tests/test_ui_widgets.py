#!/usr/bin/env python3
"""
Unit tests for the PyQt6 windows: admin window user list and controls,
client window form validation and the shared message input.
"""

import os
import unittest
from unittest.mock import Mock, patch

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QKeyEvent, QTextCursor
from PyQt6.QtWidgets import QApplication

from common.ui_widgets import MessageInput
from server.ui.admin_window import AdminWindow, NO_USERS_PLACEHOLDER
from client.ui.client_gui import ClientMainWindow


class QtTestCase(unittest.TestCase):
    """Create QApplication once for all tests."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])


class TestMessageInput(QtTestCase):
    """Enter submits, Shift+Enter adds a line."""

    def setUp(self):
        self.input = MessageInput()
        self.submitted = []
        self.input.submitted.connect(self.submitted.append)

    def press_enter(self, modifiers=Qt.KeyboardModifier.NoModifier):
        event = QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Return, modifiers)
        self.input.keyPressEvent(event)

    def test_enter_submits_and_clears(self):
        self.input.setPlainText("hello")
        self.press_enter()
        self.assertEqual(self.submitted, ["hello"])
        self.assertEqual(self.input.toPlainText(), "")

    def test_shift_enter_inserts_newline(self):
        self.input.setPlainText("one")
        self.input.moveCursor(QTextCursor.MoveOperation.End)
        self.press_enter(Qt.KeyboardModifier.ShiftModifier)
        self.assertEqual(self.submitted, [])
        self.assertEqual(self.input.toPlainText(), "one\n")

    def test_blank_text_not_submitted(self):
        self.input.setPlainText("  \n ")
        self.input.submit()
        self.assertEqual(self.submitted, [])


class TestAdminWindow(QtTestCase):
    """User list and control enablement."""

    def setUp(self):
        self.window = AdminWindow()

    def tearDown(self):
        self.window.close()

    def test_initial_state(self):
        self.assertTrue(self.window.start_button.isEnabled())
        self.assertFalse(self.window.stop_button.isEnabled())
        self.assertFalse(self.window.send_button.isEnabled())
        self.assertFalse(self.window.kick_button.isEnabled())
        self.assertEqual(self.window.user_list.item(0).text(), NO_USERS_PLACEHOLDER)

    def test_started_state(self):
        self.window.on_start_finished(True, '')
        self.assertFalse(self.window.start_button.isEnabled())
        self.assertTrue(self.window.stop_button.isEnabled())
        self.assertTrue(self.window.send_button.isEnabled())
        self.assertFalse(self.window.kick_button.isEnabled())

    def test_user_list_tracks_membership(self):
        self.window.on_start_finished(True, '')
        self.window.add_user("alice")
        self.window.add_user("bob")
        self.assertEqual(self.window.user_names(), ["alice", "bob"])
        self.assertTrue(self.window.kick_button.isEnabled())

        self.window.remove_user("alice")
        self.window.remove_user("bob")
        self.assertEqual(self.window.user_names(), [])
        self.assertEqual(self.window.user_list.item(0).text(), NO_USERS_PLACEHOLDER)
        self.assertFalse(self.window.kick_button.isEnabled())

    def test_stop_resets_user_list(self):
        self.window.on_start_finished(True, '')
        self.window.add_user("alice")
        self.window.on_stop_finished()
        self.assertEqual(self.window.user_names(), [])
        self.assertTrue(self.window.start_button.isEnabled())

    @patch('server.ui.admin_window.QMessageBox')
    def test_failed_start_reports_error(self, message_box):
        self.window.on_start_finished(False, 'Cannot start server on port 80')
        message_box.critical.assert_called_once()
        self.assertTrue(self.window.start_button.isEnabled())

    @patch('server.ui.admin_window.QMessageBox')
    def test_invalid_port_rejected(self, message_box):
        self.window.server_thread.start_server = Mock()
        self.window.port_input.setText("not a port")
        self.window.start_server()
        message_box.critical.assert_called_once()
        self.window.server_thread.start_server.assert_not_called()


class TestClientWindow(QtTestCase):
    """Form validation before connecting."""

    def setUp(self):
        self.window = ClientMainWindow()

    def tearDown(self):
        self.window.close()

    def fill(self, host="127.0.0.1", port="12345", nickname="alice"):
        self.window.host_input.setText(host)
        self.window.port_input.setText(port)
        self.window.nickname_input.setText(nickname)

    def test_valid_form(self):
        self.fill(nickname=" alice ")
        config = self.window.read_config()
        self.assertEqual((config.host, config.port, config.nickname), ("127.0.0.1", 12345, "alice"))

    @patch('client.ui.client_gui.QMessageBox')
    def test_invalid_forms(self, message_box):
        cases = [
            dict(nickname=""),
            dict(nickname="Admin"),
            dict(host=""),
            dict(port="abc"),
            dict(port="80"),
        ]
        for case in cases:
            with self.subTest(**case):
                self.fill(**case)
                self.assertIsNone(self.window.read_config())
        self.assertEqual(message_box.warning.call_count, len(cases))

    def test_initial_controls(self):
        self.assertTrue(self.window.enter_button.isEnabled())
        self.assertFalse(self.window.exit_button.isEnabled())
        self.assertFalse(self.window.send_button.isEnabled())


if __name__ == '__main__':
    unittest.main()
