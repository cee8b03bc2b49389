#!/usr/bin/env python3
"""
Admin Window - PyQt6 console for the chat relay server

Features:
- Port selection with start/stop controls
- Live transcript of every broadcast line and server log
- Connected user list with kick
- Multi-line admin broadcast input (Enter sends, Shift+Enter adds a line)

The server runs on its own asyncio loop inside a QThread. Commands are
posted to that loop; notifications come back as Qt signals. Widget
enablement is derived only from those notifications.
"""

import sys
import os
import asyncio
import threading
from typing import Optional

from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QTextEdit, QLineEdit, QListWidget, QMessageBox
)
from PyQt6.QtCore import Qt, QThread, pyqtSignal

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
from common.constants import DEFAULT_PORT
from common.ui_widgets import MessageInput
from server.chat.events import ServerListener
from server.main_server import ChatRelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger

NO_USERS_PLACEHOLDER = "No users connected"


# ============================================================================
# SERVER THREAD
# ============================================================================

class ServerThread(QThread):
    """Hosts the server's event loop and relays its notifications as signals."""

    log_line = pyqtSignal(str)
    chat_line = pyqtSignal(str)
    user_joined = pyqtSignal(str)
    user_left = pyqtSignal(str)
    start_finished = pyqtSignal(bool, str)  # success, error message
    stop_finished = pyqtSignal()
    kick_finished = pyqtSignal(str, bool)  # nickname, found

    def __init__(self, config: Optional[ServerConfig] = None):
        super().__init__()
        self.server = ChatRelayServer(config)
        self.server.add_listener(_SignalListener(self))
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.loop_ready = threading.Event()

    def run(self):
        """Run the event loop until `shutdown` stops it."""
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.loop_ready.set()
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()

    def submit(self, coro, on_done=None):
        """Schedule a coroutine on the server loop from the GUI thread."""
        if not self.loop_ready.wait(timeout=5.0):
            logger.warning("Server loop not ready, command dropped")
            coro.close()
            return None
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        if on_done is not None:
            future.add_done_callback(on_done)
        return future

    def start_server(self, port: int):
        def done(future):
            ok = not future.exception() and future.result()
            self.start_finished.emit(bool(ok), self.server.last_error or '')
        self.submit(self.server.start(port), done)

    def stop_server(self):
        self.submit(self.server.stop(), lambda future: self.stop_finished.emit())

    def admin_broadcast(self, text: str):
        self.submit(self.server.admin_broadcast(text))

    def kick(self, nickname: str):
        def done(future):
            found = not future.exception() and future.result()
            self.kick_finished.emit(nickname, bool(found))
        self.submit(self.server.kick(nickname), done)

    def shutdown(self, timeout: float = 10.0):
        """Stop the server if needed, then the loop, then the thread."""
        if not self.loop_ready.wait(timeout=5.0):
            return
        if self.server.is_running:
            future = self.submit(self.server.stop())
            if future is not None:
                try:
                    future.result(timeout)
                except Exception as e:
                    logger.log_error("shutdown", e)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.wait()


class _SignalListener(ServerListener):
    """Turns server notifications into thread-safe Qt signal emissions."""

    def __init__(self, thread: ServerThread):
        self.thread = thread

    def on_log(self, line: str):
        self.thread.log_line.emit(line)

    def on_user_joined(self, nickname: str):
        self.thread.user_joined.emit(nickname)

    def on_user_left(self, nickname: str):
        self.thread.user_left.emit(nickname)

    def on_chat_line(self, line: str):
        self.thread.chat_line.emit(line)


# ============================================================================
# ADMIN WINDOW
# ============================================================================

class AdminWindow(QMainWindow):
    """Server administration window."""

    def __init__(self, config: Optional[ServerConfig] = None):
        super().__init__()
        self.config = config or ServerConfig()
        self.running = False

        self.server_thread = ServerThread(self.config)
        self.server_thread.log_line.connect(self.append_line)
        self.server_thread.chat_line.connect(self.append_line)
        self.server_thread.user_joined.connect(self.add_user)
        self.server_thread.user_left.connect(self.remove_user)
        self.server_thread.start_finished.connect(self.on_start_finished)
        self.server_thread.stop_finished.connect(self.on_stop_finished)
        self.server_thread.kick_finished.connect(self.on_kick_finished)
        self.server_thread.start()

        self.setup_ui()
        self.update_controls()

    def setup_ui(self):
        self.setWindowTitle("Chat Relay Server")
        self.resize(600, 600)

        central = QWidget()
        layout = QVBoxLayout(central)

        # Port and start/stop
        top = QHBoxLayout()
        top.addWidget(QLabel("Port:"))
        self.port_input = QLineEdit(str(self.config.port or DEFAULT_PORT))
        self.port_input.setMaximumWidth(100)
        top.addWidget(self.port_input)
        self.start_button = QPushButton("Start")
        self.start_button.clicked.connect(self.start_server)
        top.addWidget(self.start_button)
        self.stop_button = QPushButton("Stop")
        self.stop_button.clicked.connect(self.stop_server)
        top.addWidget(self.stop_button)
        top.addStretch()
        layout.addLayout(top)

        # Transcript and users
        middle = QHBoxLayout()
        self.transcript = QTextEdit()
        self.transcript.setReadOnly(True)
        middle.addWidget(self.transcript, stretch=3)

        users = QVBoxLayout()
        users.addWidget(QLabel("Users:"))
        self.user_list = QListWidget()
        self.user_list.addItem(NO_USERS_PLACEHOLDER)
        users.addWidget(self.user_list)
        self.kick_button = QPushButton("Kick user")
        self.kick_button.clicked.connect(self.kick_selected)
        users.addWidget(self.kick_button)
        middle.addLayout(users, stretch=1)
        layout.addLayout(middle)

        # Admin broadcast input
        bottom = QHBoxLayout()
        self.admin_input = MessageInput()
        self.admin_input.submitted.connect(self.send_admin_message)
        bottom.addWidget(self.admin_input)
        self.send_button = QPushButton("Send")
        self.send_button.clicked.connect(self.admin_input.submit)
        bottom.addWidget(self.send_button)
        layout.addLayout(bottom)

        self.setCentralWidget(central)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def user_names(self):
        names = [self.user_list.item(i).text() for i in range(self.user_list.count())]
        return [name for name in names if name != NO_USERS_PLACEHOLDER]

    def update_controls(self):
        self.start_button.setEnabled(not self.running)
        self.port_input.setReadOnly(self.running)
        self.stop_button.setEnabled(self.running)
        self.send_button.setEnabled(self.running)
        self.admin_input.setEnabled(self.running)
        self.kick_button.setEnabled(self.running and bool(self.user_names()))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_server(self):
        try:
            port = int(self.port_input.text().strip())
            if not 0 < port < 65536:
                raise ValueError(port)
        except ValueError:
            QMessageBox.critical(self, "Error", "Invalid port number")
            return
        self.start_button.setEnabled(False)
        self.server_thread.start_server(port)

    def stop_server(self):
        self.stop_button.setEnabled(False)
        self.server_thread.stop_server()

    def send_admin_message(self, text: str):
        if self.running:
            self.server_thread.admin_broadcast(text)

    def kick_selected(self):
        item = self.user_list.currentItem()
        if item is None or item.text() == NO_USERS_PLACEHOLDER:
            QMessageBox.information(self, "Kick", "No user selected")
            return
        self.server_thread.kick(item.text())

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def append_line(self, line: str):
        self.transcript.append(line)

    def add_user(self, nickname: str):
        if not self.user_names():
            self.user_list.clear()
        self.user_list.addItem(nickname)
        self.update_controls()

    def remove_user(self, nickname: str):
        for item in self.user_list.findItems(nickname, Qt.MatchFlag.MatchExactly):
            self.user_list.takeItem(self.user_list.row(item))
        if self.user_list.count() == 0:
            self.user_list.addItem(NO_USERS_PLACEHOLDER)
        self.update_controls()

    def on_start_finished(self, success: bool, error: str):
        self.running = success
        if not success:
            QMessageBox.critical(self, "Error", error or "Server could not be started")
        self.update_controls()

    def on_stop_finished(self):
        self.running = False
        self.user_list.clear()
        self.user_list.addItem(NO_USERS_PLACEHOLDER)
        self.update_controls()

    def on_kick_finished(self, nickname: str, found: bool):
        if not found:
            QMessageBox.information(self, "Kick", f"User {nickname} not found")

    def closeEvent(self, event):
        """Stop the server before the window goes away."""
        self.server_thread.shutdown()
        super().closeEvent(event)


def main(config: Optional[ServerConfig] = None):
    """Run the admin window."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = AdminWindow(config)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
