#!/usr/bin/env python3
"""
Client GUI - PyQt6 chat window

Features:
- Server address, port and nickname fields
- Enter/leave the chat room
- Chat transcript
- Multi-line input (Enter sends, Shift+Enter adds a line)
"""

import sys
import os
import asyncio
import threading
from typing import Optional

# PyQt6 imports
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QTextEdit, QLineEdit, QMessageBox
)
from PyQt6.QtCore import QThread, pyqtSignal

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
from common.constants import DEFAULT_HOST, DEFAULT_PORT
from common.protocol_definitions import is_valid_nickname
from common.ui_widgets import MessageInput
from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger


# ============================================================================
# NETWORK THREAD
# ============================================================================

class NetworkThread(QThread):
    """Thread for handling network communication."""

    line_received = pyqtSignal(str)
    connected = pyqtSignal()
    rejected = pyqtSignal(str)  # reason
    disconnected = pyqtSignal()

    def __init__(self, config: ClientConfig):
        super().__init__()
        self.config = config
        self.chat_client = ChatClient()
        self.chat_client.set_message_handler(self.line_received.emit)
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.loop_ready = threading.Event()

    def run(self):
        """Run network loop."""
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.loop_ready.set()
        try:
            self.loop.run_until_complete(self._connect_and_listen())
        finally:
            self.loop.close()

    async def _connect_and_listen(self):
        """Connect to server and listen for lines."""
        try:
            joined = await self.chat_client.connect(
                self.config.host,
                self.config.port,
                self.config.nickname,
                timeout=self.config.connect_timeout
            )
        except asyncio.TimeoutError:
            self.rejected.emit(f"Connection to {self.config.host}:{self.config.port} timed out")
            return
        except OSError as e:
            logger.log_error("connection", e)
            self.rejected.emit(f"Could not connect to the server: {e}")
            return

        if not joined:
            self.rejected.emit("Nickname is invalid or already in use")
            return

        self.connected.emit()
        await self.chat_client.listen()
        self.disconnected.emit()

    def send_chat(self, text: str):
        """Send chat text from the GUI thread."""
        if not self.loop_ready.wait(timeout=5.0):
            logger.warning("Network loop not ready, message dropped")
            return
        asyncio.run_coroutine_threadsafe(self.chat_client.send_chat(text), self.loop)

    def stop(self):
        """Close the connection; the thread ends once the listener returns."""
        if self.loop is not None and self.loop.is_running():
            asyncio.run_coroutine_threadsafe(self.chat_client.disconnect(), self.loop)


# ============================================================================
# MAIN WINDOW
# ============================================================================

class ClientMainWindow(QMainWindow):
    """Chat room client window."""

    def __init__(self, server_host: str = DEFAULT_HOST, server_port: int = DEFAULT_PORT,
                 nickname: str = ''):
        super().__init__()
        self.server_host = server_host
        self.server_port = server_port
        self.nickname = nickname
        self.network_thread: Optional[NetworkThread] = None
        self.joined = False
        self.setup_ui()
        self.update_controls()

    def setup_ui(self):
        self.setWindowTitle("Chat Relay Client")
        self.resize(600, 600)

        central = QWidget()
        layout = QVBoxLayout(central)

        grid = QGridLayout()
        grid.addWidget(QLabel("Server:"), 0, 0)
        self.host_input = QLineEdit(self.server_host)
        grid.addWidget(self.host_input, 0, 1)
        grid.addWidget(QLabel("Port:"), 0, 2)
        self.port_input = QLineEdit(str(self.server_port))
        grid.addWidget(self.port_input, 0, 3)
        grid.addWidget(QLabel("Nickname:"), 0, 4)
        self.nickname_input = QLineEdit(self.nickname)
        grid.addWidget(self.nickname_input, 0, 5)

        self.enter_button = QPushButton("Enter chat room")
        self.enter_button.clicked.connect(self.connect_to_server)
        grid.addWidget(self.enter_button, 1, 0, 1, 3)
        self.exit_button = QPushButton("Leave chat room")
        self.exit_button.clicked.connect(self.disconnect_from_server)
        grid.addWidget(self.exit_button, 1, 3, 1, 3)
        layout.addLayout(grid)

        self.chat_text = QTextEdit()
        self.chat_text.setReadOnly(True)
        layout.addWidget(self.chat_text)

        bottom = QHBoxLayout()
        self.message_input = MessageInput()
        self.message_input.submitted.connect(self.send_message)
        bottom.addWidget(self.message_input)
        self.send_button = QPushButton("Send")
        self.send_button.clicked.connect(self.message_input.submit)
        bottom.addWidget(self.send_button)
        layout.addLayout(bottom)

        self.setCentralWidget(central)

    def update_controls(self):
        connecting = self.network_thread is not None and not self.joined
        self.enter_button.setEnabled(not self.joined and not connecting)
        self.exit_button.setEnabled(self.joined)
        self.send_button.setEnabled(self.joined)
        for field in (self.host_input, self.port_input, self.nickname_input):
            field.setReadOnly(self.joined or connecting)

    def read_config(self) -> Optional[ClientConfig]:
        """Validate the form; shows an error and returns None when invalid."""
        nickname = self.nickname_input.text().strip()
        if not is_valid_nickname(nickname):
            QMessageBox.warning(self, "Error", "Invalid nickname")
            return None
        host = self.host_input.text().strip()
        if not host:
            QMessageBox.warning(self, "Error", "Server address required")
            return None
        try:
            port = int(self.port_input.text().strip())
        except ValueError:
            QMessageBox.warning(self, "Error", "Invalid port number")
            return None
        config = ClientConfig(host, port, nickname)
        if not config.is_valid_port():
            QMessageBox.warning(self, "Error", "Port must be between 1024 and 65535")
            return None
        return config

    def connect_to_server(self):
        config = self.read_config()
        if config is None:
            return
        self.network_thread = NetworkThread(config)
        self.network_thread.line_received.connect(self.chat_text.append)
        self.network_thread.connected.connect(self.on_connected)
        self.network_thread.rejected.connect(self.on_rejected)
        self.network_thread.disconnected.connect(self.on_disconnected)
        self.network_thread.start()
        self.update_controls()

    def disconnect_from_server(self):
        if self.network_thread is not None:
            self.joined = False
            self.network_thread.stop()

    def send_message(self, text: str):
        if not self.joined or self.network_thread is None:
            QMessageBox.warning(self, "Error", "Not connected to the server")
            return
        self.network_thread.send_chat(text)

    def on_connected(self):
        self.joined = True
        self.update_controls()
        self.message_input.setFocus()

    def on_rejected(self, reason: str):
        self._release_thread()
        QMessageBox.critical(self, "Error", reason)

    def on_disconnected(self):
        was_joined = self.joined
        self._release_thread()
        self.chat_text.clear()
        if was_joined:
            QMessageBox.information(self, "Disconnected", "Disconnected from the server")

    def _release_thread(self):
        if self.network_thread is not None:
            self.network_thread.wait()
            self.network_thread = None
        self.joined = False
        self.update_controls()

    def closeEvent(self, event):
        """Leave the chat room before closing."""
        if self.network_thread is not None:
            self.joined = False
            self.network_thread.stop()
            self.network_thread.wait(3000)
        super().closeEvent(event)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """Main entry point."""
    app = QApplication(sys.argv)

    # Get server address from environment or use default
    server_host = os.environ.get('SERVER_IP', DEFAULT_HOST)
    server_port = int(os.environ.get('SERVER_PORT', str(DEFAULT_PORT)))

    window = ClientMainWindow(server_host, server_port)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
