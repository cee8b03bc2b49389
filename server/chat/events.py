"""
Server notifications.

Presentation layers subclass `ServerListener` and register it with the
server to render logs, the user list and the broadcast transcript.
"""

import logging
from typing import List

from server.utils.logger import logger


class ServerListener:
    """Base listener; every hook is a no-op."""

    def on_log(self, line: str):
        pass

    def on_user_joined(self, nickname: str):
        pass

    def on_user_left(self, nickname: str):
        pass

    def on_chat_line(self, line: str):
        pass


class EventHub:
    """Fans notifications out to registered listeners."""

    def __init__(self):
        self.listeners: List[ServerListener] = []

    def add_listener(self, listener: ServerListener):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_listener(self, listener: ServerListener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def log(self, line: str, level: int = logging.INFO):
        """Log a line and forward it to listeners."""
        logger.logger.log(level, line)
        self._notify('on_log', line)

    def user_joined(self, nickname: str):
        self._notify('on_user_joined', nickname)

    def user_left(self, nickname: str):
        self._notify('on_user_left', nickname)

    def chat_line(self, line: str):
        self._notify('on_chat_line', line)

    def _notify(self, hook: str, value: str):
        # Listener failures are logged, never raised
        for listener in list(self.listeners):
            try:
                getattr(listener, hook)(value)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed in {hook}: {e}")
