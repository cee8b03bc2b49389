"""
Server configuration module.

This module handles server-side configuration settings.
"""

from typing import Optional

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, DISPATCH_INTERVAL, SEND_TIMEOUT,
    IDLE_TIMEOUT, MAX_QUEUE_SIZE, MAX_LINE_LENGTH, LOG_DIR, OUTBOX_SIZE
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 idle_timeout: Optional[float] = IDLE_TIMEOUT, logs_dir: str = LOG_DIR):
        self.host = host
        self.port = port

        # Logging configuration
        self.logs_dir = logs_dir

        # Chat settings
        self.max_line_length = MAX_LINE_LENGTH

        # Dispatcher settings
        self.dispatch_interval = DISPATCH_INTERVAL
        self.max_queue_size = MAX_QUEUE_SIZE  # 0 means unbounded

        # Connection settings
        self.send_timeout = SEND_TIMEOUT
        self.outbox_size = OUTBOX_SIZE
        self.idle_timeout = idle_timeout  # None disables the read timeout

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_dispatch_settings(self):
        """Get dispatcher settings."""
        return {
            'interval': self.dispatch_interval,
            'max_queue_size': self.max_queue_size
        }

    def get_session_settings(self):
        """Get per-connection settings."""
        return {
            'send_timeout': self.send_timeout,
            'idle_timeout': self.idle_timeout,
            'outbox_size': self.outbox_size
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir
        }
