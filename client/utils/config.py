"""
Client configuration module.

This module handles client-side configuration settings.
"""

from typing import Optional

from common.constants import DEFAULT_HOST, DEFAULT_PORT, CONNECT_TIMEOUT, MIN_CLIENT_PORT, MAX_CLIENT_PORT


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, nickname: Optional[str] = None):
        self.host = host
        self.port = port
        self.nickname = nickname

        # Connection settings
        self.connect_timeout = CONNECT_TIMEOUT

    def is_valid_port(self) -> bool:
        """Ports below 1024 are reserved for system services."""
        return MIN_CLIENT_PORT <= self.port <= MAX_CLIENT_PORT

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'nickname': self.nickname
        }
