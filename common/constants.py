"""
Shared constants for the chat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 12345
MIN_CLIENT_PORT = 1024
MAX_CLIENT_PORT = 65535

# Encoding
ENCODING = 'utf-8'
MAX_LINE_LENGTH = 64 * 1024  # StreamReader limit per line

# Dispatcher / Sessions
DISPATCH_INTERVAL = 0.1  # seconds between reaping passes
SEND_TIMEOUT = 5.0  # seconds a single peer may take to drain one line
OUTBOX_SIZE = 1000  # lines queued for one peer before it is dropped
IDLE_TIMEOUT = None  # no read timeout unless configured
MAX_QUEUE_SIZE = 10000  # pending broadcast events before producers wait
CONNECT_TIMEOUT = 10.0

# Administrator
ADMIN_NAME = 'Admin'

# Logging
LOG_DIR = 'logs'
CHAT_LOG_FILE = 'chat_history.log'


# Handshake replies
class Replies:
    OK = 'OK'
    INVALID = 'INVALID'


# Server-originated notices (payload after the "<sender>：" prefix)
class Notices:
    SEPARATOR = '：'  # full-width colon
    JOINED = '【entered the chat room】'
    LEFT = '【left the chat room】'
    KICKED = '【removed for violation】'
    KICKED_PRIVATE = '【you have been removed from the chat room】'
    SHUTDOWN = '【server is shutting down, goodbye】'


class EventKinds:
    CHAT = 'chat'
    JOINED = 'joined'
    LEFT = 'left'
