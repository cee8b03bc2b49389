"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, CHAT_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        self.logs_dir = Path(logs_dir)

        # Set up main logger
        self.logger = logging.getLogger('chat_relay_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

        # Transcript file, created on first write
        self.chat_log_path = self.logs_dir / CHAT_LOG_FILE
        self.transcript_enabled = True

    def set_level(self, log_level: int):
        """Change the level of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

    def set_logs_dir(self, logs_dir: str):
        """Redirect the chat transcript to another directory."""
        self.logs_dir = Path(logs_dir)
        self.chat_log_path = self.logs_dir / CHAT_LOG_FILE

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr: tuple):
        """Log client connection."""
        self.info(f"New connection from {addr}")

    def log_rejected(self, nickname: str, addr: tuple, reason: str):
        """Log rejected handshake."""
        self.info(f"Rejected nickname {nickname!r} from {addr}: {reason}")

    def log_chat(self, line: str):
        """Log a broadcast line and append it to the transcript."""
        self.info(f"Broadcast: {line}")
        if self.transcript_enabled:
            self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {line}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
