"""
Protocol definitions for the chat relay.

This module defines the line formats exchanged between client and server and
the event structure carried through the server's inbound queue.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.constants import ADMIN_NAME, ENCODING, EventKinds, Notices


@dataclass(frozen=True)
class ChatEvent:
    """One pending broadcast: who it is from and what to say."""
    kind: str
    nickname: str
    text: str = ''

    def payload(self) -> str:
        """Render the event as a payload line (without timestamp)."""
        if self.kind == EventKinds.JOINED:
            return format_joined_notice(self.nickname)
        if self.kind == EventKinds.LEFT:
            return format_left_notice(self.nickname)
        return format_chat_payload(self.nickname, self.text)


def create_chat_event(nickname: str, text: str) -> ChatEvent:
    """Create a chat event for a line a client sent."""
    return ChatEvent(EventKinds.CHAT, nickname, text)


def create_joined_event(nickname: str) -> ChatEvent:
    """Create a synthetic join event."""
    return ChatEvent(EventKinds.JOINED, nickname)


def create_left_event(nickname: str) -> ChatEvent:
    """Create a synthetic leave event."""
    return ChatEvent(EventKinds.LEFT, nickname)


def format_timestamp(now: Optional[datetime] = None) -> str:
    """Return the `[HH:MM:SS]` prefix for a broadcast line."""
    now = now or datetime.now()
    return f"[{now.strftime('%H:%M:%S')}]"


def format_line(payload: str, now: Optional[datetime] = None) -> str:
    """Prefix a payload with the current time."""
    return format_timestamp(now) + payload


def format_chat_payload(nickname: str, text: str) -> str:
    return f"{nickname}{Notices.SEPARATOR}{text}"


def format_admin_payload(text: str) -> str:
    return format_chat_payload(ADMIN_NAME, text)


def format_joined_notice(nickname: str) -> str:
    return format_chat_payload(nickname, Notices.JOINED)


def format_left_notice(nickname: str) -> str:
    return format_chat_payload(nickname, Notices.LEFT)


def format_kicked_notice(nickname: str) -> str:
    return format_chat_payload(nickname, Notices.KICKED)


def format_kicked_private_notice() -> str:
    return format_admin_payload(Notices.KICKED_PRIVATE)


def format_shutdown_notice() -> str:
    return format_admin_payload(Notices.SHUTDOWN)


def is_reserved_nickname(nickname: str) -> bool:
    """Check whether a nickname is the administrator's (case-insensitive)."""
    return nickname.strip().casefold() == ADMIN_NAME.casefold()


def is_valid_nickname(nickname: Optional[str]) -> bool:
    """
    Check the registry-independent nickname rules.

    A nickname must be non-blank and must not be the administrator's name.
    Uniqueness is enforced separately by the registry.
    """
    if nickname is None or not nickname.strip():
        return False
    return not is_reserved_nickname(nickname)


def split_admin_text(text: str) -> List[str]:
    """Split admin input into lines, dropping blank ones."""
    return [line for line in text.splitlines() if line.strip()]


def encode_line(line: str) -> bytes:
    """Encode one protocol line for the wire."""
    return line.encode(ENCODING) + b'\n'


def decode_line(data: bytes) -> str:
    """Decode one received line, stripping the line terminator."""
    return data.decode(ENCODING, errors='replace').rstrip('\r\n')
