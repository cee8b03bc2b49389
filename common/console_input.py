"""
Console input helper.

Standard input is read on a daemon thread so a pending read never keeps the
event loop (or interpreter shutdown) waiting. Lines arrive through an
asyncio.Queue; an empty string marks end of input.
"""

import asyncio
import sys
import threading
from typing import TextIO, Optional


def start_stdin_reader(loop: asyncio.AbstractEventLoop, stream: Optional[TextIO] = None) -> asyncio.Queue:
    """Start feeding lines from `stream` (default stdin) into a new queue."""
    queue: asyncio.Queue = asyncio.Queue()
    stream = stream or sys.stdin

    def read_lines():
        try:
            for line in stream:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, '')
        except RuntimeError:
            # Loop already closed
            return

    threading.Thread(target=read_lines, name='stdin-reader', daemon=True).start()
    return queue
