"""
Client session module.

A Session owns one accepted, registered connection: it reads chat lines into
the inbound queue and writes broadcasts through its own outbox, so a peer
that stops reading only ever delays itself.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from common.constants import OUTBOX_SIZE, SEND_TIMEOUT
from common.protocol_definitions import ChatEvent, create_chat_event, decode_line, encode_line
from server.utils.logger import logger


class Session:
    """Bidirectional line transport for one client."""

    def __init__(self, nickname: str, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 publish: Callable[[ChatEvent], Awaitable[None]], send_timeout: float = SEND_TIMEOUT,
                 idle_timeout: Optional[float] = None, outbox_size: int = OUTBOX_SIZE):
        self.nickname = nickname
        self.reader = reader
        self.writer = writer
        self.publish = publish  # usually Dispatcher.put
        self.send_timeout = send_timeout
        self.idle_timeout = idle_timeout
        self.addr = writer.get_extra_info('peername')

        # None in the outbox means "flush, then close"
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self.writer_task: Optional[asyncio.Task] = None

        self.live = True
        self._closed = False
        self._aborted = False
        self.finished = False  # set once read_loop has exited

    async def read_loop(self):
        """
        Queue every received line as a chat event until the peer goes away.

        EOF, I/O errors, over-long lines and idle timeouts all end the loop the
        same way. The registry is left alone; the dispatcher reaps us later.
        """
        try:
            while self.live:
                if self.idle_timeout is not None:
                    data = await asyncio.wait_for(self.reader.readline(), self.idle_timeout)
                else:
                    data = await self.reader.readline()
                if not data:
                    break
                await self.publish(create_chat_event(self.nickname, decode_line(data)))
        except asyncio.TimeoutError:
            logger.info(f"Session '{self.nickname}' idle for {self.idle_timeout}s, closing")
        except (OSError, ValueError, asyncio.IncompleteReadError) as e:
            # ValueError: line longer than the reader limit
            logger.debug(f"Session '{self.nickname}' read ended: {e}")
        finally:
            self.finished = True
            self.close()

    async def send(self, line: str) -> bool:
        """
        Queue one line for this peer without waiting for it to be written.

        Returns False when the session is closed or its outbox is full; a
        full outbox means the peer stopped reading, so it is dropped.
        """
        if not self.live:
            return False
        if self.writer_task is None:
            self.writer_task = asyncio.create_task(self._write_loop())
        try:
            self.outbox.put_nowait(line)
            return True
        except asyncio.QueueFull:
            logger.warning(f"Outbox of '{self.nickname}' is full, dropping the connection")
            self.close(abort=True)
            return False

    async def _write_loop(self):
        """Write queued lines in order; a stalled or broken peer is aborted."""
        try:
            while True:
                line = await self.outbox.get()
                if line is None:
                    break
                self.writer.write(encode_line(line))
                await asyncio.wait_for(self.writer.drain(), self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Send to '{self.nickname}' timed out after {self.send_timeout}s")
            self.close(abort=True)
            return
        except (OSError, RuntimeError) as e:
            logger.debug(f"Send to '{self.nickname}' failed: {e}")
            self.close(abort=True)
            return
        self._close_writer()

    def close(self, abort: bool = False):
        """
        Mark not-live and release the connection. Safe to call repeatedly.

        A plain close flushes lines already queued, then closes. `abort`
        drops unsent data at once, also after a plain close is under way.
        """
        self.live = False
        if abort:
            if self._aborted:
                return
            self._closed = self._aborted = True
            if self.writer_task is not None and self.writer_task is not asyncio.current_task():
                self.writer_task.cancel()
            try:
                self.writer.transport.abort()
            except (OSError, RuntimeError) as e:
                logger.debug(f"Aborting '{self.nickname}' failed: {e}")
            return

        if self._closed:
            return
        self._closed = True
        if self.writer_task is None or self.writer_task.done():
            self._close_writer()
            return
        try:
            self.outbox.put_nowait(None)
        except asyncio.QueueFull:
            self.close(abort=True)

    def _close_writer(self):
        try:
            self.writer.close()
        except (OSError, RuntimeError) as e:
            logger.debug(f"Closing '{self.nickname}' failed: {e}")

    async def wait_closed(self):
        """Wait until queued lines are flushed and the connection is closed."""
        if self.writer_task is not None:
            await asyncio.wait({self.writer_task})
        try:
            await self.writer.wait_closed()
        except (OSError, RuntimeError):
            pass

    def __repr__(self) -> str:
        state = 'live' if self.live else 'closed'
        return f"<Session {self.nickname!r} {state}>"
