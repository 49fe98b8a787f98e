"""Per-connection byte queue: lines are appended at the tail and sent from the head."""

from __future__ import annotations

import errno
import logging
import socket
from collections import deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_BUFFER_SIZE = 1024 * 96
READ_BUFFER_SIZE = 1024 * 2

_SOFT_SEND_ERRORS = (errno.ENOBUFS, errno.ENOMEM)


@dataclass
class _Line:
    data: bytes
    pos: int = 0

    @property
    def pending(self) -> memoryview:
        return memoryview(self.data)[self.pos:]


class LineBuffer:
    """Queue of byte chunks with a soft upper bound on its total size.

    ``len()`` gives the number of bytes held, counting a partly sent
    chunk in full until its last byte has gone out.
    """

    def __init__(self) -> None:
        self._lines: deque[_Line] = deque()
        self._size = 0

    def add(self, data: bytes) -> None:
        """Append a copy of ``data``, which must not be empty."""
        chunk = bytes(data)
        if not chunk:
            raise ValueError("cannot add an empty chunk to the buffer")
        self._lines.append(_Line(chunk))
        self._size += len(chunk)

    def __len__(self) -> int:
        return self._size

    def read_from(self, sock: socket.socket) -> int:
        """Read once from ``sock`` into the buffer and return the byte count.

        Returns 0 when the buffer is full or the read would block or was
        interrupted.  Raises ConnectionError when the peer has closed the
        connection, and re-raises other socket errors.
        """
        if self._size >= MAX_BUFFER_SIZE:
            return 0
        try:
            data = sock.recv(READ_BUFFER_SIZE)
        except (BlockingIOError, InterruptedError):
            return 0
        except OSError as exc:
            logger.error("read_buffer: read() failed on fd %d: %s",
                         sock.fileno(), exc.strerror or exc)
            raise
        if not data:
            raise ConnectionError("connection closed by peer")
        self.add(data)
        return len(data)

    def write_to(self, sock: socket.socket) -> int:
        """Send from the head chunk to ``sock`` and return the bytes sent.

        Returns 0 when the buffer is empty, the send would block, was
        interrupted, or the system is short of buffer space.  Other socket
        errors are re-raised.
        """
        if not self._lines:
            return 0
        line = self._lines[0]
        try:
            sent = sock.send(line.pending)
        except (BlockingIOError, InterruptedError):
            return 0
        except OSError as exc:
            if exc.errno in _SOFT_SEND_ERRORS:
                logger.error(
                    'writebuff: write() error [NOBUFS/NOMEM] "%s" on file descriptor %d',
                    exc.strerror, sock.fileno())
                return 0
            logger.error('writebuff: write() error "%s" on file descriptor %d',
                         exc.strerror or exc, sock.fileno())
            raise
        line.pos += sent
        if line.pos == len(line.data):
            self._lines.popleft()
            self._size -= len(line.data)
        return sent