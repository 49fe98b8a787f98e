"""State kept for one client connection while it is handled."""

from __future__ import annotations

import logging
import socket
from types import TracebackType

from .buffer import LineBuffer
from .htab import HashTable

logger = logging.getLogger(__name__)


class Connection:
    """A client connection, its buffers and what is known about its request.

    Content lengths start out as -1, meaning none has been seen.
    """

    def __init__(self, client_sock: socket.socket | None = None) -> None:
        self.client_sock = client_sock
        self.server_sock: socket.socket | None = None
        self.cbuffer: LineBuffer | None = None
        self.sbuffer: LineBuffer | None = None
        self.request_line: str | None = None
        self.connect_method = False
        self.show_stats = False
        self.error_variables: HashTable | None = None
        self.error_number = -1
        self.error_string: str | None = None
        self.content_length_server = -1
        self.content_length_client = -1
        self.server_ip_addr: str | None = None
        self.client_ip_addr: str | None = None
        self.protocol_major = 0
        self.protocol_minor = 0
        self.reversepath: str | None = None
        self.upstream_proxy: object | None = None

    def init_contents(self, client_ip: str, server_ip: str | None = None) -> None:
        """Set up the buffers and record the client and server addresses."""
        if self.client_sock is None:
            raise ValueError("connection has no client socket")
        self.cbuffer = LineBuffer()
        self.sbuffer = LineBuffer()
        self.server_ip_addr = server_ip
        self.client_ip_addr = client_ip

    @staticmethod
    def _close_sock(sock: socket.socket | None, role: str) -> None:
        if sock is None:
            return
        try:
            fd = sock.fileno()
            sock.close()
        except OSError as exc:
            logger.info("%s close message: %s", role, exc.strerror or exc)
            return
        logger.debug("%s (%d) closed", role, fd)

    def close(self) -> None:
        """Close both sockets and release everything the connection holds."""
        self._close_sock(self.client_sock, "Client")
        self.client_sock = None
        self._close_sock(self.server_sock, "Server")
        self.server_sock = None
        self.cbuffer = None
        self.sbuffer = None
        self.request_line = None
        self.error_variables = None
        self.error_string = None
        self.server_ip_addr = None
        self.client_ip_addr = None
        self.reversepath = None

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc: BaseException | None,
                 tb: TracebackType | None) -> None:
        self.close()