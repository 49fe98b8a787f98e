"""HTTP response messages built up piece by piece and sent in one go."""

from __future__ import annotations

import socket
from datetime import datetime, timezone
from typing import Iterable

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class HttpMessageError(ValueError):
    """Raised for an invalid response code, reason, body or header list."""


def _http_date(now: datetime | float | None) -> str:
    if now is None:
        moment = datetime.now(timezone.utc)
    elif isinstance(now, datetime):
        moment = now.replace(tzinfo=timezone.utc) if now.tzinfo is None \
            else now.astimezone(timezone.utc)
    else:
        moment = datetime.fromtimestamp(now, timezone.utc)
    return (f"{_DAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
            f"{moment.year} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} GMT")


class HttpMessage:
    """An HTTP/1.0 response: status line, headers and an optional body.

    A Date and a Content-length header are added when it is rendered.
    """

    def __init__(self, code: int, reason: str) -> None:
        self.code = 0
        self.reason = ""
        self.headers: list[str] = []
        self.body = b""
        self.set_response(code, reason)

    def set_response(self, code: int, reason: str) -> None:
        """Set the status code (1-999) and its non-empty reason phrase."""
        if not 1 <= code <= 999:
            raise HttpMessageError(f"response code {code} out of range")
        if not reason:
            raise HttpMessageError("response string must not be empty")
        self.code = code
        self.reason = reason

    def set_body(self, body: bytes | str) -> None:
        """Set the non-empty message body."""
        if body is None or len(body) == 0:
            raise HttpMessageError("body must not be empty")
        self.body = body.encode("utf-8") if isinstance(body, str) else bytes(body)

    def add_headers(self, headers: Iterable[str]) -> None:
        """Append header lines, given without line terminators."""
        if headers is None:
            raise HttpMessageError("headers must not be None")
        self.headers.extend(headers)

    def render(self, now: datetime | float | None = None) -> bytes:
        """Return the whole message as it goes on the wire."""
        lines = [f"HTTP/1.0 {self.code} {self.reason}\r\n"]
        lines.extend(f"{header}\r\n" for header in self.headers)
        lines.append(f"Date: {_http_date(now)}\r\n")
        lines.append(f"Content-length: {len(self.body)}\r\n")
        lines.append("\r\n")
        return "".join(lines).encode("utf-8") + self.body

    def send(self, sock: socket.socket) -> None:
        """Write the message, stamped with the current time, to ``sock``."""
        sock.sendall(self.render())