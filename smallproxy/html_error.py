"""HTML error pages with variable substitution."""

from __future__ import annotations

import logging
import re
import socket
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Iterator, Mapping

from .config import Config
from .conns import Connection
from .htab import HashTable

logger = logging.getLogger(__name__)

PACKAGE = "smallproxy"
VERSION = "1.0.0"
WEBSITE = "https://smallproxy.invalid/"

_ERRVAR_BUCKETCOUNT = 16
_LINE_CHUNK = 4096 - 1
_VARIABLE = re.compile(r"\{([a-z]{1,32})\}")

_FALLBACK_PAGE = (
    '<?xml version="1.0" encoding="UTF-8" ?>\n'
    "<html>\n"
    "<head><title>{number} {cause}</title></head>\n"
    "<body>\n"
    "<h1>{cause}</h1>\n"
    "<p>{detail}</p>\n"
    "<hr />\n"
    "<p><em>Generated by {package} version {version}.</em></p>\n"
    "</body>\n"
    "</html>\n"
)

_PROXY_AUTH = f'Proxy-Authenticate: Basic realm="{PACKAGE}"\r\n'
_WWW_AUTH = f'WWW-Authenticate: Basic realm="{PACKAGE}"\r\n'

Variables = HashTable | Mapping[str, str] | None


def _http_date(now: datetime | float | None) -> str:
    if now is None:
        moment = datetime.now(timezone.utc)
    elif isinstance(now, datetime):
        moment = now.replace(tzinfo=timezone.utc) if now.tzinfo is None \
            else now.astimezone(timezone.utc)
    else:
        moment = datetime.fromtimestamp(now, timezone.utc)
    return format_datetime(moment, usegmt=True)


def add_error_variable(conn: Connection, key: str, value: str) -> None:
    """Add ``key`` -> ``value`` for substitution; an existing key raises KeyError."""
    if conn.error_variables is None:
        conn.error_variables = HashTable(_ERRVAR_BUCKETCOUNT)
    if not conn.error_variables.insert(key, value):
        raise KeyError(f"error variable {key!r} already set")


def add_standard_vars(conn: Connection, now: datetime | float | None = None) -> None:
    """Set the variables every error page can use."""
    add_error_variable(conn, "errno", str(conn.error_number))
    for key, value in (("cause", conn.error_string),
                       ("request", conn.request_line),
                       ("clientip", conn.client_ip_addr)):
        if value is not None:
            add_error_variable(conn, key, value)

    for key, value in (("date", _http_date(now)),
                       ("website", WEBSITE),
                       ("version", VERSION),
                       ("package", PACKAGE)):
        with suppress(KeyError):
            add_error_variable(conn, key, value)


def indicate_http_error(conn: Connection, number: int, message: str, **kwargs: str) -> None:
    """Record an error on ``conn`` with extra page variables given as keywords."""
    for key, value in kwargs.items():
        add_error_variable(conn, key, value)
    conn.error_number = number
    conn.error_string = message
    add_standard_vars(conn)


def _lookup(variables: Variables, name: str) -> str | None:
    if variables is None:
        return None
    if isinstance(variables, HashTable):
        return variables.find(name)
    return variables.get(name)


def substitute_variables(line: str, variables: Variables) -> str:
    """Replace each ``{name}`` known in ``variables`` by its value."""
    def replace(found: re.Match[str]) -> str:
        value = _lookup(variables, found.group(1))
        return found.group(0) if value is None else value

    return _VARIABLE.sub(replace, line)


def _chunks(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        for start in range(0, len(line), _LINE_CHUNK):
            yield line[start:start + _LINE_CHUNK]


def render_html_file(infile: Iterable[str], variables: Variables) -> str:
    """Return the text of ``infile`` with its variables substituted."""
    return "".join(substitute_variables(chunk, variables) for chunk in _chunks(infile))


def http_headers(conn: Connection, code: int, message: str | None, extra: str) -> str:
    """Return the header block that precedes an error page."""
    minor = conn.protocol_minor if conn.protocol_major == 1 else 0
    return (f"HTTP/1.{minor} {code} {message or ''}\r\n"
            f"Server: {PACKAGE}/{VERSION}\r\n"
            "Content-Type: text/html\r\n"
            f"{extra}"
            "Connection: close\r\n"
            "\r\n")


def render_http_error_message(conn: Connection, config: Config) -> str:
    """Return the full response, headers and page, for the error on ``conn``."""
    if conn.error_number == 407:
        extra = _PROXY_AUTH
    elif conn.error_number == 401:
        extra = _WWW_AUTH
    else:
        extra = ""
    headers = http_headers(conn, conn.error_number, conn.error_string, extra)

    error_file = config.errorpage_for(conn.error_number)
    if error_file is not None:
        try:
            with open(error_file, encoding="utf-8", errors="replace", newline="") as infile:
                return headers + render_html_file(infile, conn.error_variables)
        except OSError as exc:
            logger.error("Error opening error file '%s' (%s)",
                         error_file, exc.strerror or exc)

    detail = _lookup(conn.error_variables, "detail")
    page = _FALLBACK_PAGE.format(
        number=conn.error_number,
        cause=conn.error_string or "",
        detail=detail or "",
        package=PACKAGE,
        version=VERSION,
    )
    return headers + page


def send_http_error_message(conn: Connection, config: Config,
                            sock: socket.socket | None = None) -> None:
    """Send the error response to ``sock``, or to the client socket of ``conn``."""
    target = sock if sock is not None else conn.client_sock
    if target is None:
        raise ValueError("no socket to send the error message to")
    target.sendall(render_http_error_message(conn, config).encode("utf-8"))