import socket
from datetime import datetime, timezone

import pytest

from smallproxy.http_message import HttpMessage, HttpMessageError

FIXED = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def _without_date(data):
    return b"\r\n".join(
        line for line in data.split(b"\r\n") if not line.startswith(b"Date: ")
    )


def test_render_worked_example():
    msg = HttpMessage(200, "OK")
    msg.add_headers(["Content-Type: text/html"])
    msg.set_body(b"<p>hi</p>")
    assert msg.render(FIXED) == (
        b"HTTP/1.0 200 OK\r\n"
        b"Content-Type: text/html\r\n"
        b"Date: Mon, 01 Jan 2024 00:00:00 GMT\r\n"
        b"Content-length: 9\r\n"
        b"\r\n"
        b"<p>hi</p>"
    )


def test_render_without_body_ends_with_blank_line():
    out = HttpMessage(204, "No Content").render(FIXED)
    assert out.startswith(b"HTTP/1.0 204 No Content\r\n")
    assert out.endswith(b"Content-length: 0\r\n\r\n")


def test_timestamp_and_datetime_render_the_same():
    msg = HttpMessage(200, "OK")
    assert msg.render(FIXED.timestamp()) == msg.render(FIXED)


@pytest.mark.parametrize("code", [0, -5, 1000])
def test_invalid_code(code):
    with pytest.raises(HttpMessageError):
        HttpMessage(code, "Bad")


@pytest.mark.parametrize("reason", ["", None])
def test_invalid_reason(reason):
    with pytest.raises(HttpMessageError):
        HttpMessage(200, reason)


def test_set_response_replaces_status():
    msg = HttpMessage(200, "OK")
    msg.set_response(404, "Not Found")
    assert msg.render(FIXED).startswith(b"HTTP/1.0 404 Not Found\r\n")


def test_set_response_invalid_keeps_previous():
    msg = HttpMessage(200, "OK")
    with pytest.raises(HttpMessageError):
        msg.set_response(1000, "Nope")
    assert (msg.code, msg.reason) == (200, "OK")


@pytest.mark.parametrize("body", [b"", "", None])
def test_empty_body_rejected(body):
    with pytest.raises(HttpMessageError):
        HttpMessage(200, "OK").set_body(body)


def test_str_body_is_encoded():
    msg = HttpMessage(200, "OK")
    msg.set_body("abc")
    assert msg.render(FIXED).endswith(b"Content-length: 3\r\n\r\nabc")


def test_none_headers_rejected():
    with pytest.raises(HttpMessageError):
        HttpMessage(200, "OK").add_headers(None)


def test_many_headers_kept_in_order():
    msg = HttpMessage(200, "OK")
    names = [f"X-Header-{n}: {n}" for n in range(200)]
    msg.add_headers(names[:100])
    msg.add_headers(names[100:])
    lines = msg.render(FIXED).decode().split("\r\n")
    assert lines[1:201] == names


def test_send_over_socket_matches_render():
    a, b = socket.socketpair()
    msg = HttpMessage(403, "Forbidden")
    msg.set_body(b"denied")
    try:
        msg.send(a)
        a.close()
        received = b""
        while chunk := b.recv(4096):
            received += chunk
    finally:
        b.close()
    assert b"\r\nDate: " in received
    assert _without_date(received) == _without_date(msg.render(FIXED))