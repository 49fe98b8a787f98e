import socket

import pytest

from smallproxy.conns import Connection


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_new_connection_has_no_content_length():
    conn = Connection()
    assert conn.content_length_server == -1
    assert conn.content_length_client == -1
    assert conn.error_number == -1
    assert conn.server_sock is None


def test_init_contents_sets_addresses_and_empty_buffers(pair):
    conn = Connection(pair[0])
    conn.init_contents("192.0.2.7", "198.51.100.1")
    assert conn.client_ip_addr == "192.0.2.7"
    assert conn.server_ip_addr == "198.51.100.1"
    assert len(conn.cbuffer) == 0
    assert len(conn.sbuffer) == 0
    assert conn.cbuffer is not conn.sbuffer


def test_init_contents_without_server_ip(pair):
    conn = Connection(pair[0])
    conn.init_contents("192.0.2.7")
    assert conn.server_ip_addr is None
    assert conn.client_ip_addr == "192.0.2.7"


def test_init_contents_requires_client_socket():
    with pytest.raises(ValueError):
        Connection().init_contents("192.0.2.7")


def test_close_closes_client_socket(pair):
    a, b = pair
    conn = Connection(a)
    conn.init_contents("192.0.2.7")
    conn.request_line = "GET / HTTP/1.0"
    conn.close()
    assert a.fileno() == -1
    assert conn.client_sock is None
    assert conn.cbuffer is None
    assert conn.request_line is None
    assert conn.client_ip_addr is None


def test_close_closes_server_socket(pair):
    a, b = pair
    conn = Connection()
    conn.server_sock = b
    conn.close()
    assert b.fileno() == -1
    assert conn.server_sock is None


def test_close_twice_is_harmless(pair):
    conn = Connection(pair[0])
    conn.close()
    conn.close()
    assert conn.client_sock is None


def test_context_manager_closes(pair):
    a, _ = pair
    with Connection(a) as conn:
        conn.init_contents("192.0.2.7")
        assert conn.client_sock is a
    assert a.fileno() == -1
    assert conn.client_sock is None