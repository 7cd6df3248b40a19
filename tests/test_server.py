import socket
import time

import pytest

from sockchat.server import ChatServer, main, validate_port


def _wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return
        time.sleep(0.02)


def _connect(server):
    host, port = server.address[:2]
    sock = socket.create_connection((host, port), timeout=5)
    return sock


@pytest.fixture
def server():
    srv = ChatServer(port=0, host="127.0.0.1").start()
    yield srv
    srv.close()


def test_client_is_counted(server):
    client = _connect(server)
    try:
        _wait_for(lambda: server.client_count() == 1)
        assert server.client_count() == 1
    finally:
        client.close()


def test_message_is_relayed_to_all_clients(server):
    first = _connect(server)
    second = _connect(server)
    try:
        _wait_for(lambda: server.client_count() == 2)
        assert server.client_count() == 2
        first.sendall(b"hello")
        assert first.recv(255) == b"hello"
        assert second.recv(255) == b"hello"
    finally:
        first.close()
        second.close()


def test_quit_message_removes_client(server):
    client = _connect(server)
    try:
        _wait_for(lambda: server.client_count() == 1)
        assert server.client_count() == 1
        client.sendall(b"\xff")
        _wait_for(lambda: server.client_count() == 0)
        assert server.client_count() == 0
    finally:
        client.close()


def test_disconnect_removes_client(server):
    client = _connect(server)
    _wait_for(lambda: server.client_count() == 1)
    assert server.client_count() == 1
    client.close()
    _wait_for(lambda: server.client_count() == 0)
    assert server.client_count() == 0


def test_broadcast_reports_delivery_count(server):
    client = _connect(server)
    try:
        _wait_for(lambda: server.client_count() == 1)
        assert server.broadcast("news") == 1
        assert client.recv(255) == b"news"
    finally:
        client.close()


def test_close_sends_quit_to_clients():
    srv = ChatServer(port=0, host="127.0.0.1").start()
    client = _connect(srv)
    try:
        _wait_for(lambda: srv.client_count() == 1)
        assert srv.client_count() == 1
        srv.close()
        assert client.recv(255)[:1] == b"\xff"
    finally:
        client.close()


def test_listening_stops_at_connection_limit():
    with ChatServer(port=0, host="127.0.0.1", max_connections=1).start() as srv:
        first = _connect(srv)
        try:
            _wait_for(lambda: srv.client_count() == 1)
            assert srv.client_count() == 1
            try:
                second = socket.create_connection(srv.address[:2], timeout=1)
            except OSError:
                second = None
            time.sleep(0.4)
            assert srv.client_count() == 1
            if second is not None:
                second.close()
        finally:
            first.close()


def test_start_twice_raises(server):
    with pytest.raises(RuntimeError):
        server.start()


@pytest.mark.parametrize("value, expected", [("8080", 8080), ("1024", 1024), ("49151", 49151)])
def test_validate_port_accepts_range(value, expected):
    assert validate_port(value) == expected


@pytest.mark.parametrize("value", ["1023", "49152", "abc", "0"])
def test_validate_port_rejects(value):
    with pytest.raises(ValueError, match="Invalid Port"):
        validate_port(value)


def test_main_rejects_invalid_port():
    assert main(["80"]) == 1


def test_main_rejects_extra_arguments():
    assert main(["8080", "9"]) == 1