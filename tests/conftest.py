import socket

import pytest

from tests.fake_server import FakeRconServer


@pytest.fixture
def rcon_server():
    """Factory starting fake RCON servers that are stopped after the test."""
    servers = []

    def factory(handler):
        server = FakeRconServer(handler).start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.stop()


@pytest.fixture
def closed_address():
    """Address of a local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"127.0.0.1:{port}"
