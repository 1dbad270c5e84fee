"""RCON client and its TCP connection."""

from client.connection import Connection
from client.rcon_client import ExecuteState, RconClient

__all__ = [
    'Connection',
    'ExecuteState',
    'RconClient',
]
