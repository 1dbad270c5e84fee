"""Packet type definitions.

Outgoing and incoming types live in separate enums: the auth response and
the exec command share the value 2 and can only be told apart by which side
of the exchange a frame travels on.
"""

from enum import IntEnum


class RequestType(IntEnum):
    """Types of frames sent by the client."""

    SERVERDATA_EXECCOMMAND = 2     # Run a console command, payload is the command
    SERVERDATA_AUTH = 3            # Authenticate, payload is the password


class ResponseType(IntEnum):
    """Types of frames sent by the server."""

    SERVERDATA_RESPONSE_VALUE = 0  # Command output
    SERVERDATA_AUTH_RESPONSE = 2   # Result of SERVERDATA_AUTH
