"""Protocol module for RCON packet encoding, decoding, and type definitions."""

from protocol.constants import (
    MAX_COMMAND_LENGTH,
    MIN_PACKET_SIZE,
    MAX_PACKET_SIZE,
    AUTH_FAILED_ID,
    AUTH_SUCCESS,
)
from protocol.commands import RequestType, ResponseType
from protocol.encoding import encode_packet, decode_packet
from protocol.messages import PacketHeader, Packet

__all__ = [
    'MAX_COMMAND_LENGTH',
    'MIN_PACKET_SIZE',
    'MAX_PACKET_SIZE',
    'AUTH_FAILED_ID',
    'AUTH_SUCCESS',
    'RequestType',
    'ResponseType',
    'encode_packet',
    'decode_packet',
    'PacketHeader',
    'Packet',
]
