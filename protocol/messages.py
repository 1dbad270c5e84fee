"""Packet structure definitions."""

from dataclasses import dataclass, field
import struct

from protocol.constants import (
    BODY_ENCODING,
    HEADER_FORMAT,
    HEADER_SIZE,
    MIN_PACKET_SIZE,
)
from utils.exceptions import CrapBytesError, InvalidPacketSizeError

TERMINATOR = b'\x00'


@dataclass
class PacketHeader:
    """Header of an RCON packet containing the request id and packet type."""

    request_id: int
    packet_type: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'PacketHeader':
        """
        Parse packet header from bytes.

        Args:
            data: Raw bytes containing exactly one header

        Returns:
            Parsed PacketHeader instance
        """
        request_id, packet_type = struct.unpack(HEADER_FORMAT, data)
        return cls(request_id=request_id, packet_type=packet_type)

    def to_bytes(self) -> bytes:
        """Serialize header to bytes."""
        return struct.pack(HEADER_FORMAT, self.request_id, self.packet_type)


@dataclass
class Packet:
    """
    Complete RCON packet without its size prefix.

    The wire format carries two null-terminated strings. Only the first one
    (``body``) is used; ``body2`` is always empty on a well-formed packet.
    """

    header: PacketHeader
    body: str = ""
    body2: str = ""
    # bytes on the wire without the size prefix, 0 when built locally
    size: int = field(default=0, compare=False)

    @property
    def request_id(self) -> int:
        return self.header.request_id

    @property
    def packet_type(self) -> int:
        return self.header.packet_type

    @classmethod
    def parse(cls, data: bytes) -> 'Packet':
        """
        Parse a packet from the bytes following its size prefix.

        Args:
            data: Raw packet bytes, header followed by both strings

        Returns:
            Parsed Packet instance

        Raises:
            InvalidPacketSizeError: If data is too short to hold a packet
            CrapBytesError: If the second string terminator is missing or
                            is not the last byte of the packet
        """
        if len(data) < MIN_PACKET_SIZE:
            raise InvalidPacketSizeError(f"invalid packet size: {len(data)}")

        header = PacketHeader.from_bytes(data[:HEADER_SIZE])

        end1 = data.find(TERMINATOR, HEADER_SIZE)
        if end1 < 0:
            raise CrapBytesError("response contains crap bytes: unterminated body")
        end2 = data.find(TERMINATOR, end1 + 1)
        if end2 < 0:
            raise CrapBytesError("response contains crap bytes: unterminated second string")
        if end2 + 1 != len(data):
            raise CrapBytesError(
                f"response contains crap bytes: {len(data) - end2 - 1} trailing byte(s)"
            )

        return cls(
            header=header,
            body=data[HEADER_SIZE:end1].decode(BODY_ENCODING, errors='replace'),
            body2=data[end1 + 1:end2].decode(BODY_ENCODING, errors='replace'),
            size=len(data),
        )

    def serialize(self) -> bytes:
        """Serialize the packet to bytes, without the size prefix."""
        return (
            self.header.to_bytes()
            + self.body.encode(BODY_ENCODING) + TERMINATOR
            + self.body2.encode(BODY_ENCODING) + TERMINATOR
        )
