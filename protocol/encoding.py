"""Frame encoding and decoding functions."""

from typing import Callable
import struct

from protocol.constants import (
    BODY_ENCODING,
    MAX_COMMAND_LENGTH,
    MAX_PACKET_SIZE,
    MIN_PACKET_SIZE,
    SIZE_FORMAT,
    SIZE_SIZE,
)
from protocol.messages import Packet, PacketHeader
from utils.exceptions import (
    ConnectionClosedError,
    InvalidPacketSizeError,
    PayloadTooLargeError,
)

# Reader returning up to n bytes; fewer only when the stream ended
Reader = Callable[[int], bytes]


def encode_packet(request_id: int, packet_type: int, payload: str) -> bytes:
    """
    Encode a request into a length-prefixed frame.

    Args:
        request_id: Request id the server echoes back
        packet_type: Outgoing packet type
        payload: Command text or password

    Returns:
        Frame bytes ready to be written to the socket

    Raises:
        PayloadTooLargeError: If the encoded payload exceeds MAX_COMMAND_LENGTH
    """
    length = len(payload.encode(BODY_ENCODING))
    if length > MAX_COMMAND_LENGTH:
        raise PayloadTooLargeError(
            f"message length exceed: {length}/{MAX_COMMAND_LENGTH}"
        )

    packet = Packet(
        header=PacketHeader(request_id=request_id, packet_type=packet_type),
        body=payload,
    )
    data = packet.serialize()
    return struct.pack(SIZE_FORMAT, len(data)) + data


def decode_packet(read: Reader) -> Packet:
    """
    Read one frame from a stream and decode it.

    The declared size is validated before the body is read, so a garbage
    prefix never makes the client wait for gigabytes of data.

    Args:
        read: Reader for the stream, e.g. Connection.read_exactly

    Returns:
        Decoded Packet

    Raises:
        ConnectionClosedError: If the stream ends before a full frame
        InvalidPacketSizeError: If the declared size is out of bounds
        CrapBytesError: If the frame strings are malformed
    """
    prefix = read(SIZE_SIZE)
    if len(prefix) < SIZE_SIZE:
        raise ConnectionClosedError("connection closed")

    (size,) = struct.unpack(SIZE_FORMAT, prefix)
    if size < MIN_PACKET_SIZE or size > MAX_PACKET_SIZE:
        raise InvalidPacketSizeError(f"invalid packet size: {size}")

    data = read(size)
    if len(data) < size:
        raise ConnectionClosedError("connection closed")

    return Packet.parse(data)
