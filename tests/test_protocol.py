import io
import struct

import pytest

from protocol.commands import RequestType, ResponseType
from protocol.constants import MAX_COMMAND_LENGTH, MAX_PACKET_SIZE, MIN_PACKET_SIZE
from protocol.encoding import decode_packet, encode_packet
from protocol.messages import Packet, PacketHeader
from utils.exceptions import (
    ConnectionClosedError,
    CrapBytesError,
    InvalidPacketSizeError,
    PayloadTooLargeError,
)
from tests.fake_server import build_frame


class RecordingReader:
    """BytesIO reader that remembers the sizes it was asked for."""

    def __init__(self, data: bytes):
        self._stream = io.BytesIO(data)
        self.requests = []

    def __call__(self, n: int) -> bytes:
        self.requests.append(n)
        return self._stream.read(n)


def test_packet_types_share_value_two():
    assert RequestType.SERVERDATA_EXECCOMMAND == ResponseType.SERVERDATA_AUTH_RESPONSE == 2
    assert RequestType.SERVERDATA_AUTH == 3
    assert ResponseType.SERVERDATA_RESPONSE_VALUE == 0


def test_encode_packet_layout():
    data = encode_packet(7, RequestType.SERVERDATA_EXECCOMMAND, "status")

    assert data == struct.pack('<iii', 4 + 4 + 6 + 2, 7, 2) + b'status\x00\x00'


def test_encode_empty_payload_is_minimum_size():
    data = encode_packet(1, RequestType.SERVERDATA_AUTH, "")

    assert struct.unpack('<i', data[:4])[0] == MIN_PACKET_SIZE
    assert len(data) == 4 + MIN_PACKET_SIZE


def test_encode_negative_request_id():
    data = encode_packet(-5, RequestType.SERVERDATA_AUTH, "pw")

    assert struct.unpack('<i', data[4:8])[0] == -5


@pytest.mark.parametrize("payload", ["", "status", "say héllo", "x" * MAX_COMMAND_LENGTH])
def test_decode_reads_back_encoded_packet(payload):
    packet = decode_packet(io.BytesIO(encode_packet(42, 3, payload)).read)

    assert packet.request_id == 42
    assert packet.packet_type == 3
    assert packet.body == payload
    assert packet.body2 == ""


def test_encode_rejects_long_payload():
    with pytest.raises(PayloadTooLargeError):
        encode_packet(1, RequestType.SERVERDATA_EXECCOMMAND, "x" * (MAX_COMMAND_LENGTH + 1))


def test_encode_limit_counts_encoded_bytes():
    # 256 two-byte characters are 512 bytes on the wire
    with pytest.raises(PayloadTooLargeError):
        encode_packet(1, RequestType.SERVERDATA_EXECCOMMAND, "é" * 256)


@pytest.mark.parametrize("size", [MIN_PACKET_SIZE - 1, 0, -1, MAX_PACKET_SIZE + 1, 2 ** 31 - 1])
def test_decode_rejects_size_out_of_bounds_without_reading_body(size):
    reader = RecordingReader(struct.pack('<i', size) + b'\x00' * 32)

    with pytest.raises(InvalidPacketSizeError):
        decode_packet(reader)
    assert reader.requests == [4]


def test_decode_accepts_largest_frame():
    body = b'a' * (MAX_PACKET_SIZE - MIN_PACKET_SIZE)
    frame = build_frame(1, 0, body)
    assert struct.unpack('<i', frame[:4])[0] == MAX_PACKET_SIZE

    packet = decode_packet(io.BytesIO(frame).read)

    assert packet.body == body.decode()


def test_decode_short_prefix_is_connection_closed():
    with pytest.raises(ConnectionClosedError):
        decode_packet(io.BytesIO(b'\x0a\x00').read)


def test_decode_short_body_is_connection_closed():
    frame = build_frame(1, 0, b'hello')

    with pytest.raises(ConnectionClosedError):
        decode_packet(io.BytesIO(frame[:-3]).read)


def test_decode_keeps_second_string():
    packet = decode_packet(io.BytesIO(build_frame(1, 0, b'out', b'junk')).read)

    assert packet.body == 'out'
    assert packet.body2 == 'junk'


def test_decode_rejects_bytes_after_second_terminator():
    data = struct.pack('<ii', 1, 0) + b'out\x00\x00zz'
    frame = struct.pack('<i', len(data)) + data

    with pytest.raises(CrapBytesError):
        decode_packet(io.BytesIO(frame).read)


def test_decode_rejects_unterminated_strings():
    data = struct.pack('<ii', 1, 0) + b'abcdef'
    frame = struct.pack('<i', len(data)) + data

    with pytest.raises(CrapBytesError):
        decode_packet(io.BytesIO(frame).read)


def test_decode_rejects_missing_second_terminator():
    data = struct.pack('<ii', 1, 0) + b'abc\x00de'
    frame = struct.pack('<i', len(data)) + data

    with pytest.raises(CrapBytesError):
        decode_packet(io.BytesIO(frame).read)


def test_decode_replaces_invalid_utf8():
    packet = decode_packet(io.BytesIO(build_frame(1, 0, b'\xffok')).read)

    assert packet.body == '\ufffdok'


def test_packet_header_round_trip():
    header = PacketHeader(request_id=-1, packet_type=2)

    assert PacketHeader.from_bytes(header.to_bytes()) == header


def test_packet_serialize_and_parse():
    packet = Packet(header=PacketHeader(request_id=9, packet_type=0), body="hi")

    data = packet.serialize()

    assert data == struct.pack('<ii', 9, 0) + b'hi\x00\x00'
    assert Packet.parse(data) == packet


def test_packet_parse_rejects_short_data():
    with pytest.raises(InvalidPacketSizeError):
        Packet.parse(b'\x00' * (MIN_PACKET_SIZE - 1))


def test_parsed_packet_records_wire_size():
    frame = build_frame(3, 0, "é".encode() * 10)

    packet = decode_packet(io.BytesIO(frame).read)

    assert packet.size == 8 + 20 + 2
    assert len(packet.body) == 10
