"""Protocol constants for RCON packet handling.

These are protocol-level constants of the Source RCON wire format and
should not be changed without a matching server implementation.
See https://developer.valvesoftware.com/wiki/Source_RCON_Protocol
"""

import struct

# Size prefix: little-endian signed int counting every byte after itself
SIZE_FORMAT = '<i'
SIZE_SIZE = struct.calcsize(SIZE_FORMAT)

# Header format: little-endian int (request id) + little-endian int (type)
HEADER_FORMAT = '<ii'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Longest command or password a server accepts, found by trial and error.
# Far below the frame ceiling, replies can be much longer than commands.
MAX_COMMAND_LENGTH = 510

# id (4) + type (4) + empty string1 (1) + empty string2 (1)
MIN_PACKET_SIZE = HEADER_SIZE + 1 + 1

# Largest frame accepted from the server, size prefix excluded
MAX_PACKET_SIZE = 4101

# Replies this large were probably split by the server into several frames
PROBABLY_SPLIT_SIZE = MAX_PACKET_SIZE - 400

# Request id the server puts on any frame when the password was rejected
AUTH_FAILED_ID = -1

# Logical reply of a successful authentication
AUTH_SUCCESS = "success"

# Body strings are text in practice; undecodable bytes are replaced
BODY_ENCODING = 'utf-8'
