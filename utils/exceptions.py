"""Custom exception classes for the RCON client."""


class RconError(Exception):
    """
    Base exception class for all RCON errors.

    Attributes:
        output: Output accumulated before the failure. For scripts this holds
                the concatenated replies of the lines that already succeeded.
    """

    def __init__(self, *args):
        super().__init__(*args)
        self.output = ""


class TransportError(RconError):
    """Base class for failures of the underlying TCP transport."""
    pass


class DialError(TransportError):
    """Exception raised when the TCP connection cannot be established."""
    pass


class ConnectionClosedError(TransportError):
    """Exception raised when the peer closed the connection or a read/write failed."""
    pass


class DeadlineExceededError(ConnectionClosedError):
    """Exception raised when the connection deadline passed before a read or write."""
    pass


class NoConnectionError(TransportError):
    """Exception raised when attempting to use the client without a live socket."""
    pass


class ProtocolError(RconError):
    """Base class for malformed or out-of-sequence data from the server."""
    pass


class InvalidPacketSizeError(ProtocolError):
    """Exception raised when a frame declares a size outside the allowed bounds."""
    pass


class CrapBytesError(ProtocolError):
    """Exception raised when a frame carries bytes after its first string."""
    pass


class InvalidResponseError(ProtocolError):
    """Exception raised when a frame has an unexpected response type."""
    pass


class InconsistentRequestIDError(ProtocolError):
    """Exception raised when a reply does not echo the pending request id."""
    pass


class PayloadTooLargeError(RconError):
    """Exception raised when a command or password exceeds the payload limit."""
    pass


class BadPasswordError(RconError):
    """Exception raised when the server rejects the RCON password."""
    pass


class ConfigurationError(RconError):
    """Exception raised when configuration is invalid or missing."""
    pass
