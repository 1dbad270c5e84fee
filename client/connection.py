"""TCP connection to an RCON server with an absolute deadline."""

from typing import Optional
import socket
import time

from config.settings import split_address
from utils.logging import get_logger
from utils.exceptions import (
    ConnectionClosedError,
    DeadlineExceededError,
    DialError,
    NoConnectionError,
)

logger = get_logger(__name__)


class Connection:
    """
    Blocking TCP connection used by RconClient.

    The timeout is applied twice: once to dial, and once as a hard deadline
    of ``connect time + timeout`` that every later read and write must meet.
    The deadline is not refreshed per call, so a long-lived connection
    eventually expires and has to be re-established.
    """

    def __init__(self, address: str, timeout: float):
        """
        Initialize an unconnected Connection.

        Args:
            address: Server address as HOST:PORT
            timeout: Dial timeout and deadline window in seconds
        """
        self._address = address
        self._timeout = timeout
        self._sock: Optional[socket.socket] = None
        self._deadline: float = 0.0

    @property
    def address(self) -> str:
        return self._address

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """
        Dial the server, closing any previous socket first.

        Raises:
            DialError: If the address is malformed or the server cannot be
                       reached within the timeout
        """
        self.close()

        try:
            host, port = split_address(self._address)
        except ValueError as e:
            raise DialError(f"dial TCP fail: {e}") from e

        logger.info(f"Connecting to {self._address}")
        try:
            sock = socket.create_connection((host, port), timeout=self._timeout)
        except OSError as e:
            raise DialError(f"dial TCP fail: {self._address}: {e}") from e

        self._sock = sock
        self._deadline = time.monotonic() + self._timeout
        logger.info(f"Connected to {self._address}")

    def close(self) -> None:
        """
        Close the socket.

        This method is idempotent and can be called multiple times safely.
        """
        if self._sock is None:
            return

        sock, self._sock = self._sock, None
        try:
            sock.close()
        except OSError:
            logger.warning(f"Error closing connection to {self._address}", exc_info=True)
        logger.info(f"Disconnected from {self._address}")

    def sendall(self, data: bytes) -> None:
        """
        Write all data before the deadline.

        Raises:
            NoConnectionError: If there is no live socket
            ConnectionClosedError: If the write fails or the deadline passed
        """
        sock = self._arm()
        try:
            sock.sendall(data)
        except socket.timeout as e:
            raise ConnectionClosedError("timeout while sending request") from e
        except OSError as e:
            raise ConnectionClosedError(f"write failed: {e}") from e
        logger.debug(f"Sent {len(data)} bytes to {self._address}")

    def read_exactly(self, n: int) -> bytes:
        """
        Read n bytes before the deadline.

        Returns fewer than n bytes only if the peer closed the connection.

        Raises:
            NoConnectionError: If there is no live socket
            ConnectionClosedError: If the read fails or the deadline passed
        """
        buffer = bytearray()
        while len(buffer) < n:
            sock = self._arm()
            try:
                chunk = sock.recv(n - len(buffer))
            except socket.timeout as e:
                raise ConnectionClosedError("timeout while waiting for reply") from e
            except OSError as e:
                raise ConnectionClosedError(f"read failed: {e}") from e
            if not chunk:
                logger.debug(f"Connection to {self._address} closed by peer")
                break
            buffer += chunk
        return bytes(buffer)

    def _arm(self) -> socket.socket:
        """Return the live socket with its timeout set to the time left."""
        if self._sock is None:
            raise NoConnectionError("no connection")

        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            raise DeadlineExceededError("connection deadline exceeded")
        self._sock.settimeout(remaining)
        return self._sock
