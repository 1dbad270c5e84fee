"""Source RCON client: authentication, request/response exchange and retry."""

from enum import Enum
import threading

from client.connection import Connection
from config.settings import DEFAULT_TIMEOUT, ClientConfig
from protocol.commands import RequestType, ResponseType
from protocol.constants import (
    AUTH_FAILED_ID,
    AUTH_SUCCESS,
    PROBABLY_SPLIT_SIZE,
)
from protocol.encoding import decode_packet, encode_packet
from utils.logging import get_logger
from utils.exceptions import (
    BadPasswordError,
    CrapBytesError,
    DeadlineExceededError,
    InconsistentRequestIDError,
    InvalidResponseError,
    NoConnectionError,
    PayloadTooLargeError,
    RconError,
    TransportError,
)

logger = get_logger(__name__)

COMMENT_PREFIX = "//"

# First attempt plus one silent reconnect-and-resend
MAX_ATTEMPTS = 2

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


class ExecuteState(Enum):
    """States of a single command execution."""

    IDLE = "idle"
    SENDING = "sending"
    AWAITING_REPLY = "awaiting_reply"
    RETRYING = "retrying"
    SUCCESS = "success"
    FAILED = "failed"


class ExchangeContext(Enum):
    """Which exchange a received frame belongs to.

    SERVERDATA_AUTH_RESPONSE is only meaningful during the handshake.
    """

    HANDSHAKE = "handshake"
    COMMAND = "command"


class RconClient:
    """
    Client of the Source RCON protocol.

    The client is safe to share between threads: every call to execute()
    holds a single lock for its whole duration, so commands from different
    callers are serialized and never interleave on the wire.

    The connection is opened lazily. The first command finds no connection,
    fails with a transport error and goes through the retry path, which
    connects and authenticates before resending.
    """

    def __init__(self, address: str, password: str = "", timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize RCON client.

        Args:
            address: Server address as HOST:PORT
            password: RCON password
            timeout: Connection timeout in seconds, non-positive means default
        """
        if timeout <= 0:
            timeout = DEFAULT_TIMEOUT

        self._address = address
        self._password = password
        self._timeout = timeout
        self._connection = Connection(address, timeout)
        self._request_id = 0
        self._state = ExecuteState.IDLE
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ClientConfig) -> 'RconClient':
        """Create a client from a validated ClientConfig."""
        return cls(config.address, config.password, config.timeout)

    @property
    def address(self) -> str:
        return self._address

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def request_id(self) -> int:
        """Id of the most recently sent request."""
        return self._request_id

    @property
    def state(self) -> ExecuteState:
        """State reached by the most recent command."""
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    def execute(self, command: str) -> str:
        """
        Execute a command or a script and return the server's reply.

        Text without a newline is sent as a single command. Text with newlines
        is a script: every line is stripped, blank lines and lines starting
        with ``//`` are skipped, and the replies of the remaining lines are
        concatenated.

        Args:
            command: Command text or script

        Returns:
            Reply text, concatenated for scripts

        Raises:
            RconError: On the first failing command. ``error.output`` holds the
                       replies of the script lines that succeeded before it.
        """
        with self._lock:
            if "\n" not in command:
                if not command:
                    return ""
                return self._execute_worker(command)

            output = []
            for line in command.split("\n"):
                line = line.strip()
                if not line or line.startswith(COMMENT_PREFIX):
                    continue

                try:
                    output.append(self._execute_worker(line))
                except RconError as e:
                    e.output = "".join(output)
                    raise
            return "".join(output)

    def close(self) -> None:
        """Close the connection. The next command reconnects."""
        with self._lock:
            self._connection.close()

    def __enter__(self) -> 'RconClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _execute_worker(self, command: str) -> str:
        """
        Run one command, reconnecting and resending at most once.

        Only transport errors lead to a retry. Protocol errors, oversized
        payloads and a rejected password cannot be fixed by reconnecting
        and propagate immediately. Errors during the retry propagate too.
        """
        attempts = 0
        self._state = ExecuteState.SENDING

        try:
            while True:
                if self._state is ExecuteState.SENDING:
                    attempts += 1
                    try:
                        self._send(RequestType.SERVERDATA_EXECCOMMAND, command)
                    except TransportError as e:
                        if attempts >= MAX_ATTEMPTS:
                            raise
                        self._state = self._retry_after(e)
                    else:
                        self._state = ExecuteState.AWAITING_REPLY

                elif self._state is ExecuteState.AWAITING_REPLY:
                    try:
                        reply = self._receive(ExchangeContext.COMMAND)
                    except TransportError as e:
                        if attempts >= MAX_ATTEMPTS:
                            raise
                        self._state = self._retry_after(e)
                    else:
                        self._state = ExecuteState.SUCCESS
                        return reply

                elif self._state is ExecuteState.RETRYING:
                    self._reconnect()
                    self._state = ExecuteState.SENDING
        except PayloadTooLargeError:
            if self._state is not ExecuteState.SENDING:
                self._connection.close()
            self._state = ExecuteState.FAILED
            raise
        except RconError:
            # connection state is unknown after a failed exchange
            self._connection.close()
            self._state = ExecuteState.FAILED
            raise

    def _retry_after(self, error: TransportError) -> ExecuteState:
        if isinstance(error, NoConnectionError):
            logger.info(f"No connection to {self._address}, connecting")
        elif isinstance(error, DeadlineExceededError):
            logger.info(f"Connection to {self._address} expired, reconnecting")
        else:
            logger.warning(f"RCON exchange with {self._address} failed ({error}), reconnecting")
        return ExecuteState.RETRYING

    def _reconnect(self) -> None:
        """Drop the current connection, dial again and authenticate."""
        self._connection.close()
        self._connection.connect()
        self._authenticate()

    def _authenticate(self) -> None:
        """
        Perform the authentication handshake on a fresh connection.

        Some servers send an empty SERVERDATA_RESPONSE_VALUE before the real
        auth response; in that case one more frame is read. A rejected
        password shows up as request id -1 and raises BadPasswordError from
        _receive(). Anything else counts as success.
        """
        self._send(RequestType.SERVERDATA_AUTH, self._password)

        reply = self._receive(ExchangeContext.HANDSHAKE)
        if not reply:
            reply = self._receive(ExchangeContext.HANDSHAKE)

        if reply != AUTH_SUCCESS:
            logger.debug(f"Unexpected auth reply from {self._address}: {reply!r}")
        logger.info(f"Authenticated to {self._address}")

    def _send(self, packet_type: RequestType, payload: str) -> None:
        """Encode and write one request with a fresh request id."""
        request_id = self._next_request_id()
        data = encode_packet(request_id, packet_type, payload)
        self._request_id = request_id
        logger.debug(
            f"Sending {packet_type.name} id={request_id} frame_size={len(data)}"
        )
        self._connection.sendall(data)

    def _next_request_id(self) -> int:
        if self._request_id == INT32_MAX:
            return INT32_MIN
        return self._request_id + 1

    def _receive(self, context: ExchangeContext) -> str:
        """
        Read one frame and reduce it to the logical reply.

        Replies longer than one frame are not stitched together; only the
        first frame of a split reply is returned.

        Args:
            context: Exchange the frame is expected to belong to

        Returns:
            Reply text, or AUTH_SUCCESS for an auth response

        Raises:
            BadPasswordError: If the frame carries request id -1
            CrapBytesError: If the second string is not empty
            InconsistentRequestIDError: If the frame answers another request
            InvalidResponseError: If the type does not fit the context
            TransportError: If the connection fails
        """
        packet = decode_packet(self._connection.read_exactly)
        logger.debug(
            f"Received type={packet.packet_type} id={packet.request_id} "
            f"size={packet.size}"
        )

        if packet.request_id == AUTH_FAILED_ID:
            logger.error(f"RCON password rejected by {self._address}")
            self._connection.close()
            raise BadPasswordError("bad password")

        if packet.body2:
            raise CrapBytesError(f"invalid response message: {packet.body2!r}")

        if packet.request_id != self._request_id:
            raise InconsistentRequestIDError(
                f"inconsistent requestID: {packet.request_id}, expected: {self._request_id}"
            )

        if (context is ExchangeContext.HANDSHAKE
                and packet.packet_type == ResponseType.SERVERDATA_AUTH_RESPONSE):
            return AUTH_SUCCESS

        if packet.packet_type != ResponseType.SERVERDATA_RESPONSE_VALUE:
            raise InvalidResponseError(
                f"invalid response type {packet.packet_type} during {context.value}"
            )

        if packet.size >= PROBABLY_SPLIT_SIZE:
            logger.debug("Reply is close to the frame limit and was probably split")
        return packet.body
