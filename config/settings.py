"""Configuration management for the RCON client."""

from dataclasses import dataclass
from typing import Optional, Tuple
import os
from pathlib import Path

from dotenv import load_dotenv

from utils.exceptions import ConfigurationError


# Load .env file from project root
# This is called at module import time to ensure env vars are available
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path, override=False)


# Client defaults. These are user configuration, not protocol constants,
# and can be overridden per client.
DEFAULT_PORT = 27015
DEFAULT_ADDRESS = f"127.0.0.1:{DEFAULT_PORT}"
DEFAULT_PASSWORD = ""
DEFAULT_TIMEOUT = 1.0


def split_address(address: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` address into its parts.

    IPv6 hosts must be bracketed, e.g. ``[::1]:27015``.

    Args:
        address: Address in HOST:PORT form

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the address is malformed or the port is out of range
    """
    host, sep, port_str = address.rpartition(':')
    if not sep or not host:
        raise ValueError(f"address must be in the format HOST:PORT, got: {address!r}")
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    elif ':' in host:
        raise ValueError(f"IPv6 address must be bracketed, got: {address!r}")

    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"port must be a valid integer, got: {port_str!r}")
    if port < 1 or port > 65535:
        raise ValueError(f"port must be between 1 and 65535, got: {port}")
    return host, port


@dataclass
class ClientConfig:
    """Configuration for the RCON client."""

    address: str = DEFAULT_ADDRESS
    password: str = DEFAULT_PASSWORD
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        """Validate client configuration parameters."""
        try:
            split_address(self.address)
        except ValueError as e:
            raise ConfigurationError(f"Invalid RCON address: {e}") from e
        if not isinstance(self.timeout, (int, float)) or isinstance(self.timeout, bool):
            raise ConfigurationError(
                f"RCON timeout must be a number of seconds, got: {self.timeout!r}"
            )


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.client: Optional[ClientConfig] = None

    def load_client_config(self) -> ClientConfig:
        """
        Load client configuration from environment variables.

        Environment variables:
            RCON_ADDRESS: Server address as HOST:PORT (default: 127.0.0.1:27015)
            RCON_PASSWORD: RCON password (default: empty)
            RCON_TIMEOUT: Connection timeout in seconds (default: 1)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        timeout_str = os.getenv('RCON_TIMEOUT', str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_str)
        except ValueError:
            raise ConfigurationError(
                f"RCON_TIMEOUT must be a number of seconds, got: {timeout_str}"
            )

        config = ClientConfig(
            address=os.getenv('RCON_ADDRESS', DEFAULT_ADDRESS),
            password=os.getenv('RCON_PASSWORD', DEFAULT_PASSWORD),
            timeout=timeout,
        )
        config.validate()
        self.client = config
        return config
