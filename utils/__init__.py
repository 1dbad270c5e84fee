"""Utility modules for logging and exception handling."""

from utils.logging import setup_logging, get_logger
from utils.exceptions import (
    RconError,
    TransportError,
    ProtocolError,
    BadPasswordError,
    PayloadTooLargeError,
    ConfigurationError,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'RconError',
    'TransportError',
    'ProtocolError',
    'BadPasswordError',
    'PayloadTooLargeError',
    'ConfigurationError',
]
