"""Configuration module for managing client settings."""

from config.settings import (
    DEFAULT_ADDRESS,
    DEFAULT_PASSWORD,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    ClientConfig,
    Config,
    split_address,
)

__all__ = [
    'DEFAULT_ADDRESS',
    'DEFAULT_PASSWORD',
    'DEFAULT_PORT',
    'DEFAULT_TIMEOUT',
    'ClientConfig',
    'Config',
    'split_address',
]
