import pytest

from config.settings import (
    DEFAULT_ADDRESS,
    DEFAULT_PASSWORD,
    DEFAULT_TIMEOUT,
    ClientConfig,
    Config,
    split_address,
)
from utils.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("RCON_ADDRESS", "RCON_PASSWORD", "RCON_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = Config().load_client_config()

    assert config.address == DEFAULT_ADDRESS == "127.0.0.1:27015"
    assert config.password == DEFAULT_PASSWORD == ""
    assert config.timeout == DEFAULT_TIMEOUT == 1.0


def test_load_from_environment(clean_env):
    clean_env.setenv("RCON_ADDRESS", "example.com:27016")
    clean_env.setenv("RCON_PASSWORD", "hunter2")
    clean_env.setenv("RCON_TIMEOUT", "2.5")

    loader = Config()
    config = loader.load_client_config()

    assert config == ClientConfig(address="example.com:27016", password="hunter2", timeout=2.5)
    assert loader.client is config


def test_invalid_timeout(clean_env):
    clean_env.setenv("RCON_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError):
        Config().load_client_config()


def test_invalid_address(clean_env):
    clean_env.setenv("RCON_ADDRESS", "example.com")

    with pytest.raises(ConfigurationError):
        Config().load_client_config()


def test_validate_rejects_non_numeric_timeout():
    with pytest.raises(ConfigurationError):
        ClientConfig(timeout="1").validate()


@pytest.mark.parametrize("address, expected", [
    ("127.0.0.1:27015", ("127.0.0.1", 27015)),
    ("example.com:1", ("example.com", 1)),
    ("[::1]:27015", ("::1", 27015)),
])
def test_split_address(address, expected):
    assert split_address(address) == expected


@pytest.mark.parametrize("address", ["example.com", "host:0", "host:65536", "host:x", "::1:27015", ":27015"])
def test_split_address_rejects(address):
    with pytest.raises(ValueError):
        split_address(address)
