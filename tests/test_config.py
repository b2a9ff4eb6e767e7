import pytest

from dhan_api import ConfigurationError, DhanClient, Settings
from dhan_api.config import DEFAULT_API_URL, DEFAULT_TIMEOUT_S


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DHAN_ACCESS_TOKEN", "DHAN_API_URL", "DHAN_CLIENT_ID", "DHAN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_defaults(clean_env):
    clean_env.setenv("DHAN_ACCESS_TOKEN", "abc")

    settings = Settings.from_env(load_env_file=False)

    assert settings.access_token == "abc"
    assert settings.base_url == DEFAULT_API_URL
    assert settings.client_id is None
    assert settings.timeout_s == DEFAULT_TIMEOUT_S


def test_from_env_overrides(clean_env):
    clean_env.setenv("DHAN_ACCESS_TOKEN", "abc")
    clean_env.setenv("DHAN_API_URL", "https://sandbox.dhan.co/v2/")
    clean_env.setenv("DHAN_CLIENT_ID", "1000000001")

    settings = Settings.from_env(load_env_file=False)

    assert settings.base_url == "https://sandbox.dhan.co/v2"
    assert settings.client_id == "1000000001"


def test_missing_token_is_a_configuration_error(clean_env):
    with pytest.raises(ConfigurationError, match="DHAN_ACCESS_TOKEN"):
        Settings.from_env(load_env_file=False)


def test_timeout_comes_only_from_the_constructor(clean_env):
    clean_env.setenv("DHAN_ACCESS_TOKEN", "abc")
    clean_env.setenv("DHAN_TIMEOUT", "5")

    assert Settings.from_env(load_env_file=False).timeout_s == DEFAULT_TIMEOUT_S
    assert Settings(access_token="abc", timeout_s=5.0).timeout_s == 5.0


def test_settings_are_read_only(settings):
    with pytest.raises(Exception):
        settings.access_token = "other"


def test_client_wires_services_to_one_transport(settings):
    client = DhanClient(settings)

    assert client.margin._transport is client.transport
    assert client.charts._transport is client.transport
    assert client.trades._transport is client.transport
    assert client.positions._transport is client.transport
    assert client.transport.settings is settings
