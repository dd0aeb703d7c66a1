import pytest

from backend.relay import config as relay_config


@pytest.fixture(autouse=True)
def fresh_config():
    relay_config.reset_config()
    yield
    relay_config.reset_config()


def test_default_port(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)

    config = relay_config.get_config()
    assert config.port == 3000
    assert config.max_findings == 100
    assert config.expiry_ms == 15_000
    assert config.max_body_bytes == 10 * 1024 * 1024


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")

    assert relay_config.get_config().port == 8080


def test_config_is_cached(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    first = relay_config.get_config()
    monkeypatch.setenv("PORT", "9090")

    assert relay_config.get_config() is first


@pytest.mark.parametrize("raw", ["abc", "0", "70000"])
def test_invalid_port(monkeypatch, raw):
    monkeypatch.setenv("PORT", raw)

    with pytest.raises(ValueError):
        relay_config.get_config()
