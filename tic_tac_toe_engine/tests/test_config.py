import pytest

from src.api.config import get_settings

ENV_VARS = ("TTT_ENV", "NODE_ENV", "TTT_PORT", "PORT", "TTT_FEATURE_FLAGS",
            "TTT_OPPONENT_DELAY_MS", "TTT_CORS_ORIGINS", "TTT_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.env_label == "development"
    assert settings.port == 3000
    assert settings.feature_flags == []
    assert settings.opponent_delay == pytest.approx(0.4)
    assert settings.cors_origins == ["*"]
    assert settings.show_port


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TTT_ENV", "production")
    monkeypatch.setenv("TTT_PORT", "8080")
    monkeypatch.setenv("TTT_FEATURE_FLAGS", "dark-mode, sounds ,")
    monkeypatch.setenv("TTT_OPPONENT_DELAY_MS", "0")
    monkeypatch.setenv("TTT_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.is_production
    assert not settings.show_port
    assert settings.port == 8080
    assert settings.feature_flags == ["dark-mode", "sounds"]
    assert settings.opponent_delay == 0
    assert settings.log_level == "DEBUG"


def test_node_env_and_port_fallbacks(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "staging")
    monkeypatch.setenv("PORT", "5000")
    settings = get_settings()
    assert settings.env_label == "staging"
    assert settings.port == 5000


def test_bad_port(monkeypatch):
    monkeypatch.setenv("TTT_PORT", "abc")
    with pytest.raises(ValueError, match="TTT_PORT"):
        get_settings()


def test_negative_delay(monkeypatch):
    monkeypatch.setenv("TTT_OPPONENT_DELAY_MS", "-5")
    with pytest.raises(ValueError):
        get_settings()
