import pytest

from backend.app.services import settings as settings_module
from backend.app.services.settings import ConfigError, load_settings

RADAR_VARS = [
    "YOUTUBE_API_KEY",
    "YOUTUBE_API_KEY_2",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "RADAR_REGION_CODE",
    "RADAR_CATEGORY_ID",
    "RADAR_WINDOW_HOURS",
    "RADAR_REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in RADAR_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module, "load_dotenv", lambda *args, **kwargs: False)


def test_defaults_and_single_key_fallback(monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEY", " key-a ")
    settings = load_settings()
    assert settings.youtube_api_key == "key-a"
    assert settings.youtube_api_key_2 == "key-a"
    assert settings.region_code == "IN"
    assert settings.category_id == "28"
    assert settings.window_hours == 72
    assert settings.request_timeout == 15
    assert settings.telegram_enabled is False


def test_overrides(monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEY", "key-a")
    monkeypatch.setenv("YOUTUBE_API_KEY_2", "key-b")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "TOKEN")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100123")
    monkeypatch.setenv("RADAR_REGION_CODE", "us")
    monkeypatch.setenv("RADAR_WINDOW_HOURS", "48")
    settings = load_settings()
    assert settings.youtube_api_key_2 == "key-b"
    assert settings.region_code == "US"
    assert settings.window_hours == 48
    assert settings.telegram_enabled is True


def test_missing_primary_key():
    with pytest.raises(ConfigError, match="YOUTUBE_API_KEY"):
        load_settings()


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_invalid_window(monkeypatch, value):
    monkeypatch.setenv("YOUTUBE_API_KEY", "key-a")
    monkeypatch.setenv("RADAR_WINDOW_HOURS", value)
    with pytest.raises(ConfigError, match="RADAR_WINDOW_HOURS"):
        load_settings()


@pytest.mark.parametrize("value", ["IND", "I", "I1", "IN" * 1000])
def test_invalid_region_code(monkeypatch, value):
    monkeypatch.setenv("YOUTUBE_API_KEY", "key-a")
    monkeypatch.setenv("RADAR_REGION_CODE", value)
    with pytest.raises(ConfigError, match="RADAR_REGION_CODE"):
        load_settings()


@pytest.mark.parametrize("value", ["tech", "28a", "9" * 5000])
def test_invalid_category_id(monkeypatch, value):
    monkeypatch.setenv("YOUTUBE_API_KEY", "key-a")
    monkeypatch.setenv("RADAR_CATEGORY_ID", value)
    with pytest.raises(ConfigError, match="RADAR_CATEGORY_ID"):
        load_settings()
