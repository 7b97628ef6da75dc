import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_REGION_CODE = "IN"
DEFAULT_CATEGORY_ID = "28"  # Science & Technology
DEFAULT_WINDOW_HOURS = 72
DEFAULT_REQUEST_TIMEOUT = 15
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ConfigError(RuntimeError):
    """Raised when the radar cannot be configured from the environment."""


@dataclass(frozen=True)
class RadarSettings:
    youtube_api_key: str
    youtube_api_key_2: str
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    region_code: str = DEFAULT_REGION_CODE
    category_id: str = DEFAULT_CATEGORY_ID
    window_hours: int = DEFAULT_WINDOW_HOURS
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def _env(key: str) -> str | None:
    value = (os.getenv(key) or "").strip()
    return value or None


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _env_region() -> str:
    region = (_env("RADAR_REGION_CODE") or DEFAULT_REGION_CODE).upper()
    if len(region) != 2 or not region.isalpha():
        raise ConfigError(f"RADAR_REGION_CODE must be a two-letter country code, got {region!r}")
    return region


def _env_category() -> str:
    category = _env("RADAR_CATEGORY_ID") or DEFAULT_CATEGORY_ID
    if not category.isdigit() or len(category) > 3:
        raise ConfigError(f"RADAR_CATEGORY_ID must be a numeric category id, got {category!r}")
    return category


def load_settings() -> RadarSettings:
    load_dotenv()

    primary = _env("YOUTUBE_API_KEY")
    if not primary:
        raise ConfigError("Missing YOUTUBE_API_KEY in backend/.env")

    return RadarSettings(
        youtube_api_key=primary,
        # A single configured key makes rotation a no-op.
        youtube_api_key_2=_env("YOUTUBE_API_KEY_2") or primary,
        telegram_bot_token=_env("TELEGRAM_BOT_TOKEN"),
        telegram_chat_id=_env("TELEGRAM_CHAT_ID"),
        region_code=_env_region(),
        category_id=_env_category(),
        window_hours=_env_int("RADAR_WINDOW_HOURS", DEFAULT_WINDOW_HOURS),
        request_timeout=_env_int("RADAR_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
    )


def configure_logging(level: str | None = None) -> None:
    level_name = (level or os.getenv("RADAR_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Request URLs carry the API key as a query param.
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
