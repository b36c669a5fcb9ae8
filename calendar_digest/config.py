import os
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_LOCALE = "ja"
DEFAULT_WINDOW_DAYS = 15
SUPPORTED_LOCALES = ("ja", "en")


class ConfigError(ValueError):
    pass


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    line_channel_access_token: str
    line_channel_secret: Optional[str] = None
    line_user_id: str
    gcp_service_account: str
    google_calendar_id: str
    timezone: ZoneInfo = ZoneInfo(DEFAULT_TIMEZONE)
    locale: str = DEFAULT_LOCALE
    window_days: int = DEFAULT_WINDOW_DAYS
    line_api_timeout: float = 10.0
    log_level: str = "INFO"


def _required(env: Mapping[str, str], *names: str) -> str:
    for name in names:
        value = env.get(name)
        if value:
            return value
    raise ConfigError(f"{names[0]} not set")


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (and a .env file when present).

    Passing ``environ`` skips the .env lookup, which keeps tests hermetic.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    tz_name = environ.get("DIGEST_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"DIGEST_TIMEZONE is not a known timezone: {tz_name!r}") from exc

    locale = (environ.get("DIGEST_LOCALE") or DEFAULT_LOCALE).lower()
    if locale not in SUPPORTED_LOCALES:
        raise ConfigError(f"DIGEST_LOCALE must be one of {', '.join(SUPPORTED_LOCALES)}, got {locale!r}")

    window_days = _number(environ, "DIGEST_WINDOW_DAYS", DEFAULT_WINDOW_DAYS, int)
    if window_days < 1:
        raise ConfigError("DIGEST_WINDOW_DAYS must be at least 1")

    timeout = _number(environ, "LINE_API_TIMEOUT", 10.0, float)
    if not timeout > 0:
        raise ConfigError(f"LINE_API_TIMEOUT must be a positive number of seconds, got {timeout!r}")

    return Settings(
        line_channel_access_token=_required(environ, "LINE_CHANNEL_ACCESS_TOKEN"),
        line_channel_secret=environ.get("LINE_CHANNEL_SECRET") or None,
        line_user_id=_required(environ, "LINE_USER_ID"),
        gcp_service_account=_required(environ, "GCP_SERVICE_ACCOUNT"),
        # the original deployment spelled it CALENDER
        google_calendar_id=_required(environ, "GOOGLE_CALENDAR_ID", "GOOGLE_CALENDER_ID"),
        timezone=tz,
        locale=locale,
        window_days=window_days,
        line_api_timeout=timeout,
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
    )
