from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from calendar_digest.config import Settings
from calendar_digest.models import CalendarEvent

TOKYO = ZoneInfo("Asia/Tokyo")


@pytest.fixture
def all_day():
    """Factory for all-day events; dates are YYYY-MM-DD, end exclusive."""
    def make(title, start, end, **extra):
        return CalendarEvent.from_api({"summary": title, "start": {"date": start}, "end": {"date": end}, **extra})
    return make


@pytest.fixture
def timed():
    """Factory for timed events; bounds are ISO-8601 date-times."""
    def make(title, start, end, **extra):
        return CalendarEvent.from_api({"summary": title, "start": {"dateTime": start}, "end": {"dateTime": end}, **extra})
    return make


@pytest.fixture
def tz():
    return TOKYO


@pytest.fixture
def now(tz):
    """Monday 2024-06-10 10:00 in Tokyo."""
    return datetime(2024, 6, 10, 10, 0, tzinfo=tz)


@pytest.fixture
def settings(tz):
    return Settings(
        line_channel_access_token="line-token",
        line_channel_secret="line-secret",
        line_user_id="U123",
        gcp_service_account="{}",
        google_calendar_id="team@example.com",
        timezone=tz,
        locale="en",
    )
