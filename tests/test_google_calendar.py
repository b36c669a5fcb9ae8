from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from calendar_digest.config import ConfigError
from calendar_digest.google_calendar import SCOPES, GoogleCalendarReader, open_calendar


@pytest.fixture
def window(tz):
    return (
        datetime(2024, 5, 26, 0, 0, tzinfo=tz),
        datetime(2024, 6, 25, 23, 59, 59, tzinfo=tz),
    )


def test_list_events_requests_expanded_ordered_window(window):
    service = MagicMock()
    service.events.return_value.list.return_value.execute.return_value = {
        "items": [{"id": "1", "summary": "Trip", "start": {"date": "2024-06-10"}, "end": {"date": "2024-06-11"}}]
    }

    events = GoogleCalendarReader(service, "cal-id").list_events(*window)

    service.events.return_value.list.assert_called_once_with(
        calendarId="cal-id",
        timeMin="2024-05-26T00:00:00+09:00",
        timeMax="2024-06-25T23:59:59+09:00",
        singleEvents=True,
        orderBy="startTime",
        pageToken=None,
    )
    assert [e.title for e in events] == ["Trip"]
    assert events[0].is_all_day()


def test_list_events_follows_pages(window):
    service = MagicMock()
    service.events.return_value.list.return_value.execute.side_effect = [
        {"items": [{"summary": "A"}], "nextPageToken": "p2"},
        {"items": [{"summary": "B"}]},
    ]

    events = GoogleCalendarReader(service, "cal-id").list_events(*window)

    assert [e.title for e in events] == ["A", "B"]
    second_call = service.events.return_value.list.call_args_list[1]
    assert second_call.kwargs["pageToken"] == "p2"


def test_upstream_errors_propagate(window):
    service = MagicMock()
    service.events.return_value.list.return_value.execute.side_effect = RuntimeError("quota")

    with pytest.raises(RuntimeError, match="quota"):
        GoogleCalendarReader(service, "cal-id").list_events(*window)


def test_open_calendar_rejects_malformed_json():
    with pytest.raises(ConfigError, match="GCP_SERVICE_ACCOUNT"):
        open_calendar("{not json", "cal-id")


def test_open_calendar_rejects_non_object():
    with pytest.raises(ConfigError):
        open_calendar("[1, 2]", "cal-id")


def test_open_calendar_builds_readonly_service():
    with patch("calendar_digest.google_calendar.service_account.Credentials.from_service_account_info") as from_info, \
            patch("calendar_digest.google_calendar.build") as build:
        reader = open_calendar('{"type": "service_account"}', "cal-id")

    from_info.assert_called_once_with({"type": "service_account"}, scopes=SCOPES)
    build.assert_called_once_with("calendar", "v3", credentials=from_info.return_value, cache_discovery=False)
    assert reader.service is build.return_value
    assert reader.calendar_id == "cal-id"
