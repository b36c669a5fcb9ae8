import json
import logging
from datetime import datetime
from typing import List, Protocol

from google.oauth2 import service_account
from googleapiclient.discovery import build

from calendar_digest.config import ConfigError
from calendar_digest.models import CalendarEvent

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


class CalendarReader(Protocol):
    def list_events(self, time_min: datetime, time_max: datetime) -> List[CalendarEvent]:
        ...


class GoogleCalendarReader:
    def __init__(self, service, calendar_id: str):
        self.service = service
        self.calendar_id = calendar_id

    def list_events(self, time_min: datetime, time_max: datetime) -> List[CalendarEvent]:
        """Recurring events come back expanded, ordered by start time."""
        items = []
        page_token = None
        while True:
            response = self.service.events().list(
                calendarId=self.calendar_id,
                timeMin=time_min.isoformat(),
                timeMax=time_max.isoformat(),
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            ).execute()
            items.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.info("Fetched %s events from %s to %s", len(items), time_min.isoformat(), time_max.isoformat())
        return [CalendarEvent.from_api(item) for item in items]


def _credentials(credential_json: str):
    try:
        info = json.loads(credential_json)
    except json.JSONDecodeError as exc:
        raise ConfigError("GCP_SERVICE_ACCOUNT is not valid JSON") from exc
    if not isinstance(info, dict):
        raise ConfigError("GCP_SERVICE_ACCOUNT must be a JSON object")
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (KeyError, ValueError) as exc:
        raise ConfigError(f"GCP_SERVICE_ACCOUNT is not a usable service account key: {exc}") from exc


def open_calendar(credential_json: str, calendar_id: str) -> GoogleCalendarReader:
    creds = _credentials(credential_json)
    service = build("calendar", "v3", credentials=creds, cache_discovery=False)
    return GoogleCalendarReader(service, calendar_id)
