"""
Google Calendar event resources, reduced to what the digest needs.

The API returns each bound in one of two shapes:
- ``date``: all-day events ("2024-06-10"); the end date is exclusive
- ``dateTime``: timed events ("2024-06-10T13:00:00+09:00")

Reference: https://developers.google.com/calendar/api/v3/reference/events
"""

from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventTime(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: Optional[Date] = None
    date_time: Optional[datetime] = Field(None, alias="dateTime")
    time_zone: Optional[str] = Field(None, alias="timeZone")


class CalendarEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = Field(None, alias="summary")
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[EventTime] = None
    end: Optional[EventTime] = None
    status: Optional[str] = None
    html_link: Optional[str] = Field(None, alias="htmlLink")

    @classmethod
    def from_api(cls, item: dict) -> "CalendarEvent":
        return cls.model_validate(item)

    def is_all_day(self) -> bool:
        """Both bounds are calendar dates."""
        return bool(
            self.start and self.end
            and self.start.date is not None
            and self.end.date is not None
        )

    def is_timed(self) -> bool:
        """Both bounds are date-times."""
        return bool(
            self.start and self.end
            and self.start.date_time is not None
            and self.end.date_time is not None
        )
