"""
Daily digest: picks today's events out of a fetched window and renders
them into the chat message body.

Every day-boundary decision is made in the timezone passed in by the
caller, never in the process's local timezone.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional, Tuple

from calendar_digest.models import CalendarEvent

RULE = "--------------------------------------"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class Labels:
    header: str
    all_day: str
    timed: str
    detail: str
    location: str
    no_title: str
    weekdays: Tuple[str, ...]


LABELS = {
    "ja": Labels(
        header="今日 {date}の予定",
        all_day="終日予定",
        timed="時間予定",
        detail="詳細:",
        location="場所:",
        no_title="(無題)",
        weekdays=("月", "火", "水", "木", "金", "土", "日"),
    ),
    "en": Labels(
        header="Today {date}",
        all_day="All-day",
        timed="Timed",
        detail="detail:",
        location="location:",
        no_title="(No title)",
        weekdays=("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    ),
}


def _weekday(d: date, labels: Labels) -> str:
    return labels.weekdays[d.weekday()]


def format_day(d: date, labels: Labels) -> str:
    """06/10 (月)"""
    return f"{d:%m/%d} ({_weekday(d, labels)})"


def format_full_day(d: date, labels: Labels) -> str:
    """2024/06/10 (月)"""
    return f"{d:%Y/%m/%d} ({_weekday(d, labels)})"


def _details(title, description, location, labels: Labels) -> str:
    text = title or labels.no_title
    if description:
        text += f"\n{labels.detail} {description}"
    if location:
        text += f"\n{labels.location} {location}"
    return text


@dataclass(frozen=True)
class AllDayLine:
    title: Optional[str]
    description: Optional[str]
    location: Optional[str]
    start: date
    end: date
    single_day: bool

    def render(self, labels: Labels) -> str:
        body = _details(self.title, self.description, self.location, labels)
        if self.single_day:
            return body
        return f"[{format_day(self.start, labels)} - {format_day(self.end, labels)}]\n{body}"


@dataclass(frozen=True)
class TimedLine:
    title: Optional[str]
    description: Optional[str]
    location: Optional[str]
    start: datetime
    end: datetime
    crossing: bool

    def render(self, labels: Labels) -> str:
        if self.crossing:
            span = (
                f"[{format_day(self.start.date(), labels)} {self.start:%H:%M}"
                f" - {format_day(self.end.date(), labels)} {self.end:%H:%M}]"
            )
        else:
            span = f"[{self.start:%H:%M} - {self.end:%H:%M}]"
        return f"{span}\n{_details(self.title, self.description, self.location, labels)}"


def localize(now: datetime, tz: tzinfo) -> datetime:
    """Naive values are read as wall-clock time in ``tz``."""
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def fetch_window(now: datetime, tz: tzinfo, days: int) -> Tuple[datetime, datetime]:
    """Start of the day ``days`` back through 23:59:59 of the day ``days`` ahead."""
    today = localize(now, tz).date()
    lower = datetime.combine(today - timedelta(days=days), time.min, tzinfo=tz)
    upper = datetime.combine(today + timedelta(days=days), time(23, 59, 59), tzinfo=tz)
    return lower, upper


def select_all_day(events: Iterable[CalendarEvent], today: date) -> List[AllDayLine]:
    tomorrow = today + timedelta(days=1)
    lines = []
    for event in events:
        if not event.is_all_day():
            continue
        start, end = event.start.date, event.end.date
        # end is exclusive, so [yesterday, today] finished before today began
        if not (start == today or start <= today < end):
            continue
        lines.append(AllDayLine(
            title=event.title,
            description=event.description,
            location=event.location,
            start=start,
            end=end,
            single_day=start == today and end == tomorrow,
        ))
    return lines


def select_timed(events: Iterable[CalendarEvent], today: date, tz: tzinfo) -> List[TimedLine]:
    day_start = datetime.combine(today, time.min, tzinfo=tz)
    day_end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=tz)
    lines = []
    for event in events:
        if not event.is_timed():
            continue
        start = localize(event.start.date_time, tz)
        end = localize(event.end.date_time, tz)
        # half-open [day_start, day_end); an event ending at 00:00 today belongs to yesterday
        if not (start.date() == today or (start < day_end and end > day_start)):
            continue
        lines.append(TimedLine(
            title=event.title,
            description=event.description,
            location=event.location,
            start=start,
            end=end,
            crossing=start.date() != today or end.date() != today,
        ))
    return lines


def _section(heading: str, lines, labels: Labels) -> List[str]:
    out = [f"■{heading}"]
    for index, line in enumerate(lines, start=1):
        out.append(f"{index}. {line.render(labels)}\n")
    return out


def build_digest(now: datetime, events: Iterable[CalendarEvent], tz: tzinfo, locale: str = "ja") -> str:
    labels = LABELS[locale]
    events = list(events)
    today = localize(now, tz).date()
    all_day_lines = select_all_day(events, today)
    timed_lines = select_timed(events, today, tz)
    logger.info(
        "Selected %s all-day and %s timed events for %s out of %s",
        len(all_day_lines), len(timed_lines), today.isoformat(), len(events),
    )

    message = [labels.header.format(date=format_full_day(today, labels)), "", RULE]
    message += _section(labels.all_day, all_day_lines, labels)
    message.append(RULE)
    message += _section(labels.timed, timed_lines, labels)
    message.append(RULE)
    return "\n".join(message)
