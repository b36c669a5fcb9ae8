"""
Scheduled digest run: credential -> fetch -> build -> push.

Meant to be started by a timer (cron, systemd timer, cloud scheduler).
Nothing is retried; a failure anywhere stops the run before the push,
so a half-built digest is never sent.
"""

import argparse
import os
import logging
from datetime import datetime
from typing import Optional

from dateutil import parser as dtparser
from dotenv import load_dotenv

from calendar_digest.config import Settings, load_settings
from calendar_digest.digest import build_digest, fetch_window, localize
from calendar_digest.google_calendar import CalendarReader, open_calendar
from calendar_digest.line_client import LineClient

logger = logging.getLogger(__name__)


def run_digest(
    settings: Settings,
    now: Optional[datetime] = None,
    reader: Optional[CalendarReader] = None,
    client: Optional[LineClient] = None,
    dry_run: bool = False,
) -> str:
    tz = settings.timezone
    now = localize(now, tz) if now is not None else datetime.now(tz)

    if reader is None:
        reader = open_calendar(settings.gcp_service_account, settings.google_calendar_id)
    time_min, time_max = fetch_window(now, tz, settings.window_days)
    events = reader.list_events(time_min, time_max)

    text = build_digest(now, events, tz, settings.locale)
    if dry_run:
        logger.info("Dry run, digest not sent")
        return text

    if client is None:
        client = LineClient(settings.line_channel_access_token, timeout=settings.line_api_timeout)
    client.push_text(settings.line_user_id, text)
    logger.info("Digest for %s sent", now.date().isoformat())
    return text


def main(argv=None):
    arg_parser = argparse.ArgumentParser(description="Send today's calendar digest to LINE")
    arg_parser.add_argument("--now", help="reference time, e.g. '2024-06-10 10:00' (default: current time)")
    arg_parser.add_argument("--dry-run", action="store_true", help="print the digest instead of sending it")
    args = arg_parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    )

    now = dtparser.parse(args.now) if args.now else None
    try:
        settings = load_settings()
        text = run_digest(settings, now=now, dry_run=args.dry_run)
    except Exception:
        logger.exception("Digest run failed")
        raise
    if args.dry_run:
        print(text)


if __name__ == "__main__":
    main()
