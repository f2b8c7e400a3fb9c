"""CLI entry point for printing a prayer timetable.

Location and method come from FALAK_* environment variables (or .env), then:
    falak-timetable                     # today
    falak-timetable month 2024-03-11    # every day of March 2024
    falak-timetable year 2024-01-01
"""

import argparse
import logging
import sys
from datetime import date, datetime

from pytz import timezone, utc

from falak.config import load_settings
from falak.formatting import format_coordinate, format_date, format_time_remaining
from falak.hijri import format_hijri_date, hijri_date
from falak.i18n import event_labels, t
from falak.models import DaySchedule, FalakError
from falak.schedule import daily, monthly, yearly
from falak.timeline import build_timeline, phase_at, time_to_progress

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="falak-timetable", description="Print prayer times.")
    parser.add_argument("period", nargs="?", choices=("day", "month", "year"), default="day")
    parser.add_argument("date", nargs="?", type=date.fromisoformat, help="YYYY-MM-DD (default: today)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log calculation details")
    return parser.parse_args(argv)


def _print_day(day: DaySchedule, lang: str, hijri_offset: int) -> None:
    hijri = format_hijri_date(hijri_date(day.date, hijri_offset), lang)
    print(f"{format_date(day.date)}  ({hijri})")
    for event in day.events:
        marker = "*" if event.kind is day.current_event else " "
        print(f" {marker} {event.label:<24} {event.local_label:>8}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
        params = settings.parameters()
    except FalakError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    now = datetime.now(utc)
    anchor = args.date or now.astimezone(timezone(settings.time_zone)).date()
    labels = event_labels(settings.lang)
    coords = settings.coordinates

    print(
        f"{t('timetable_title', settings.lang)}: "
        f"{format_coordinate(coords.latitude, 'N', 'S')}, "
        f"{format_coordinate(coords.longitude, 'E', 'W')}  "
        f"[{settings.method.label}, {settings.time_zone}]"
    )

    if args.period == "day":
        day = daily(labels, coords, params, anchor, now)
        _print_day(day, settings.lang, settings.hijri_offset)
        if day.next_event_time is not None:
            print(f"Next event in {format_time_remaining(day.next_event_time - now)}")
        timeline = build_timeline(day)
        progress = time_to_progress(now, day)
        log.debug("Progress %.3f, phase %s", progress, phase_at(progress, timeline).value)
        return 0

    builder = monthly if args.period == "month" else yearly
    schedule = builder(labels, coords, params, anchor, now)
    print(schedule.label)
    for day in schedule.dates:
        print()
        _print_day(day, settings.lang, settings.hijri_offset)
    return 0


if __name__ == "__main__":
    sys.exit(main())
