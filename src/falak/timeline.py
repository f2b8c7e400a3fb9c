"""Timeline normalization — one day's events mapped onto [0, 1] for animation.

0 is today's Fajr and 1 is the next day's Fajr. Dhuhr is drawn at the
midpoint of sunrise and maghrib so the sun's arc stays symmetric; the real
Dhuhr instant is carried alongside for tabular display.
"""

import logging
from datetime import datetime

from falak.julian import as_utc
from falak.models import DaySchedule, EventKind, Timeline

log = logging.getLogger(__name__)

MAX_PROGRESS = 0.999

FALLBACK_TIMELINE = Timeline(
    fajr=0.0,
    sunrise=0.1,
    dhuhr=0.45,
    asr=0.65,
    maghrib=0.8,
    isha=0.87,
    mid_night=0.93,
    last_third=0.95,
    end=1.0,
    is_fallback=True,
)

_PHASES: tuple[tuple[str, EventKind], ...] = (
    ("fajr", EventKind.FAJR),
    ("sunrise", EventKind.SUNRISE),
    ("dhuhr", EventKind.DHUHR),
    ("asr", EventKind.ASR),
    ("maghrib", EventKind.MAGHRIB),
    ("isha", EventKind.ISHA),
    ("mid_night", EventKind.MIDNIGHT),
    ("last_third", EventKind.LAST_THIRD_NIGHT),
)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def build_timeline(day: DaySchedule) -> Timeline:
    """Map ``day``'s events onto [0, 1].

    Falls back to FALLBACK_TIMELINE when any event or the next Fajr is
    missing, or the day spans no time.
    """
    instants = {kind: day.instant_of(kind) for kind in EventKind}
    anchor = instants[EventKind.FAJR]
    if day.next_fajr is None or any(instant is None for instant in instants.values()):
        log.debug("Incomplete schedule for %s; using the fallback timeline", day.date)
        return FALLBACK_TIMELINE
    span = (day.next_fajr - anchor).total_seconds()
    if span <= 0:
        log.debug("Non-positive Fajr span for %s; using the fallback timeline", day.date)
        return FALLBACK_TIMELINE

    def fraction(kind: EventKind) -> float:
        return _clamp01((instants[kind] - anchor).total_seconds() / span)

    sunrise = fraction(EventKind.SUNRISE)
    maghrib = fraction(EventKind.MAGHRIB)
    return Timeline(
        fajr=0.0,
        sunrise=sunrise,
        dhuhr=(sunrise + maghrib) / 2,
        asr=fraction(EventKind.ASR),
        maghrib=maghrib,
        isha=fraction(EventKind.ISHA),
        mid_night=fraction(EventKind.MIDNIGHT),
        last_third=fraction(EventKind.LAST_THIRD_NIGHT),
        end=1.0,
        dhuhr_instant=instants[EventKind.DHUHR],
    )


def time_to_progress(now: datetime, day: DaySchedule) -> float:
    """Position of ``now`` between today's Fajr (0) and the next Fajr (0.999).

    Naive ``now`` is taken as UTC.
    """
    now = as_utc(now)
    fajr = day.instant_of(EventKind.FAJR)
    if fajr is None or day.next_fajr is None:
        return 0.0
    if now <= fajr:
        return 0.0
    if now >= day.next_fajr:
        return MAX_PROGRESS
    span = (day.next_fajr - fajr).total_seconds()
    return min((now - fajr).total_seconds() / span, MAX_PROGRESS)


def phase_at(progress: float, timeline: Timeline) -> EventKind:
    """Event whose segment of the timeline contains ``progress``."""
    current = EventKind.FAJR
    for attribute, kind in _PHASES:
        if progress >= getattr(timeline, attribute):
            current = kind
    return current
