"""Chart series builder — per-event minutes-since-midnight across a schedule.

Output is plain data for any plotting layer: one series per event, one value
per day. Night events that fall after local midnight are shifted by a full
day so each series stays continuous.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable

from pytz import timezone

from falak.formatting import MINUTES_IN_DAY
from falak.models import EventKind, PrayerEvent, Schedule

MIN_PADDING = 5.0  # Minutes
PADDING_RATIO = 0.15
MIN_SPAN = 30.0


@dataclass
class ChartSeries:
    """One event's values across the schedule. None marks a missing day."""

    event: EventKind
    label: str
    values: list[float | None]
    time_labels: list[str | None]


@dataclass
class PreparedChartData:
    x_values: list[date]
    series: list[ChartSeries]
    base_fajr_min: float | None  # Earliest Fajr, in minutes since midnight


def build_series_order(schedule: Schedule) -> list[EventKind]:
    """Event order of the first day with events, then any event seen later."""
    first = next((day for day in schedule.dates if day.events), None)
    if first is None:
        return []
    order = [event.kind for event in first.events]
    seen = set(order)
    for day in schedule.dates:
        for event in day.events:
            if event.kind not in seen:
                order.append(event.kind)
                seen.add(event.kind)
    return order


def reduce_values(
    values: Iterable[float | None],
    reducer: Callable[[float, float], float],
    initial: float,
) -> float:
    """Fold ``values`` with ``reducer``, skipping None; ``initial`` if nothing is left."""
    acc: float | None = None
    for value in values:
        if value is None or value != value:  # NaN
            continue
        acc = value if acc is None else reducer(acc, value)
    return initial if acc is None else acc


def _minutes_since_midnight(instant: datetime, time_zone: str) -> float:
    local = instant.astimezone(timezone(time_zone))
    return local.hour * 60 + local.minute + local.second / 60 + local.microsecond / 60_000_000


def _find(events: tuple[PrayerEvent, ...], kind: EventKind) -> PrayerEvent | None:
    for event in events:
        if event.kind is kind:
            return event
    return None


def prepare_chart_data(schedule: Schedule | None) -> PreparedChartData | None:
    """Turn a month or year schedule into chart series.

    Returns:
        PreparedChartData, or None for an empty schedule.
    """
    if schedule is None or not schedule.dates:
        return None

    order = build_series_order(schedule)
    first_events = schedule.dates[0].events
    series = []
    for kind in order:
        first = _find(first_events, kind)
        values: list[float | None] = []
        time_labels: list[str | None] = []
        for day in schedule.dates:
            event = _find(day.events, kind)
            if event is None:
                values.append(None)
                time_labels.append(None)
                continue
            values.append(_minutes_since_midnight(event.instant, day.time_zone))
            time_labels.append(event.local_label)
        series.append(
            ChartSeries(
                event=kind,
                label=first.label if first is not None else kind.value,
                values=values,
                time_labels=time_labels,
            )
        )

    base_fajr_min = None
    fajr = next((entry for entry in series if entry.event is EventKind.FAJR), None)
    if fajr is not None:
        lowest = reduce_values(fajr.values, min, float("inf"))
        if lowest != float("inf"):
            base_fajr_min = lowest
            for entry in series:
                entry.values = [
                    value + MINUTES_IN_DAY if value is not None and value < lowest else value
                    for value in entry.values
                ]

    return PreparedChartData(
        x_values=[day.date for day in schedule.dates],
        series=series,
        base_fajr_min=base_fajr_min,
    )


def value_range(entry: ChartSeries) -> tuple[float, float] | None:
    """Padded (low, high) y-axis range for one series, or None without values."""
    low = reduce_values(entry.values, min, float("inf"))
    high = reduce_values(entry.values, max, float("-inf"))
    if low == float("inf") or high == float("-inf"):
        return None
    padding = max(MIN_PADDING, (high - low) * PADDING_RATIO)
    padded_low = max(low - padding, 0.0)
    padded_high = high + padding
    if padded_high <= padded_low:
        padded_high = padded_low + MIN_SPAN
    return padded_low, padded_high
