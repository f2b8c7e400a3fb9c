import dataclasses
from datetime import datetime

import pytest
from pytz import utc

from falak.chart import build_series_order, prepare_chart_data, reduce_values, value_range
from falak.compute import EVENT_ORDER
from falak.formatting import MINUTES_IN_DAY
from falak.models import EventKind, Schedule
from falak.schedule import monthly

from conftest import OTTAWA

NOW = datetime(2024, 3, 1, tzinfo=utc)


@pytest.fixture
def march(ottawa_params, march_11):
    return monthly(None, OTTAWA, ottawa_params, march_11, NOW)


def test_series_order_follows_the_first_day(march):
    assert build_series_order(march) == list(EVENT_ORDER)


def test_series_order_skips_empty_days(march):
    empty_first = dataclasses.replace(march.dates[0], events=())
    partial = Schedule(label="x", dates=(empty_first,) + march.dates[1:])
    assert build_series_order(partial) == list(EVENT_ORDER)
    assert build_series_order(Schedule(label="x", dates=(empty_first,))) == []


def test_prepare_chart_data(march):
    prepared = prepare_chart_data(march)
    assert len(prepared.x_values) == 31
    assert [entry.event for entry in prepared.series] == list(EVENT_ORDER)

    fajr = prepared.series[0]
    assert fajr.label == "Fajr"
    assert len(fajr.values) == 31
    assert prepared.base_fajr_min == min(fajr.values)
    assert fajr.time_labels[0] == march.dates[0].events[0].local_label

    for entry in prepared.series:
        assert all(value >= prepared.base_fajr_min for value in entry.values)
    last_third = next(entry for entry in prepared.series if entry.event is EventKind.LAST_THIRD_NIGHT)
    assert all(value > MINUTES_IN_DAY for value in last_third.values)


def test_missing_event_leaves_a_gap(march):
    trimmed = dataclasses.replace(march.dates[3], events=march.dates[3].events[:-1])
    schedule = Schedule(label="x", dates=march.dates[:3] + (trimmed,) + march.dates[4:])
    last_third = prepare_chart_data(schedule).series[-1]
    assert last_third.values[3] is None
    assert last_third.time_labels[3] is None


def test_empty_schedules():
    assert prepare_chart_data(None) is None
    assert prepare_chart_data(Schedule(label="x", dates=())) is None


def test_reduce_values():
    assert reduce_values([None, 3.0, 1.0, None, 2.0], min, float("inf")) == 1.0
    assert reduce_values([None, 3.0, float("nan"), 5.0], max, float("-inf")) == 5.0
    assert reduce_values([None], max, -1.0) == -1.0


def test_value_range(march):
    prepared = prepare_chart_data(march)
    low, high = value_range(prepared.series[0])
    values = prepared.series[0].values
    assert low < min(values)
    assert high > max(values)
    assert value_range(dataclasses.replace(prepared.series[0], values=[None])) is None
