from datetime import date

from falak.cache import ComputationCache, cache_key
from falak.i18n import event_labels
from falak.methods import CalculationMethod

from conftest import MECCA, OTTAWA


def test_cache_key_is_stable_and_distinct(ottawa_params, march_11):
    key = cache_key(OTTAWA, march_11, ottawa_params)
    assert key == cache_key(OTTAWA, march_11, ottawa_params)
    assert len(key) == 64
    assert key != cache_key(MECCA, march_11, ottawa_params)
    assert key != cache_key(OTTAWA, date(2024, 3, 12), ottawa_params)
    assert key != cache_key(OTTAWA, march_11, ottawa_params, event_labels("ar"))


def test_cache_key_sees_adjustments(march_11):
    mwl = CalculationMethod.MUSLIM_WORLD_LEAGUE.parameters(time_zone="UTC")
    turkey = CalculationMethod.TURKEY.parameters(time_zone="UTC")
    # Same angles, different minute adjustments.
    assert (mwl.fajr_angle, mwl.isha_angle) == (turkey.fajr_angle, turkey.isha_angle)
    assert cache_key(OTTAWA, march_11, mwl) != cache_key(OTTAWA, march_11, turkey)


def test_get_or_compute_counts_hits_and_misses():
    cache = ComputationCache()
    calls = []

    def compute():
        calls.append(1)
        return "value"

    assert cache.get_or_compute("a", compute) == "value"
    assert cache.get_or_compute("a", compute) == "value"
    assert len(calls) == 1
    assert (cache.hits, cache.misses) == (1, 1)
    assert "a" in cache

    cache.clear()
    assert len(cache) == 0
    assert cache.hits == 0


def test_max_entries_evicts_the_oldest():
    cache = ComputationCache(max_entries=2)
    for key in ("a", "b", "c"):
        cache.get_or_compute(key, lambda: key)
    assert len(cache) == 2
    assert "a" not in cache
    assert "c" in cache
