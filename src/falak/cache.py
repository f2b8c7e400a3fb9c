"""Caller-owned memoization of computed days.

The engine itself never caches. A caller that recomputes the same days
(for example a month view refreshed every minute) creates a
ComputationCache and passes it to ``schedule.daily``.
"""

import hashlib
import json
import logging
from dataclasses import asdict
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping

from falak.models import CalculationParameters, EventKind, GeoCoordinates

log = logging.getLogger(__name__)


def _canonical(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(_canonical(k)): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def cache_key(
    coordinates: GeoCoordinates,
    day: date,
    params: CalculationParameters,
    labels: Mapping[EventKind, str] | None = None,
) -> str:
    """SHA-256 hex digest of a canonical JSON rendering of the inputs."""
    payload = {
        "coordinates": asdict(coordinates),
        "date": day.isoformat(),
        "params": _canonical(asdict(params)),
        "labels": None if labels is None else _canonical(dict(labels)),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class ComputationCache:
    """Explicit key → value store with hit/miss counters."""

    def __init__(self, max_entries: int | None = None) -> None:
        self._entries: dict[str, Any] = {}
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        if key in self._entries:
            self.hits += 1
            return self._entries[key]
        self.misses += 1
        value = compute()
        if self._entries and self.max_entries is not None and len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            log.debug("Cache full; evicted %s", oldest[:12])
        self._entries[key] = value
        return value

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
