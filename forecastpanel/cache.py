from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable

from pydantic import BaseModel, ConfigDict

from forecastpanel.models import ForecastResult


def now_ms() -> int:
    """Wall-clock time in integer milliseconds."""
    return int(time.time() * 1000)


class CacheEntry(BaseModel):
    """Typed snapshot for a single place."""

    model_config = ConfigDict(frozen=True)

    data: ForecastResult
    fetched_at_ms: int

    def age_ms(self, now: int) -> int:
        return now - self.fetched_at_ms


class ForecastCache:
    """In-memory forecast cache for a single-worker async app.

    Keys are place names used verbatim ("Paris" and "paris" are different
    entries).  Every key stores a ``CacheEntry``; a failed fetch never
    touches the store.

    ``max_entries`` of 0 means unbounded.  Otherwise the least recently used
    place is dropped when a new one would exceed the bound.
    """

    def __init__(
        self,
        *,
        max_entries: int = 0,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self.max_entries = max_entries
        self.clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, place: object) -> bool:
        return place in self._store

    def get(self, place: str) -> CacheEntry | None:
        """Return the entry for *place* regardless of age."""
        return self._store.get(place)

    def get_fresh(self, place: str, max_age_ms: int) -> CacheEntry | None:
        """Return the entry for *place* if younger than *max_age_ms*.

        A negative age means the wall clock stepped backwards since the
        fetch; such an entry is treated as stale.
        """
        entry = self._store.get(place)
        if entry is None:
            return None
        age = entry.age_ms(self.clock())
        if age < 0 or age >= max_age_ms:
            return None
        self._store.move_to_end(place)
        return entry

    def set(self, place: str, data: ForecastResult) -> CacheEntry:
        entry = CacheEntry(data=data, fetched_at_ms=self.clock())
        self._store[place] = entry
        self._store.move_to_end(place)
        if self.max_entries:
            while len(self._store) > self.max_entries:
                self._store.popitem(last=False)
        return entry

    def discard(self, place: str) -> None:
        self._store.pop(place, None)

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        n = len(self._store)
        self._store.clear()
        return n

    def keys(self) -> list[str]:
        return list(self._store.keys())

    def timestamps(self) -> dict[str, int]:
        """Return {place: fetched_at_ms} for every cached place."""
        return {k: v.fetched_at_ms for k, v in self._store.items()}
