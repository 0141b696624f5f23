"""
calculation_engine/cache.py
Optional memoisation of dashboard results.

Keyed on (dataset fingerprint, entry point, scope key).  Aggregations are
pure, so a hit returns exactly what a recomputation would.  Entries are
copied in and out; callers may mutate what they get back.
"""
import copy
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

from config.settings import settings
from monitoring import get_logger

log = get_logger(__name__)


class AggregationCache:
    """Bounded LRU cache shared by engine entry points."""

    def __init__(self, max_size: Optional[int] = None) -> None:
        self.max_size = max_size if max_size is not None else settings.cache_size
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(fingerprint: str, entry_point: str, scope_key: Hashable) -> tuple:
        return fingerprint, entry_point, scope_key

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            if key not in self._entries:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return copy.deepcopy(self._entries[key])

    def put(self, key: Hashable, value: Any) -> None:
        if self.max_size <= 0:
            return
        with self._lock:
            self._entries[key] = copy.deepcopy(value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("Cache entry evicted", entry_point=evicted[1] if isinstance(evicted, tuple) else None)

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.put(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = self.misses = 0
        log.info("Aggregation cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, int]:
        return {"size": len(self), "max_size": self.max_size, "hits": self.hits, "misses": self.misses}
