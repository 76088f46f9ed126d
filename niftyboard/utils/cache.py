# niftyboard/utils/cache.py
import time
from typing import Any, Dict

from niftyboard import config


class SimpleCache:
    def __init__(self, ttl_seconds: int = 300, max_entries: int = 1024):
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self.store: Dict[str, tuple[Any, float]] = {}

    def get(self, key: str):
        rec = self.store.get(key)
        if not rec:
            return None
        value, expiry = rec
        if expiry < time.time():
            del self.store[key]
            return None
        return value

    def set(self, key: str, value: Any):
        self.store.pop(key, None)
        if len(self.store) >= self.max_entries:
            self._evict()
        self.store[key] = (value, time.time() + self.ttl)

    def _evict(self):
        now = time.time()
        for key in [k for k, (_, expiry) in self.store.items() if expiry < now]:
            del self.store[key]
        # Still full: drop the oldest insertions
        while len(self.store) >= self.max_entries:
            del self.store[next(iter(self.store))]

    def invalidate(self, key: str):
        self.store.pop(key, None)

    def clear(self):
        self.store.clear()


cache = SimpleCache(ttl_seconds=config.CACHE_TTL_SECONDS, max_entries=config.CACHE_MAX_ENTRIES)


def get_cache() -> SimpleCache:
    return cache
