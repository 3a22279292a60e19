from __future__ import annotations
import json
import time
from typing import Any, Callable, Dict, Optional, Tuple


def cache_key(intent: str, filters: Dict[str, Any]) -> str:
    return json.dumps({"intent": intent, "filters": filters}, sort_keys=True, default=str)


class TTLCache:
    """
    In-memory map with a fixed time-to-live. `ttl <= 0` disables it:
    `get` always misses and `set` is a no-op.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl)
        self._clock = clock
        self._data: Dict[str, Tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        entry = self._data.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._data[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        if self.enabled:
            self._data[key] = (self._clock(), value)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
