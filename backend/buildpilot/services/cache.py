# buildpilot/services/cache.py
from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Dict, Optional

class ReadThroughCache:
    # Writers must put or invalidate after a successful remote write.
    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str, loader: Callable[[str], Optional[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self.hits += 1
                return copy.deepcopy(entry)
            self.misses += 1
        value = loader(key)
        if value is not None:
            self.put(key, value)
        return value

    def put(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[key] = copy.deepcopy(value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
