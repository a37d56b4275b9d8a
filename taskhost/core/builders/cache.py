from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Dict, Union


class PathCache:
    """
    Process-lifetime cache keyed by resolved absolute path.

    No TTL and no invalidation: a path that was loaded once keeps returning
    the same value until the process exits (or clear() is called by tests).
    Failed loads are not stored.
    """

    def __init__(self, name: str):
        self.name = name
        self._store: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(path: Union[str, Path]) -> str:
        return str(Path(path).resolve())

    def get_or_load(self, path: Union[str, Path], loader: Callable[[Path], Any]) -> Any:
        key = self.key(path)
        with self._lock:
            if key in self._store:
                self.hits += 1
                return self._store[key]
            self.misses += 1

        # load outside the lock: module execution may recurse into the cache
        value = loader(Path(key))

        with self._lock:
            # first writer wins so every caller sees the same object
            return self._store.setdefault(key, value)

    def __contains__(self, path: Union[str, Path]) -> bool:
        return self.key(path) in self._store

    def __len__(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, Any]:
        return {
            "kind": self.name,
            "hits": self.hits,
            "misses": self.misses,
            "entries": len(self._store),
        }
