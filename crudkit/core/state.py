"""In-process key-value application state, shared across requests under one lock."""

import threading
from typing import Any


class AppState:
    """
    Process-lifetime mapping of arbitrary keys to arbitrary values.

    Created once per application and injected into handlers; contents are lost
    on restart. All access goes through a single coarse lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> Any | None:
        """Insert or replace; return the previous value, or None if the key was new."""
        with self._lock:
            previous = self._data.get(key)
            self._data[key] = value
            return previous

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def delete(self, key: str) -> Any | None:
        """Remove the entry; return the removed value, or None if it was absent."""
        with self._lock:
            return self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
