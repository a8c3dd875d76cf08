import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:  # pragma: no cover - interface
        ...

    def set(self, key: str, value: Any) -> None:  # pragma: no cover - interface
        ...

    def delete(self, key: str) -> None:  # pragma: no cover - interface
        ...

    def keys(self) -> List[str]:  # pragma: no cover - interface
        ...


class InMemoryStore:
    """Dict-backed store, safe to share between request threads."""

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class KeyedLocks:
    """One lock per key, released back to the pool once nobody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
