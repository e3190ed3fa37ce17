"""In-process keyed store backing OAuth states and token records."""

from __future__ import annotations

from threading import Lock
from typing import Callable, Generic, Hashable, Optional, Protocol, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyValueStore(Protocol[K, V]):
    """Minimal keyed-store contract shared by the state and token stores."""

    def get(self, key: K) -> Optional[V]: ...

    def put(self, key: K, value: V) -> None: ...

    def put_if_absent(self, key: K, value: V) -> bool: ...

    def delete(self, key: K) -> Optional[V]: ...

    def sweep(self, predicate: Callable[[K, V], bool]) -> int: ...


class InMemoryKeyValueStore(Generic[K, V]):
    """Dict-backed store where each operation holds a lock for its whole body."""

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        self._lock = Lock()

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def put_if_absent(self, key: K, value: V) -> bool:
        """Insert only when ``key`` is free; return whether the insert happened."""
        with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
            return True

    def delete(self, key: K) -> Optional[V]:
        """Remove ``key`` and return the previous value, if any."""
        with self._lock:
            return self._data.pop(key, None)

    def sweep(self, predicate: Callable[[K, V], bool]) -> int:
        """Delete every entry matching ``predicate`` and return how many went."""
        with self._lock:
            doomed = [key for key, value in self._data.items() if predicate(key, value)]
            for key in doomed:
                del self._data[key]
        return len(doomed)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


__all__ = ["InMemoryKeyValueStore", "KeyValueStore"]
