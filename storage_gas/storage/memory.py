"""
In-memory ordered key-value store.

Default collaborator for metered stores in tests and local runs.
Nothing is persisted.
"""

from bisect import bisect_left, insort
from typing import Dict, Iterator, List, Optional

from .backend import Order, Record


class MemoryStorage:
    """Dict-backed store that keeps a sorted key index for range scans."""

    def __init__(self, items: Optional[Dict[bytes, bytes]] = None):
        self._data: Dict[bytes, bytes] = {}
        self._keys: List[bytes] = []
        for key, value in (items or {}).items():
            self.set(key, value)

    def get(self, key: bytes) -> Optional[bytes]:
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite `key`. Empty values are rejected."""
        if not value:
            raise ValueError("value must not be empty")
        key = bytes(key)
        if key not in self._data:
            insort(self._keys, key)
        self._data[key] = bytes(value)

    def remove(self, key: bytes) -> None:
        """Delete `key`; missing keys are a no-op."""
        key = bytes(key)
        if self._data.pop(key, None) is not None:
            del self._keys[bisect_left(self._keys, key)]

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
        order: Order = Order.ASCENDING,
    ) -> Iterator[Record]:
        """Iterate `(key, value)` pairs with `start <= key < end`.

        Iterates over a snapshot of the matching entries, so the store may be
        modified while the iterator is alive.
        """
        lo = 0 if start is None else bisect_left(self._keys, start)
        hi = len(self._keys) if end is None else bisect_left(self._keys, end)
        keys = self._keys[lo:max(lo, hi)]
        if order == Order.DESCENDING:
            keys.reverse()
        return iter([(key, self._data[key]) for key in keys])

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: bytes) -> bool:
        return bytes(key) in self._data
