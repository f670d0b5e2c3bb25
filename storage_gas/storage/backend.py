"""
Key-value storage capability.

The minimal operation set a metered store needs from its collaborator.
"""

from enum import Enum
from typing import Iterator, Optional, Protocol, Tuple, runtime_checkable

Record = Tuple[bytes, bytes]


class Order(Enum):
    """Direction of a range scan over keys."""
    ASCENDING = 1
    DESCENDING = 2


@runtime_checkable
class StorageBackend(Protocol):
    """Ordered byte-key/byte-value store.

    `range` covers keys in `[start, end)`; a `None` bound is open.
    """

    def get(self, key: bytes) -> Optional[bytes]: ...

    def set(self, key: bytes, value: bytes) -> None: ...

    def remove(self, key: bytes) -> None: ...

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
        order: Order = Order.ASCENDING,
    ) -> Iterator[Record]: ...
