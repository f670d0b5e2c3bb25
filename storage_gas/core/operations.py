"""
Storage operation records.

Describes a single storage access in terms of its kind and operand sizes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OperationKind(Enum):
    """Kinds of storage access that are charged gas."""
    READ = "read"
    WRITE = "write"
    REMOVE = "remove"
    ITER_NEXT = "iter_next"


@dataclass(frozen=True)
class OperationRecord:
    """Transient description of one storage access.

    Built per call and handed straight to the cost function; never retained.
    Only byte lengths matter, the contents themselves are irrelevant to gas.
    """
    kind: OperationKind
    key_len: int
    value_len: Optional[int] = None

    def __post_init__(self):
        """Validate operand sizes."""
        if self.key_len < 0:
            raise ValueError("key_len must be >= 0")
        if self.value_len is not None and self.value_len < 0:
            raise ValueError("value_len must be >= 0")

    @property
    def payload_len(self) -> int:
        """Key length plus value length (absent value counts as 0)."""
        return self.key_len + (self.value_len or 0)

    @classmethod
    def read(cls, key: bytes, value: Optional[bytes]) -> "OperationRecord":
        """Record for a lookup; a miss is a zero-length value."""
        return cls(OperationKind.READ, len(key), len(value) if value is not None else 0)

    @classmethod
    def write(cls, key: bytes, value: bytes) -> "OperationRecord":
        return cls(OperationKind.WRITE, len(key), len(value))

    @classmethod
    def remove(cls, key: bytes) -> "OperationRecord":
        return cls(OperationKind.REMOVE, len(key))

    @classmethod
    def iter_next(cls, key: bytes, value: bytes) -> "OperationRecord":
        return cls(OperationKind.ITER_NEXT, len(key), len(value))
