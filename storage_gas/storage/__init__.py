"""
Storage layer for Storage Gas.

Provides the key-value capability interface, an in-memory backend and the
gas-metering decorator.
"""

from .backend import Order, Record, StorageBackend
from .memory import MemoryStorage
from .metered import MeteredStorage

__all__ = ["MemoryStorage", "MeteredStorage", "Order", "Record", "StorageBackend"]
