"""
Storage Gas.

Gas accounting for an in-memory ordered key-value store, used to estimate
what a blockchain VM would charge for storage access during testing.
"""

from .core.cost_model import DEFAULT_COST_CONFIG, CostConfig, calculate_cost
from .core.ledger import GasUsage, LockedLedgerHandle, SharedLedgerHandle
from .core.operations import OperationKind, OperationRecord
from .storage.backend import Order, StorageBackend
from .storage.memory import MemoryStorage
from .storage.metered import MeteredStorage

__all__ = [
    "DEFAULT_COST_CONFIG",
    "CostConfig",
    "GasUsage",
    "LockedLedgerHandle",
    "MemoryStorage",
    "MeteredStorage",
    "OperationKind",
    "OperationRecord",
    "Order",
    "SharedLedgerHandle",
    "StorageBackend",
    "calculate_cost",
]
