"""
Gas-metered storage wrapper.

Charges gas for every storage access without changing what the wrapped
store returns or raises.
"""

import logging
from typing import Iterator, Optional

from rich.console import Console

from ..core.cost_model import DEFAULT_COST_CONFIG, CostConfig, calculate_cost
from ..core.ledger import GasUsage, LockedLedgerHandle, SharedLedgerHandle
from ..core.operations import OperationRecord
from .backend import Order, Record, StorageBackend
from .memory import MemoryStorage

logger = logging.getLogger(__name__)


class MeteredStorage:
    """Storage wrapper that records the gas each operation would cost.

    Behaves like the wrapped store and can be passed anywhere a
    `StorageBackend` is expected. Each get/set/remove call and each step of a
    range scan is charged exactly once, whether or not the wrapped store
    found, changed or rejected anything: gas pays for the attempt.

    The ledger lives in a `SharedLedgerHandle`, so code that only ever sees
    this object through a shared reference (e.g. a test framework that took
    ownership of the store) still updates the same counters the test later
    inspects.
    """

    def __init__(
        self,
        storage: Optional[StorageBackend] = None,
        gas_config: Optional[CostConfig] = None,
        *,
        thread_safe: bool = False,
    ):
        """Initialize the metered store.

        Args:
            storage: Store to wrap (defaults to an empty MemoryStorage)
            gas_config: Cost schedule (defaults to DEFAULT_COST_CONFIG)
            thread_safe: Guard the ledger with a mutex

        Raises:
            TypeError: If gas_config is not a CostConfig
        """
        if gas_config is None:
            gas_config = DEFAULT_COST_CONFIG
        if not isinstance(gas_config, CostConfig):
            raise TypeError("gas_config must be a CostConfig")

        self._storage = storage if storage is not None else MemoryStorage()
        self._gas_config = gas_config
        self._gas_used = LockedLedgerHandle() if thread_safe else SharedLedgerHandle()

    @classmethod
    def with_gas_config(cls, gas_config: CostConfig) -> "MeteredStorage":
        """Create an empty metered store using a custom cost schedule."""
        return cls(gas_config=gas_config)

    @property
    def gas_config(self) -> CostConfig:
        return self._gas_config

    @property
    def gas_used(self) -> SharedLedgerHandle:
        return self._gas_used

    @property
    def inner(self) -> StorageBackend:
        """The wrapped store; accesses made through it are not metered."""
        return self._storage

    def _charge(self, op: OperationRecord) -> int:
        gas = calculate_cost(op, self._gas_config)
        self._gas_used.record(op.kind, gas)
        logger.debug(
            "%s key_len=%d value_len=%s gas=%d",
            op.kind.value, op.key_len, op.value_len, gas,
        )
        return gas

    # Storage operations

    def get(self, key: bytes) -> Optional[bytes]:
        """Forward the lookup, then charge for the key and any value found."""
        value = None
        try:
            value = self._storage.get(key)
            return value
        finally:
            self._charge(OperationRecord.read(key, value))

    def set(self, key: bytes, value: bytes) -> None:
        """Charge the write, then forward it. Store errors propagate."""
        self._charge(OperationRecord.write(key, value))
        self._storage.set(key, value)

    def remove(self, key: bytes) -> None:
        """Charge the removal, then forward it. Store errors propagate."""
        self._charge(OperationRecord.remove(key))
        self._storage.remove(key)

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
        order: Order = Order.ASCENDING,
    ) -> Iterator[Record]:
        """Iterate `(key, value)` pairs in `[start, end)`, charging per step.

        Gas is charged as entries are pulled, not up front: a partially
        consumed iterator has paid only for what it yielded, and running off
        the end costs nothing. The iterator is single-pass; call `range`
        again to restart the scan.
        """
        records = self._storage.range(start, end, order)
        return self._metered_steps(records)

    def _metered_steps(self, records: Iterator[Record]) -> Iterator[Record]:
        for key, value in records:
            self._charge(OperationRecord.iter_next(key, value))
            yield key, value

    # Gas inspection

    def total_gas_used(self) -> int:
        return self._gas_used.snapshot().total

    def last_gas_used(self) -> int:
        """Gas charged by the most recent operation on this store."""
        return self._gas_used.snapshot().last

    def gas_summary(self) -> GasUsage:
        return self._gas_used.snapshot()

    def reset_gas(self) -> None:
        """Reset the cumulative total to 0; counters are kept."""
        self._gas_used.reset_total()

    def log_gas(self, console: Optional[Console] = None) -> None:
        """Pretty-print the current gas usage."""
        (console or Console()).print(self.gas_summary())

    def __repr__(self) -> str:
        return f"MeteredStorage(storage={self._storage!r}, gas_used={self._gas_used!r})"
