"""
Gas ledger and the shared handle through which stores update it.

Enforcement Notes:
1. `total` only grows, except through an explicit `reset_total()`.
2. `last` is overwritten by every operation, never accumulated.
3. Each operation bumps exactly one counter by exactly one.
"""

import threading
from dataclasses import dataclass, asdict

from .cost_model import saturating_add
from .operations import OperationKind


@dataclass(frozen=True)
class GasUsage:
    """Immutable snapshot of a ledger, used for assertions and reporting."""
    total: int = 0
    last: int = 0
    read_cnt: int = 0
    write_cnt: int = 0
    delete_cnt: int = 0
    iter_next_cnt: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


_COUNTER_FIELDS = {
    OperationKind.READ: "read_cnt",
    OperationKind.WRITE: "write_cnt",
    OperationKind.REMOVE: "delete_cnt",
    OperationKind.ITER_NEXT: "iter_next_cnt",
}


@dataclass
class GasLedger:
    """Running gas counters for one store.

    Pure arithmetic; all mutation goes through `record()`.
    """
    total: int = 0
    last: int = 0
    read_cnt: int = 0
    write_cnt: int = 0
    delete_cnt: int = 0
    iter_next_cnt: int = 0

    def record(self, kind: OperationKind, amount: int) -> None:
        """Charge one operation of `kind` costing `amount` gas."""
        self.last = amount
        self.total = saturating_add(self.total, amount)
        counter = _COUNTER_FIELDS[kind]
        setattr(self, counter, saturating_add(getattr(self, counter), 1))

    def snapshot(self) -> GasUsage:
        return GasUsage(**asdict(self))


class SharedLedgerHandle:
    """Interior-mutable cell holding a store's ledger.

    Lets anyone holding a plain (shared) reference to a metered store charge
    gas, which is what host frameworks need once a store has been handed to
    them. The cell is single-threaded: concurrent `record()` calls from
    several threads without outside locking may interleave arbitrarily.
    Use `LockedLedgerHandle` when a store is shared across threads.
    """

    def __init__(self):
        self._ledger = GasLedger()

    def record(self, kind: OperationKind, amount: int) -> None:
        self._ledger.record(kind, amount)

    def snapshot(self) -> GasUsage:
        """Copy of the current counters; never a live view."""
        return self._ledger.snapshot()

    def reset_total(self) -> None:
        """Zero the cumulative total, leaving `last` and counters as they are."""
        self._ledger.total = 0

    def take(self) -> GasUsage:
        """Return the current counters and start over from an empty ledger."""
        usage = self._ledger.snapshot()
        self._ledger = GasLedger()
        return usage

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.snapshot()!r})"


class LockedLedgerHandle(SharedLedgerHandle):
    """Ledger handle safe to share between threads.

    Same contract as `SharedLedgerHandle`; every access is serialized by a
    mutex, so snapshots never observe a half-applied `record()`.
    """

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()

    def record(self, kind: OperationKind, amount: int) -> None:
        with self._lock:
            super().record(kind, amount)

    def snapshot(self) -> GasUsage:
        with self._lock:
            return super().snapshot()

    def reset_total(self) -> None:
        with self._lock:
            super().reset_total()

    def take(self) -> GasUsage:
        with self._lock:
            return super().take()
