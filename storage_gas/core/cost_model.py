"""
Gas cost schedule and calculation.

Turns a storage operation and its operand sizes into a deterministic,
integer gas amount.

Byte-accounting conventions:
- Read: flat read cost plus per-byte read cost over key and found value
  (a miss counts as a zero-length value).
- Write: flat write cost plus per-byte write cost over key and value.
- Remove: flat delete cost plus per-byte delete cost over the key only.
- Iteration step: flat step cost plus the full cost of reading the entry.
"""

from dataclasses import dataclass, fields

from .operations import OperationKind, OperationRecord

# Largest value of an unsigned 64-bit counter; gas saturates here.
MAX_GAS = 2**64 - 1


def saturating_add(a: int, b: int) -> int:
    """Add two gas amounts, clamping at MAX_GAS instead of wrapping."""
    return min(a + b, MAX_GAS)


@dataclass(frozen=True)
class CostConfig:
    """Rates applied by the cost function.

    Modeled on the SDK's KV store gas pattern. Immutable once built so gas
    accumulated by a store stays reproducible.
    """
    read_cost_flat: int = 1000
    read_cost_per_byte: int = 3
    write_cost_flat: int = 2000
    write_cost_per_byte: int = 30
    delete_cost: int = 1000
    delete_cost_per_byte: int = 0
    iter_next_cost_flat: int = 30

    def __post_init__(self):
        """Validate every rate is a non-negative 64-bit integer."""
        for f in fields(self):
            rate = getattr(self, f.name)
            if isinstance(rate, bool) or not isinstance(rate, int):
                raise ValueError(f"{f.name} must be an integer, got {type(rate).__name__}")
            if rate < 0:
                raise ValueError(f"{f.name} must be >= 0")
            if rate > MAX_GAS:
                raise ValueError(f"{f.name} must be <= {MAX_GAS}")

    def as_dict(self) -> dict:
        """Rates keyed by field name, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Built-in schedule used whenever no explicit config is supplied
DEFAULT_COST_CONFIG = CostConfig()


def calculate_cost(op: OperationRecord, config: CostConfig = DEFAULT_COST_CONFIG) -> int:
    """Calculate the gas charged for a single storage operation.

    Pure function: the same record and schedule always give the same amount.

    Args:
        op: Operation kind and operand sizes
        config: Cost schedule to apply

    Returns:
        Gas amount, saturated at MAX_GAS
    """
    if op.kind == OperationKind.READ:
        cost = config.read_cost_flat + config.read_cost_per_byte * op.payload_len
    elif op.kind == OperationKind.WRITE:
        cost = config.write_cost_flat + config.write_cost_per_byte * op.payload_len
    elif op.kind == OperationKind.REMOVE:
        cost = config.delete_cost + config.delete_cost_per_byte * op.key_len
    else:
        cost = (
            config.iter_next_cost_flat
            + config.read_cost_flat
            + config.read_cost_per_byte * op.payload_len
        )

    return min(cost, MAX_GAS)
