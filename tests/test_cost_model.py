"""
Unit tests for the cost schedule and cost calculation.

Tests formula accuracy, validation and saturation.
"""

import dataclasses

import pytest

from storage_gas.core.cost_model import (
    DEFAULT_COST_CONFIG,
    MAX_GAS,
    CostConfig,
    calculate_cost,
    saturating_add,
)
from storage_gas.core.operations import OperationKind, OperationRecord


class TestOperationRecord:
    """Test OperationRecord dataclass."""

    def test_payload_len_with_value(self):
        """Verify payload length adds key and value."""
        op = OperationRecord(OperationKind.WRITE, key_len=11, value_len=21)
        assert op.payload_len == 32

    def test_payload_len_without_value(self):
        """Verify a missing value counts as zero bytes."""
        op = OperationRecord(OperationKind.REMOVE, key_len=11)
        assert op.payload_len == 11

    def test_read_miss_has_zero_value_len(self):
        """Verify a read miss is recorded with a zero-length value."""
        op = OperationRecord.read(b"key", None)
        assert op.kind == OperationKind.READ
        assert op.value_len == 0

    def test_remove_ignores_value(self):
        """Verify removal records carry no value length."""
        op = OperationRecord.remove(b"key")
        assert op.value_len is None

    def test_negative_lengths_rejected(self):
        """Verify negative sizes are rejected."""
        with pytest.raises(ValueError, match="key_len must be >= 0"):
            OperationRecord(OperationKind.READ, key_len=-1)
        with pytest.raises(ValueError, match="value_len must be >= 0"):
            OperationRecord(OperationKind.READ, key_len=1, value_len=-1)


class TestCostConfig:
    """Test cost schedule defaults and validation."""

    def test_default_schedule(self):
        """Verify the built-in schedule rates."""
        assert DEFAULT_COST_CONFIG.read_cost_flat == 1000
        assert DEFAULT_COST_CONFIG.read_cost_per_byte == 3
        assert DEFAULT_COST_CONFIG.write_cost_flat == 2000
        assert DEFAULT_COST_CONFIG.write_cost_per_byte == 30
        assert DEFAULT_COST_CONFIG.delete_cost == 1000
        assert DEFAULT_COST_CONFIG.delete_cost_per_byte == 0
        assert DEFAULT_COST_CONFIG.iter_next_cost_flat == 30

    def test_default_equals_fresh_instance(self):
        """Verify every config built without arguments is the default."""
        assert CostConfig() == DEFAULT_COST_CONFIG

    def test_schedule_is_immutable(self):
        """Verify rates cannot change after construction."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_COST_CONFIG.write_cost_flat = 0

    def test_negative_rate_rejected(self):
        """Verify negative rates are rejected, not clamped."""
        with pytest.raises(ValueError, match="read_cost_flat must be >= 0"):
            CostConfig(read_cost_flat=-1)

    def test_float_rate_rejected(self):
        """Verify non-integer rates are rejected."""
        with pytest.raises(ValueError, match="write_cost_per_byte must be an integer"):
            CostConfig(write_cost_per_byte=1.5)

    def test_bool_rate_rejected(self):
        """Verify booleans are not accepted as rates."""
        with pytest.raises(ValueError, match="delete_cost must be an integer"):
            CostConfig(delete_cost=True)

    def test_oversized_rate_rejected(self):
        """Verify rates must fit in 64 bits."""
        with pytest.raises(ValueError, match="iter_next_cost_flat must be <="):
            CostConfig(iter_next_cost_flat=MAX_GAS + 1)

    def test_as_dict_order(self):
        """Verify rates are listed in declaration order."""
        assert list(DEFAULT_COST_CONFIG.as_dict()) == [
            "read_cost_flat",
            "read_cost_per_byte",
            "write_cost_flat",
            "write_cost_per_byte",
            "delete_cost",
            "delete_cost_per_byte",
            "iter_next_cost_flat",
        ]


class TestCostCalculation:
    """Test per-operation gas formulas with the default schedule."""

    def test_read_counts_key_and_value(self):
        """Verify read cost: 1000 + 3 * (11 + 21)."""
        op = OperationRecord(OperationKind.READ, key_len=11, value_len=21)
        assert calculate_cost(op) == 1096

    def test_read_miss(self):
        """Verify a miss is charged for the key alone."""
        op = OperationRecord.read(b"k" * 11, None)
        assert calculate_cost(op) == 1033

    def test_write(self):
        """Verify write cost: 2000 + 30 * (11 + 21)."""
        op = OperationRecord(OperationKind.WRITE, key_len=11, value_len=21)
        assert calculate_cost(op) == 2960

    def test_remove_is_flat_by_default(self):
        """Verify default removal cost ignores key length."""
        assert calculate_cost(OperationRecord.remove(b"k")) == 1000
        assert calculate_cost(OperationRecord.remove(b"k" * 100)) == 1000

    def test_remove_per_byte(self):
        """Verify removal per-byte rate applies to the key only."""
        config = CostConfig(delete_cost_per_byte=2)
        op = OperationRecord(OperationKind.REMOVE, key_len=11, value_len=500)
        assert calculate_cost(op, config) == 1022

    def test_iter_next(self):
        """Verify step cost: 30 + 1000 + 3 * (11 + 21)."""
        op = OperationRecord(OperationKind.ITER_NEXT, key_len=11, value_len=21)
        assert calculate_cost(op) == 1126

    def test_flat_rates_never_free(self):
        """Verify positive flat rates yield positive cost for empty operands."""
        for kind in OperationKind:
            op = OperationRecord(kind, key_len=0, value_len=0)
            assert calculate_cost(op) > 0

    def test_zero_schedule_is_free(self):
        """Verify an all-zero schedule charges nothing."""
        zero = CostConfig(**{name: 0 for name in DEFAULT_COST_CONFIG.as_dict()})
        for kind in OperationKind:
            assert calculate_cost(OperationRecord(kind, 10, 10), zero) == 0

    def test_custom_schedule(self):
        """Verify custom rates flow into the formula."""
        config = CostConfig(write_cost_flat=0, write_cost_per_byte=1)
        op = OperationRecord(OperationKind.WRITE, key_len=1, value_len=5)
        assert calculate_cost(op, config) == 6

    def test_cost_saturates(self):
        """Verify huge costs clamp at the 64-bit maximum."""
        config = CostConfig(write_cost_per_byte=MAX_GAS)
        op = OperationRecord(OperationKind.WRITE, key_len=1, value_len=1)
        assert calculate_cost(op, config) == MAX_GAS

    def test_saturating_add(self):
        """Verify addition clamps rather than wraps."""
        assert saturating_add(1, 2) == 3
        assert saturating_add(MAX_GAS, 1) == MAX_GAS
