"""
Unit tests for ledger/adjustments.py
"""

import pytest
from ledger.adjustments import InMemoryAdjustmentLedger, apply_adjustment


class TestApplyAdjustment:
    """Tests for the pure apply_adjustment helper."""

    def test_creates_entry_at_zero(self):
        assert apply_adjustment({}, "0722", 15) == {"0722": 15}

    def test_is_additive(self):
        stepwise = apply_adjustment(apply_adjustment({}, "0722", 50), "0722", -20)
        direct = apply_adjustment({}, "0722", 30)

        assert stepwise["0722"] == direct["0722"] == 30

    def test_is_commutative(self):
        a = apply_adjustment(apply_adjustment({"0722": 5}, "0722", -20), "0722", 50)
        b = apply_adjustment(apply_adjustment({"0722": 5}, "0722", 50), "0722", -20)

        assert a == b == {"0722": 35}

    def test_leaves_input_untouched(self):
        original = {"0722": 10}

        updated = apply_adjustment(original, "0733", 5)

        assert original == {"0722": 10}
        assert updated == {"0722": 10, "0733": 5}

    @pytest.mark.parametrize("bad", [1.5, "10", None, True])
    def test_rejects_non_integer_delta(self, bad):
        with pytest.raises(ValueError):
            apply_adjustment({}, "0722", bad)


class TestInMemoryAdjustmentLedger:
    """Tests for the dict-backed ledger."""

    def test_append_returns_running_total(self):
        ledger = InMemoryAdjustmentLedger({"0722": 10})

        assert ledger.append("0722", 5) == 15
        assert ledger.append("0722", -25) == -10
        assert ledger.get("0722") == -10

    def test_get_defaults_to_zero(self):
        ledger = InMemoryAdjustmentLedger()

        assert ledger.get("0999") == 0
        assert ledger.get("0999", 7) == 7

    def test_snapshot_is_a_copy(self):
        ledger = InMemoryAdjustmentLedger()
        ledger.append("0722", 1)

        snapshot = ledger.snapshot()
        snapshot["0722"] = 1000

        assert ledger.get("0722") == 1
