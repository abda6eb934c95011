"""
Unit tests for ledger/totals.py
Tests the per-estimate money computation.
"""

import pytest
from ledger.models import Estimate, EstimateStatus, Labor, Part, Payment, payments_from_list
from ledger.totals import compute_transaction_totals


def make_estimate(**overrides) -> Estimate:
    fields = dict(
        id="e1",
        customer_phone="0722",
        status=EstimateStatus.COMPLETED,
        parts=[Part(price=100.0, quantity=2)],
        labor=[Labor(rate=50.0, hours=3)],
        parts_discount_percent=10,
        labor_discount_percent=0,
        payments=[Payment(amount=100.0)],
    )
    fields.update(overrides)
    return Estimate(**fields)


class TestComputeTransactionTotals:
    """Tests for compute_transaction_totals."""

    def test_reference_example(self):
        """
        Parts 2 x 100 with 10% off, labor 3h x 50, one payment of 100.
        """
        # Act
        totals = compute_transaction_totals(make_estimate())

        # Assert
        assert totals.parts_subtotal == 200.0
        assert totals.parts_discount_amount == 20.0
        assert totals.labor_subtotal == 150.0
        assert totals.labor_discount_amount == 0.0
        assert totals.total == 330.0
        assert totals.total_paid == 100.0
        assert totals.balance_due == 230.0

    def test_zero_discount_total_is_sum_of_subtotals(self):
        totals = compute_transaction_totals(
            make_estimate(parts_discount_percent=0, labor_discount_percent=0)
        )

        assert totals.total == totals.parts_subtotal + totals.labor_subtotal

    def test_missing_discount_fields_default_to_zero(self):
        """Legacy records without discount fields are billed at full price."""
        totals = compute_transaction_totals(
            make_estimate(parts_discount_percent=None, labor_discount_percent=None)
        )

        assert totals.parts_discount_amount == 0.0
        assert totals.labor_discount_amount == 0.0
        assert totals.total == 350.0

    def test_no_payments_means_balance_equals_total(self):
        for payments in ([], None):
            totals = compute_transaction_totals(make_estimate(payments=payments))

            assert totals.total_paid == 0.0
            assert totals.balance_due == totals.total

    def test_empty_estimate_is_all_zero(self):
        totals = compute_transaction_totals(
            Estimate(id="e0", customer_phone="", status=EstimateStatus.DRAFT)
        )

        assert totals.total == 0.0
        assert totals.balance_due == 0.0

    def test_labor_discount_and_multiple_lines(self):
        estimate = make_estimate(
            parts=[Part(10.0, 3), Part(5.5, 2)],
            labor=[Labor(80.0, 1.5), Labor(60.0, 0.5)],
            parts_discount_percent=0,
            labor_discount_percent=25,
            payments=[Payment(50.0), Payment(25.0, method="CARD")],
        )

        totals = compute_transaction_totals(estimate)

        assert totals.parts_subtotal == pytest.approx(41.0)
        assert totals.labor_subtotal == pytest.approx(150.0)
        assert totals.labor_discount_amount == pytest.approx(37.5)
        assert totals.total == pytest.approx(153.5)
        assert totals.total_paid == pytest.approx(75.0)
        assert totals.balance_due == pytest.approx(78.5)

    def test_overpayment_gives_negative_balance(self):
        totals = compute_transaction_totals(make_estimate(payments=[Payment(400.0)]))

        assert totals.balance_due == -70.0

    def test_negative_values_pass_through(self):
        """Values are not validated by the calculator."""
        totals = compute_transaction_totals(
            make_estimate(parts=[Part(-10.0, 2)], labor=[], parts_discount_percent=0, payments=[])
        )

        assert totals.total == -20.0

    def test_is_deterministic(self):
        estimate = make_estimate()

        assert compute_transaction_totals(estimate) == compute_transaction_totals(estimate)

    def test_does_not_mutate_estimate(self):
        estimate = make_estimate(payments=None, parts_discount_percent=None)

        compute_transaction_totals(estimate)

        assert estimate.payments is None
        assert estimate.parts_discount_percent is None


class TestEstimateFromDict:
    """Tests for loading stored camelCase records."""

    def test_legacy_record_without_optional_fields(self):
        raw = {
            "id": "abc",
            "estimateNumber": "EST-0001",
            "customerName": "Ion",
            "customerPhone": "0722",
            "status": "COMPLETED",
            "parts": [{"name": "Brake pad", "price": 100, "quantity": 2}],
            "labor": [{"description": "Fit", "rate": 50, "hours": 3}],
        }

        estimate = Estimate.from_dict(raw)

        assert estimate.status == EstimateStatus.COMPLETED
        assert estimate.parts_discount_percent is None
        assert estimate.payments is None
        assert estimate.customer_email == ""
        assert compute_transaction_totals(estimate).total == 350.0

    def test_full_record(self):
        raw = {
            "id": "abc",
            "customerPhone": "0722",
            "status": "AWAITING_PAYMENT",
            "parts": [{"price": 100, "quantity": 2}],
            "labor": [{"rate": 50, "hours": 3}],
            "partsDiscount": 10,
            "laborDiscount": 0,
            "payments": [{"amount": 100, "method": "CARD", "date": "2025-01-05"}],
        }

        totals = compute_transaction_totals(Estimate.from_dict(raw))

        assert totals.total == 330.0
        assert totals.balance_due == 230.0

    def test_missing_phone_becomes_empty_string(self):
        estimate = Estimate.from_dict({"id": "x", "status": "COMPLETED", "customerPhone": None})

        assert estimate.customer_phone == ""


class TestLineItemsFromDict:
    """Line items and payments share one parser for stored records and database rows."""

    def test_missing_keys_default(self):
        assert Part.from_dict({"price": 12.5}) == Part(price=12.5, quantity=0, name="")
        assert Labor.from_dict({"hours": 2}) == Labor(rate=0, hours=2, description="")
        assert Payment.from_dict({"amount": 40}) == Payment(amount=40, method="CASH", date=None)

    def test_absent_payments_list_stays_none(self):
        assert payments_from_list(None) is None
        assert payments_from_list([]) == []
        assert payments_from_list([{"amount": 5, "method": "CARD"}]) == [Payment(5, "CARD")]
