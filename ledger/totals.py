"""
Per-estimate money computation.
Deterministic and unit-testable.

Every surface that shows an estimate's figures (dashboard detail, client
portal, public status page, loyalty aggregation) goes through
compute_transaction_totals.
"""

from ledger.models import Estimate, EstimateTotals


def compute_transaction_totals(estimate: Estimate) -> EstimateTotals:
    """
    Compute subtotals, discounts, total, paid and balance for one estimate.

    Absent discount percentages count as 0 and an absent payments list as
    empty. Values are not validated here: negative prices or quantities
    pass straight through.

    Args:
        estimate: Estimate to compute

    Returns:
        EstimateTotals for the estimate

    Example:
        >>> est = Estimate("1", "0722", EstimateStatus.COMPLETED,
        ...                parts=[Part(100, 2)], labor=[Labor(50, 3)],
        ...                parts_discount_percent=10, payments=[Payment(100)])
        >>> totals = compute_transaction_totals(est)
        >>> totals.total
        330.0
        >>> totals.balance_due
        230.0
    """
    parts_subtotal = sum(part.price * part.quantity for part in estimate.parts or [])
    labor_subtotal = sum(line.rate * line.hours for line in estimate.labor or [])

    parts_discount_amount = parts_subtotal * (estimate.parts_discount_percent or 0) / 100
    labor_discount_amount = labor_subtotal * (estimate.labor_discount_percent or 0) / 100

    total = (parts_subtotal - parts_discount_amount) + (labor_subtotal - labor_discount_amount)
    total_paid = sum(payment.amount for payment in estimate.payments or [])

    return EstimateTotals(
        parts_subtotal=float(parts_subtotal),
        labor_subtotal=float(labor_subtotal),
        parts_discount_amount=float(parts_discount_amount),
        labor_discount_amount=float(labor_discount_amount),
        total=float(total),
        total_paid=float(total_paid),
        balance_due=float(total - total_paid),
    )
