"""
Invoice aggregation: editor/month filtering, sums and a totals audit.

The aggregator never substitutes the unfiltered set for an empty filter
result. It reports match_count; whether a screen falls back to all
invoices is the caller's decision (select_display_invoices).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from xrozen.domain.invoice import Invoice, INVOICE_STATUS_PAID

logger = logging.getLogger(__name__)

ALL = "all"

_ZERO = Decimal("0")
DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class InvoiceTotals:
    total_amount: Decimal = _ZERO
    total_deductions: Decimal = _ZERO
    total_paid: Decimal = _ZERO
    total_pending: Decimal = _ZERO
    match_count: int = 0


def is_active_filter(value: Optional[str]) -> bool:
    """A filter value restricts results unless it is unset, empty or "all"."""
    return value is not None and value != "" and value != ALL


def filter_invoices(
    invoices: Iterable[Invoice],
    editor_id: Optional[str] = None,
    month: Optional[str] = None,
) -> list[Invoice]:
    result = list(invoices)
    if is_active_filter(editor_id):
        result = [inv for inv in result if inv.editor_id == editor_id]
    if is_active_filter(month):
        result = [inv for inv in result if inv.month == month]
    return result


def sum_invoices(invoices: Sequence[Invoice]) -> InvoiceTotals:
    return InvoiceTotals(
        total_amount=sum((inv.total_amount for inv in invoices), _ZERO),
        total_deductions=sum((inv.total_deductions for inv in invoices), _ZERO),
        total_paid=sum((inv.paid_amount for inv in invoices), _ZERO),
        total_pending=sum((inv.remaining_amount for inv in invoices), _ZERO),
        match_count=len(invoices),
    )


def aggregate(
    invoices: Iterable[Invoice],
    editor_id: Optional[str] = None,
    month: Optional[str] = None,
) -> InvoiceTotals:
    """
    Sum total / deductions / paid / remaining over the filtered invoices

    Args:
        invoices: normalized invoices
        editor_id: editor filter ("all" or None = any editor)
        month: month label filter ("all" or None = any month)

    Returns:
        InvoiceTotals; all-zero with match_count=0 when nothing matches
    """
    return sum_invoices(filter_invoices(invoices, editor_id=editor_id, month=month))


def select_display_invoices(
    filtered: Sequence[Invoice],
    all_invoices: Sequence[Invoice],
    fallback_to_all: bool,
) -> list[Invoice]:
    """
    Pick the invoice set a screen shows

    With fallback_to_all=True an empty filter result is replaced by the full
    set; with False the empty result is shown as is.
    """
    if filtered or not fallback_to_all:
        return list(filtered)
    if all_invoices:
        logger.info("Invoice filter matched nothing, falling back to all %d invoices", len(all_invoices))
    return list(all_invoices)


# ----------------------------------------------------------------------
# Audit
# ----------------------------------------------------------------------

def audit_invoice(invoice: Invoice, tolerance: Decimal = DEFAULT_TOLERANCE) -> list[str]:
    """
    Check one invoice's totals

    Returns:
        Human-readable discrepancy descriptions (empty list = consistent).
        Amounts are reported as they are, never corrected.
    """
    issues: list[str] = []
    diff = invoice.expected_remaining - invoice.remaining_amount
    if abs(diff) > tolerance:
        issues.append(
            f"total {invoice.total_amount} - deductions {invoice.total_deductions} - paid "
            f"{invoice.paid_amount} != remaining {invoice.remaining_amount} (off by {diff})"
        )
    if invoice.status == INVOICE_STATUS_PAID and abs(invoice.remaining_amount) > tolerance:
        issues.append(f"status is paid but remaining is {invoice.remaining_amount}")
    if invoice.remaining_amount < 0:
        issues.append(f"negative remaining {invoice.remaining_amount}")
    return issues


def audit_invoices(
    invoices: Iterable[Invoice],
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> dict[str, list[str]]:
    """Audit a collection; inconsistent invoices are logged and returned by id."""
    report: dict[str, list[str]] = {}
    for invoice in invoices:
        issues = audit_invoice(invoice, tolerance)
        if issues:
            logger.warning("Inconsistent totals on invoice %s: %s", invoice.id, "; ".join(issues))
            report[invoice.id] = issues
    return report
