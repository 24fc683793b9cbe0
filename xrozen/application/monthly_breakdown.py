"""
Monthly breakdown of invoiced work.

Month keys are the invoices' own labels ("January 2025"); they are never
re-derived from dates. Ordering is reverse lexicographic, which reads as
most-recent-first only while every label uses the same format.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from xrozen.domain.invoice import Invoice, InvoiceItem, INVOICE_STATUS_PAID

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthBreakdown:
    project_count: int = 0
    total: Decimal = _ZERO
    paid: Decimal = _ZERO
    pending: Decimal = _ZERO  # total - paid, negative when paid exceeds invoiced items


def enrich_items(invoice: Invoice, items: Iterable[InvoiceItem]) -> list[InvoiceItem]:
    """Copy the parent invoice's id, month, status and editor onto its items."""
    return [
        replace(
            item,
            invoice_id=invoice.id,
            invoice_month=invoice.month,
            invoice_status=invoice.status,
            editor_id=invoice.editor_id,
            editor_name=invoice.editor_name,
        )
        for item in items
    ]


def available_months(invoices: Iterable[Invoice]) -> list[str]:
    """Unique month labels, most recent first."""
    return sorted({inv.month for inv in invoices if inv.month}, reverse=True)


def default_month(months: Sequence[str], today: date) -> Optional[str]:
    """
    Month preselected on the invoices screen

    Current month ("October 2026") if invoiced, else the first available
    month, else None.
    """
    current = today.strftime("%B %Y")
    if current in months:
        return current
    if months:
        return months[0]
    return None


def breakdown(items: Iterable[InvoiceItem], invoices: Iterable[Invoice]) -> dict[str, MonthBreakdown]:
    """
    Per-month totals

    Args:
        items: line items enriched with invoice_month
        invoices: invoices (source of paid amounts)

    Returns:
        {month: MonthBreakdown} ordered most recent first:
            project_count - items in the month
            total         - sum of item amounts
            paid          - sum of paid_amount of the month's paid invoices
            pending       - total - paid (not clamped)
    """
    counts: dict[str, int] = {}
    totals: dict[str, Decimal] = {}
    paid: dict[str, Decimal] = {}
    unlabeled = 0

    for item in items:
        month = item.invoice_month
        if not month:
            unlabeled += 1
            continue
        counts[month] = counts.get(month, 0) + 1
        totals[month] = totals.get(month, _ZERO) + item.amount

    for invoice in invoices:
        if not invoice.month:
            continue
        paid.setdefault(invoice.month, _ZERO)
        if invoice.status == INVOICE_STATUS_PAID:
            paid[invoice.month] += invoice.paid_amount

    if unlabeled:
        logger.warning("Monthly breakdown: %d line item(s) without invoice month skipped", unlabeled)

    months = sorted(set(totals) | set(paid), reverse=True)
    result: dict[str, MonthBreakdown] = {}
    for month in months:
        month_total = totals.get(month, _ZERO)
        month_paid = paid.get(month, _ZERO)
        result[month] = MonthBreakdown(
            project_count=counts.get(month, 0),
            total=month_total,
            paid=month_paid,
            pending=month_total - month_paid,
        )
    return result
