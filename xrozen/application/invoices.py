"""
Invoices screen: filters, analytics, role summary, partial payments,
monthly breakdown and the line-item ("projects overview") table.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from xrozen.application.filter_sort import filter_records, sort_records, SORT_DESC
from xrozen.application.invoice_aggregator import (
    InvoiceTotals,
    audit_invoices,
    filter_invoices,
    select_display_invoices,
    sum_invoices,
    DEFAULT_TOLERANCE,
)
from xrozen.application.monthly_breakdown import MonthBreakdown, available_months, breakdown, default_month
from xrozen.application.role_financials import FinancialSummary, PartialTotals, classify, partial_totals, MODE_INVOICES
from xrozen.application.snapshot import Snapshot
from xrozen.domain.invoice import Invoice, InvoiceItem


@dataclass(frozen=True)
class InvoicesView:
    months: list[str]
    selected_editor: str
    selected_month: Optional[str]
    match_count: int  # invoices matching the filters, before any fallback
    invoices: list[Invoice]  # invoices shown (after the fallback policy)
    analytics: InvoiceTotals
    financials: FinancialSummary
    partial: PartialTotals
    monthly: dict[str, MonthBreakdown]
    items: list[InvoiceItem]
    items_total: Decimal
    inconsistent: dict[str, list[str]]


class InvoicesService:
    def __init__(
        self,
        snapshot: Snapshot,
        fallback_to_all: bool = True,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.snapshot = snapshot
        self.fallback_to_all = fallback_to_all
        self.tolerance = tolerance

    def filtered_items(self, editor_id: str, month: Optional[str]) -> list[InvoiceItem]:
        """Line items for the selected editor/month, most recent month first."""
        items = filter_records(self.snapshot.invoice_items, editor_id=editor_id, invoice_month=month)
        return sort_records(items, "invoice_month", SORT_DESC)

    def build(
        self,
        editor_id: str = "all",
        month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> InvoicesView:
        """
        Args:
            editor_id: editor filter, "all" for every editor
            month: month label, "all" for every month, None to preselect
                   the current (or most recent) month
            today: reference date for the month preselection
        """
        invoices = list(self.snapshot.invoices)
        months = available_months(invoices)
        if month is None:
            month = default_month(months, today or date.today())

        filtered = filter_invoices(invoices, editor_id=editor_id, month=month)
        shown = select_display_invoices(filtered, invoices, self.fallback_to_all)
        items = self.filtered_items(editor_id, month)

        return InvoicesView(
            months=months,
            selected_editor=editor_id,
            selected_month=month,
            match_count=len(filtered),
            invoices=shown,
            analytics=sum_invoices(shown),
            financials=classify(
                self.snapshot.role,
                invoices=shown,
                current_user_id=self.snapshot.user_id,
                mode=MODE_INVOICES,
            ),
            partial=partial_totals(invoices),
            monthly=breakdown(self.snapshot.invoice_items, invoices),
            items=items,
            items_total=sum((item.amount for item in items), Decimal("0")),
            inconsistent=audit_invoices(invoices, self.tolerance),
        )
