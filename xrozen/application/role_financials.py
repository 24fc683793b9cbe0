"""
Role-based financial summary.

One summary shape for every role, computed over either invoices or
projects (the dashboard works on projects, the invoices screen on
invoices):

  editor  - own records, editor fee / invoice total as revenue
  client  - own records, client fee / invoice total as expense
  agency  - the whole book: client revenue, editor expense, margin
  default - the whole book with neutral labels

Paid and pending always come from the same scoped records filtered on
status "paid" and "pending". Partial invoices are reported separately
(partial_totals) and never counted as paid or pending.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Sequence, TypeVar

from xrozen.domain.invoice import Invoice, INVOICE_STATUS_PAID, INVOICE_STATUS_PENDING, INVOICE_STATUS_PARTIAL
from xrozen.domain.profile import ROLE_EDITOR, ROLE_CLIENT, ROLE_AGENCY
from xrozen.domain.project import Project, FEE_EDITOR, FEE_CLIENT, FEE_BASE
from xrozen.utils.money import format_money

MODE_INVOICES = "invoices"
MODE_PROJECTS = "projects"

TYPE_REVENUE = "revenue"
TYPE_EXPENSE = "expense"
TYPE_AGENCY = "agency"
TYPE_DEFAULT = "default"

STATUS_PAID = INVOICE_STATUS_PAID
STATUS_PENDING = INVOICE_STATUS_PENDING

_ZERO = Decimal("0")

R = TypeVar("R")

# role -> (total, paid, pending) labels
_LABELS = {
    ROLE_EDITOR: ("Total Revenue", "Received", "Pending Revenue"),
    ROLE_CLIENT: ("Total Expense", "Paid", "Pending Payment"),
    ROLE_AGENCY: ("Total Revenue", "Received from Clients", "Pending from Clients"),
    None: ("Total Invoiced", "Total Paid", "Pending"),
}

# Project-mode total descriptions (invoice mode uses the record count)
_PROJECT_DESCRIPTIONS = {
    ROLE_EDITOR: "Your earnings",
    ROLE_CLIENT: "Your spending",
    None: "From all projects",
}


@dataclass(frozen=True)
class FinancialSummary:
    total_label: str
    total_amount: Decimal
    total_description: str
    paid_label: str
    paid_amount: Decimal
    paid_description: str
    pending_label: str
    pending_amount: Decimal
    pending_description: str
    type: str
    margin: Optional[Decimal] = None
    expense: Optional[Decimal] = None


@dataclass(frozen=True)
class PartialTotals:
    amount: Decimal = _ZERO
    count: int = 0

    @property
    def description(self) -> str:
        return f"{self.count} in progress"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _sum(records: Sequence[R], amount: Callable[[R], Decimal]) -> Decimal:
    return sum((amount(r) for r in records), _ZERO)


def _with_status(records: Sequence[R], status: str) -> list[R]:
    return [r for r in records if r.status == status]


def _build(
    role: Optional[str],
    scoped: Sequence[R],
    total: Decimal,
    total_description: str,
    paid_amount: Callable[[R], Decimal],
    pending_amount: Callable[[R], Decimal],
    summary_type: str,
    margin: Optional[Decimal] = None,
    expense: Optional[Decimal] = None,
) -> FinancialSummary:
    total_label, paid_label, pending_label = _LABELS[role]
    paid = _with_status(scoped, STATUS_PAID)
    pending = _with_status(scoped, STATUS_PENDING)
    return FinancialSummary(
        total_label=total_label,
        total_amount=total,
        total_description=total_description,
        paid_label=paid_label,
        paid_amount=_sum(paid, paid_amount),
        paid_description=f"{len(paid)} completed",
        pending_label=pending_label,
        pending_amount=_sum(pending, pending_amount),
        pending_description=f"{len(pending)} awaiting",
        type=summary_type,
        margin=margin,
        expense=expense,
    )


def _margin_description(margin: Decimal) -> str:
    return f"Margin: {format_money(margin)}"


# ----------------------------------------------------------------------
# Invoice mode
# ----------------------------------------------------------------------

def _classify_invoices(role: Optional[str], invoices: Sequence[Invoice], user_id: Optional[str]) -> FinancialSummary:
    def paid_amount(inv: Invoice) -> Decimal:
        return inv.paid_amount

    def remaining(inv: Invoice) -> Decimal:
        return inv.remaining_amount

    def total_amount(inv: Invoice) -> Decimal:
        return inv.total_amount

    if role == ROLE_EDITOR:
        scoped = [inv for inv in invoices if inv.editor_id == user_id]
        return _build(role, scoped, _sum(scoped, total_amount), _plural(len(scoped), "invoice"),
                      paid_amount, remaining, TYPE_REVENUE)

    if role == ROLE_CLIENT:
        scoped = [inv for inv in invoices if inv.client_id == user_id]
        return _build(role, scoped, _sum(scoped, total_amount), _plural(len(scoped), "invoice"),
                      paid_amount, remaining, TYPE_EXPENSE)

    scoped = list(invoices)
    if role == ROLE_AGENCY:
        revenue = _sum(scoped, total_amount)
        expense = _sum([inv for inv in scoped if inv.is_editor_payment], total_amount)
        margin = revenue - expense
        return _build(role, scoped, revenue, _margin_description(margin),
                      paid_amount, remaining, TYPE_AGENCY, margin=margin, expense=expense)

    return _build(None, scoped, _sum(scoped, total_amount), _plural(len(scoped), "invoice"),
                  paid_amount, remaining, TYPE_DEFAULT)


# ----------------------------------------------------------------------
# Project mode
# ----------------------------------------------------------------------

def _classify_projects(role: Optional[str], projects: Sequence[Project], user_id: Optional[str]) -> FinancialSummary:
    def fee(kind: str) -> Callable[[Project], Decimal]:
        return lambda p: p.fee_for(kind)

    if role == ROLE_EDITOR:
        scoped = [p for p in projects if p.editor_id == user_id]
        return _build(role, scoped, _sum(scoped, fee(FEE_EDITOR)), _PROJECT_DESCRIPTIONS[role],
                      fee(FEE_EDITOR), fee(FEE_EDITOR), TYPE_REVENUE)

    if role == ROLE_CLIENT:
        scoped = [p for p in projects if p.client_id == user_id]
        return _build(role, scoped, _sum(scoped, fee(FEE_CLIENT)), _PROJECT_DESCRIPTIONS[role],
                      fee(FEE_CLIENT), fee(FEE_CLIENT), TYPE_EXPENSE)

    scoped = list(projects)
    if role == ROLE_AGENCY:
        revenue = _sum(scoped, fee(FEE_CLIENT))
        expense = _sum(scoped, fee(FEE_EDITOR))
        margin = revenue - expense
        return _build(role, scoped, revenue, _margin_description(margin),
                      fee(FEE_CLIENT), fee(FEE_CLIENT), TYPE_AGENCY, margin=margin, expense=expense)

    return _build(None, scoped, _sum(scoped, fee(FEE_BASE)), _PROJECT_DESCRIPTIONS[None],
                  fee(FEE_BASE), fee(FEE_BASE), TYPE_DEFAULT)


def classify(
    role: Optional[str],
    invoices: Sequence[Invoice] = (),
    projects: Sequence[Project] = (),
    current_user_id: Optional[str] = None,
    mode: str = MODE_INVOICES,
) -> FinancialSummary:
    """
    Build the role-specific financial summary

    Args:
        role: user_category ("editor", "client", "agency"; anything else = default)
        invoices: invoices to summarize (mode="invoices")
        projects: projects to summarize (mode="projects")
        current_user_id: scope for editor / client roles
        mode: MODE_INVOICES or MODE_PROJECTS

    Returns:
        FinancialSummary; margin and expense are set for the agency role only
    """
    normalized_role = role if role in (ROLE_EDITOR, ROLE_CLIENT, ROLE_AGENCY) else None
    if mode == MODE_PROJECTS:
        return _classify_projects(normalized_role, projects, current_user_id)
    if mode != MODE_INVOICES:
        raise ValueError(f"Unknown summary mode: {mode}")
    return _classify_invoices(normalized_role, invoices, current_user_id)


def partial_totals(invoices: Sequence[Invoice]) -> PartialTotals:
    """Remaining amount still in motion on partially paid invoices (all roles)."""
    partial = [inv for inv in invoices if inv.status == INVOICE_STATUS_PARTIAL]
    return PartialTotals(
        amount=sum((inv.remaining_amount for inv in partial), _ZERO),
        count=len(partial),
    )
