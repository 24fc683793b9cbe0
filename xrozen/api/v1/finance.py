"""
Finance API endpoints (read-only views over the current snapshot)
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from xrozen.api.deps import get_snapshot
from xrozen.application.billing import BillingService
from xrozen.application.dashboard import DashboardService
from xrozen.application.invoices import InvoicesService
from xrozen.application.projects import ProjectsService
from xrozen.application.role_financials import FinancialSummary
from xrozen.application.snapshot import Snapshot
from xrozen.config import Settings, get_settings
from xrozen.domain.invoice import Invoice, InvoiceItem
from xrozen.domain.payment import Payment
from xrozen.domain.project import Project


router = APIRouter(prefix="/api/v1/finance", tags=["finance"])


# === Response models ===
# Amounts are Decimal serialized as strings.

class FinancialSummaryResponse(BaseModel):
    total_label: str
    total_amount: str
    total_description: str
    paid_label: str
    paid_amount: str
    paid_description: str
    pending_label: str
    pending_amount: str
    pending_description: str
    type: str
    margin: Optional[str] = None
    expense: Optional[str] = None


class DashboardResponse(BaseModel):
    full_name: Optional[str]
    user_category: Optional[str]
    subscription_tier: Optional[str]
    project_count: int
    open_project_count: int
    completion_rate: int
    project_status: dict[str, int]
    payment_status: dict[str, int]
    financials: FinancialSummaryResponse
    failed: list[str]


class InvoiceResponse(BaseModel):
    id: str
    editor_id: Optional[str]
    editor_name: str
    client_id: Optional[str]
    month: Optional[str]
    total_amount: str
    total_deductions: str
    paid_amount: str
    remaining_amount: str
    status: str
    payment_type: Optional[str]
    due_date: Optional[date]


class InvoiceItemResponse(BaseModel):
    id: str
    invoice_id: Optional[str]
    item_name: str
    amount: str
    invoice_month: Optional[str]
    invoice_status: Optional[str]
    editor_name: str


class InvoiceTotalsResponse(BaseModel):
    total_amount: str
    total_deductions: str
    total_paid: str
    total_pending: str
    match_count: int


class PartialResponse(BaseModel):
    amount: str
    count: int
    description: str


class MonthResponse(BaseModel):
    month: str
    project_count: int
    total: str
    paid: str
    pending: str


class InvoicesResponse(BaseModel):
    months: list[str]
    selected_editor: str
    selected_month: Optional[str]
    match_count: int
    invoices: list[InvoiceResponse]
    analytics: InvoiceTotalsResponse
    financials: FinancialSummaryResponse
    partial: PartialResponse
    monthly: list[MonthResponse]
    items: list[InvoiceItemResponse]
    items_total: str
    inconsistent: dict[str, list[str]]
    failed: list[str]


class ProjectResponse(BaseModel):
    id: str
    name: str
    status: str
    project_type: Optional[str]
    editor_fee: Optional[str]
    client_fee: Optional[str]
    fee: Optional[str]
    deadline: Optional[date]
    is_shared: bool
    also_shared: bool
    share_token: Optional[str]


class ProjectRowResponse(BaseModel):
    project: ProjectResponse
    subprojects: list[ProjectResponse]


class PaymentResponse(BaseModel):
    id: str
    amount: str
    currency: str
    status: str
    date: Optional[datetime]
    description: str
    payment_method: Optional[str]


class BillingResponse(BaseModel):
    payments: list[PaymentResponse]
    total_completed: str
    completed_count: int


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str]
    user_category: Optional[str]
    subscription_tier: Optional[str]
    subscription_active: bool
    subscription_end_date: Optional[datetime]
    subscription_status: str
    days_remaining: Optional[int]


# === Helper functions ===

def _money(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _summary(s: FinancialSummary) -> FinancialSummaryResponse:
    return FinancialSummaryResponse(
        total_label=s.total_label,
        total_amount=_money(s.total_amount),
        total_description=s.total_description,
        paid_label=s.paid_label,
        paid_amount=_money(s.paid_amount),
        paid_description=s.paid_description,
        pending_label=s.pending_label,
        pending_amount=_money(s.pending_amount),
        pending_description=s.pending_description,
        type=s.type,
        margin=_money(s.margin),
        expense=_money(s.expense),
    )


def _invoice(inv: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=inv.id,
        editor_id=inv.editor_id,
        editor_name=inv.editor_name,
        client_id=inv.client_id,
        month=inv.month,
        total_amount=_money(inv.total_amount),
        total_deductions=_money(inv.total_deductions),
        paid_amount=_money(inv.paid_amount),
        remaining_amount=_money(inv.remaining_amount),
        status=inv.status,
        payment_type=inv.payment_type,
        due_date=inv.due_date,
    )


def _item(item: InvoiceItem) -> InvoiceItemResponse:
    return InvoiceItemResponse(
        id=item.id,
        invoice_id=item.invoice_id,
        item_name=item.item_name,
        amount=_money(item.amount),
        invoice_month=item.invoice_month,
        invoice_status=item.invoice_status,
        editor_name=item.editor_name,
    )


def _project(p: Project) -> ProjectResponse:
    return ProjectResponse(
        id=p.id,
        name=p.name,
        status=p.status,
        project_type=p.project_type,
        editor_fee=_money(p.editor_fee),
        client_fee=_money(p.client_fee),
        fee=_money(p.fee),
        deadline=p.deadline,
        is_shared=p.is_shared,
        also_shared=p.also_shared,
        share_token=p.share_info.share_token if p.share_info else None,
    )


def _payment(p: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=p.id,
        amount=_money(p.amount),
        currency=p.currency,
        status=p.status,
        date=p.date,
        description=p.description,
        payment_method=p.payment_method,
    )


# === Endpoints ===

@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(snapshot: Snapshot = Depends(get_snapshot)):
    """Обзор: статусы проектов, платежи, финансовая сводка по роли"""
    data = DashboardService(snapshot).build()
    data["financials"] = _summary(data["financials"])
    return DashboardResponse(**data, failed=list(snapshot.failed))


@router.get("/invoices", response_model=InvoicesResponse)
def invoices(
    editor_id: str = Query("all"),
    month: Optional[str] = Query(None),
    snapshot: Snapshot = Depends(get_snapshot),
    settings: Settings = Depends(get_settings),
):
    """Счета: фильтры по редактору/месяцу, аналитика, помесячная разбивка"""
    view = InvoicesService(
        snapshot,
        fallback_to_all=settings.INVOICE_FILTER_FALLBACK,
        tolerance=settings.TOTALS_TOLERANCE,
    ).build(editor_id=editor_id, month=month)

    return InvoicesResponse(
        months=view.months,
        selected_editor=view.selected_editor,
        selected_month=view.selected_month,
        match_count=view.match_count,
        invoices=[_invoice(inv) for inv in view.invoices],
        analytics=InvoiceTotalsResponse(
            total_amount=_money(view.analytics.total_amount),
            total_deductions=_money(view.analytics.total_deductions),
            total_paid=_money(view.analytics.total_paid),
            total_pending=_money(view.analytics.total_pending),
            match_count=view.analytics.match_count,
        ),
        financials=_summary(view.financials),
        partial=PartialResponse(
            amount=_money(view.partial.amount),
            count=view.partial.count,
            description=view.partial.description,
        ),
        monthly=[
            MonthResponse(
                month=month_label,
                project_count=m.project_count,
                total=_money(m.total),
                paid=_money(m.paid),
                pending=_money(m.pending),
            )
            for month_label, m in view.monthly.items()
        ],
        items=[_item(item) for item in view.items],
        items_total=_money(view.items_total),
        inconsistent=view.inconsistent,
        failed=list(snapshot.failed),
    )


@router.get("/projects", response_model=list[ProjectRowResponse])
def projects(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: Literal["asc", "desc"] = Query("asc"),
    snapshot: Snapshot = Depends(get_snapshot),
):
    """Проекты: свои + расшаренные, поиск и сортировка"""
    rows = ProjectsService(snapshot).rows(search=search, sort_key=sort, direction=direction, status=status)
    return [
        ProjectRowResponse(project=_project(row.project), subprojects=[_project(p) for p in row.subprojects])
        for row in rows
    ]


@router.get("/billing", response_model=BillingResponse)
def billing(
    search: Optional[str] = Query(None),
    status: str = Query("all"),
    order: Literal["asc", "desc"] = Query("desc"),
    snapshot: Snapshot = Depends(get_snapshot),
):
    """История платежей"""
    history = BillingService(snapshot).history(search=search, status=status, order=order)
    return BillingResponse(
        payments=[_payment(p) for p in history.payments],
        total_completed=_money(history.total_completed),
        completed_count=history.completed_count,
    )


@router.get("/profile", response_model=ProfileResponse)
def profile(snapshot: Snapshot = Depends(get_snapshot)):
    """Профиль и статус подписки"""
    p = snapshot.profile
    if p is None:
        raise HTTPException(status_code=404, detail="Profile not available")

    now = datetime.utcnow()
    return ProfileResponse(
        id=p.id,
        full_name=p.full_name,
        user_category=p.user_category,
        subscription_tier=p.subscription_tier,
        subscription_active=p.subscription_active,
        subscription_end_date=p.subscription_end_date,
        subscription_status=p.subscription_status(now),
        days_remaining=p.days_remaining(now),
    )
