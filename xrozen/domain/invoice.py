"""
Invoice domain entities - read-only snapshots of the remote invoice records
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Invoice statuses (lifecycle: draft -> pending/in_progress -> partial -> paid)
INVOICE_STATUS_DRAFT = "draft"
INVOICE_STATUS_PENDING = "pending"
INVOICE_STATUS_IN_PROGRESS = "in_progress"
INVOICE_STATUS_PARTIAL = "partial"
INVOICE_STATUS_PAID = "paid"

INVOICE_STATUSES = (
    INVOICE_STATUS_DRAFT,
    INVOICE_STATUS_PENDING,
    INVOICE_STATUS_IN_PROGRESS,
    INVOICE_STATUS_PARTIAL,
    INVOICE_STATUS_PAID,
)

# payment_type marking an invoice as money paid out to an editor (agency expense)
PAYMENT_TYPE_EDITOR = "editor_payment"

_ZERO = Decimal("0")


@dataclass(frozen=True)
class Invoice:
    """
    Invoice snapshot (normalized)

    Суммы всегда Decimal, даты - None если поле отсутствовало.
    Ожидаемый инвариант (не навязывается, только проверяется аудитом):
        total_amount - total_deductions - paid_amount == remaining_amount
    и status == "paid" => remaining_amount == 0.
    """
    id: str
    editor_id: Optional[str] = None
    client_id: Optional[str] = None
    month: Optional[str] = None  # "January 2025", opaque label
    total_amount: Decimal = _ZERO
    total_deductions: Decimal = _ZERO
    paid_amount: Decimal = _ZERO
    remaining_amount: Decimal = _ZERO
    status: str = INVOICE_STATUS_PENDING
    payment_type: Optional[str] = None
    created_at: Optional[datetime] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    editor_name: str = "Unknown"

    @property
    def is_editor_payment(self) -> bool:
        return self.payment_type == PAYMENT_TYPE_EDITOR

    @property
    def expected_remaining(self) -> Decimal:
        """Remaining amount implied by total, deductions and payments."""
        return self.total_amount - self.total_deductions - self.paid_amount


@dataclass(frozen=True)
class InvoiceItem:
    """
    Invoice line item (usually one project of the invoice)

    invoice_month / invoice_status / editor_* копируются из родительского
    счёта при загрузке (см. enrich_items), чтобы строки можно было
    группировать и фильтровать без повторного поиска счёта.
    """
    id: str
    invoice_id: Optional[str] = None
    item_name: str = ""
    amount: Decimal = _ZERO
    invoice_month: Optional[str] = None
    invoice_status: Optional[str] = None
    editor_id: Optional[str] = None
    editor_name: str = "Unknown"
