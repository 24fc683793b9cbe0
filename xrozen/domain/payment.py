"""
Payment domain entity - subscription / billing history records
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

PAYMENT_STATUS_COMPLETED = "completed"
PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_FAILED = "failed"

PAYMENT_STATUSES = (PAYMENT_STATUS_COMPLETED, PAYMENT_STATUS_PENDING, PAYMENT_STATUS_FAILED)


@dataclass(frozen=True)
class Payment:
    id: str
    amount: Decimal = Decimal("0")
    currency: str = "INR"
    status: str = PAYMENT_STATUS_PENDING
    date: Optional[datetime] = None
    description: str = ""
    payment_method: Optional[str] = None
