"""
Billing history: subscription payments with search, status filter and
date ordering.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from xrozen.application.filter_sort import filter_records, sort_records, SORT_DESC
from xrozen.application.snapshot import Snapshot
from xrozen.domain.payment import Payment, PAYMENT_STATUS_COMPLETED

SEARCH_FIELDS = ("description", "id")


@dataclass(frozen=True)
class BillingHistory:
    payments: list[Payment]
    total_completed: Decimal  # completed payments among the filtered ones
    completed_count: int  # completed payments overall


class BillingService:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def history(
        self,
        search: Optional[str] = None,
        status: str = "all",
        order: str = SORT_DESC,
    ) -> BillingHistory:
        payments = filter_records(self.snapshot.payments, search, SEARCH_FIELDS, status=status)
        payments = sort_records(payments, "date", order)
        return BillingHistory(
            payments=payments,
            total_completed=sum(
                (p.amount for p in payments if p.status == PAYMENT_STATUS_COMPLETED), Decimal("0"),
            ),
            completed_count=sum(1 for p in self.snapshot.payments if p.status == PAYMENT_STATUS_COMPLETED),
        )
