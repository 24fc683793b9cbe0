"""
Dashboard: workflow overview for the current user.

Pure read-layer over a snapshot: project status breakdown, completion
rate, payment status counts and the project-based financial summary.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from xrozen.application.role_financials import classify, MODE_PROJECTS
from xrozen.application.snapshot import Snapshot
from xrozen.domain.project import (
    PROJECT_STATUS_DRAFT, PROJECT_STATUS_IN_REVIEW, PROJECT_STATUS_CORRECTIONS,
    PROJECT_STATUS_PENDING, PROJECT_STATUS_IN_PROGRESS,
    OPEN_PROJECT_STATUSES, DONE_PROJECT_STATUSES,
)

# Chart buckets: label -> statuses counted in it
PROJECT_STATUS_BUCKETS = {
    "Draft": (PROJECT_STATUS_DRAFT,),
    "In Review": (PROJECT_STATUS_IN_REVIEW,),
    "Corrections": (PROJECT_STATUS_CORRECTIONS,),
    "In Progress": (PROJECT_STATUS_IN_PROGRESS, PROJECT_STATUS_PENDING),
    "Completed": DONE_PROJECT_STATUSES,
}

PAYMENT_STATUS_BUCKETS = ("pending", "paid", "overdue")


class DashboardService:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def project_status_counts(self) -> dict[str, int]:
        projects = self.snapshot.projects
        return {
            label: sum(1 for p in projects if p.status in statuses)
            for label, statuses in PROJECT_STATUS_BUCKETS.items()
        }

    def open_project_count(self) -> int:
        return sum(1 for p in self.snapshot.projects if p.status in OPEN_PROJECT_STATUSES)

    def completion_rate(self) -> int:
        """Completed/approved share of all projects, in whole percent (half up)."""
        total = len(self.snapshot.projects)
        if not total:
            return 0
        done = sum(1 for p in self.snapshot.projects if p.is_done)
        rate = Decimal(done) * 100 / Decimal(total)
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def payment_status_counts(self) -> dict[str, int]:
        return {
            status: sum(1 for p in self.snapshot.payments if p.status == status)
            for status in PAYMENT_STATUS_BUCKETS
        }

    def build(self) -> dict[str, Any]:
        profile = self.snapshot.profile
        return {
            "full_name": profile.full_name if profile else None,
            "user_category": self.snapshot.role,
            "subscription_tier": profile.subscription_tier if profile else None,
            "project_count": len(self.snapshot.projects),
            "open_project_count": self.open_project_count(),
            "completion_rate": self.completion_rate(),
            "project_status": self.project_status_counts(),
            "payment_status": self.payment_status_counts(),
            "financials": classify(
                self.snapshot.role,
                projects=self.snapshot.projects,
                current_user_id=self.snapshot.user_id,
                mode=MODE_PROJECTS,
            ),
        }
