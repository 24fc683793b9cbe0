"""
Project domain entity - owned and shared project snapshots
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Project statuses
PROJECT_STATUS_DRAFT = "draft"
PROJECT_STATUS_IN_REVIEW = "in_review"
PROJECT_STATUS_CORRECTIONS = "corrections"
PROJECT_STATUS_PENDING = "pending"
PROJECT_STATUS_IN_PROGRESS = "in_progress"
PROJECT_STATUS_APPROVED = "approved"
PROJECT_STATUS_COMPLETED = "completed"

OPEN_PROJECT_STATUSES = (
    PROJECT_STATUS_DRAFT,
    PROJECT_STATUS_IN_REVIEW,
    PROJECT_STATUS_CORRECTIONS,
    PROJECT_STATUS_PENDING,
    PROJECT_STATUS_IN_PROGRESS,
)
DONE_PROJECT_STATUSES = (PROJECT_STATUS_APPROVED, PROJECT_STATUS_COMPLETED)

# Fee kinds for Project.fee_for
FEE_EDITOR = "editor"
FEE_CLIENT = "client"
FEE_BASE = "base"

_ZERO = Decimal("0")


@dataclass(frozen=True)
class ShareInfo:
    """Share metadata attached by the sharing subsystem."""
    share_token: Optional[str] = None
    can_view: bool = True
    can_edit: bool = False
    can_chat: bool = False


@dataclass(frozen=True)
class Project:
    """
    Project snapshot (normalized)

    Fees:
    - editor_fee: what the editor earns
    - client_fee: what the client pays
    - fee: generic fee, fallback when the role-specific fee is absent

    Fee fields stay None when the API did not send them, so the fallback
    can tell "absent" apart from an explicit 0.

    Reconciliation flags (see application.reconciler):
    - is_shared: reachable only through a share
    - also_shared: owned, and additionally shared with the current user
    """
    id: str
    name: str = ""
    creator_id: Optional[str] = None
    editor_id: Optional[str] = None
    client_id: Optional[str] = None
    editor_fee: Optional[Decimal] = None
    client_fee: Optional[Decimal] = None
    fee: Optional[Decimal] = None
    status: str = PROJECT_STATUS_DRAFT
    project_type: Optional[str] = None
    description: Optional[str] = None
    is_subproject: bool = False
    parent_project_id: Optional[str] = None
    assigned_date: Optional[date] = None
    deadline: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_shared: bool = False
    also_shared: bool = False
    share_info: Optional[ShareInfo] = None

    def fee_for(self, kind: str) -> Decimal:
        """
        Effective fee for a fee kind

        Args:
            kind: FEE_EDITOR, FEE_CLIENT or FEE_BASE

        Returns:
            Role-specific fee, falling back to `fee`, then to 0
        """
        if kind == FEE_EDITOR and self.editor_fee is not None:
            return self.editor_fee
        if kind == FEE_CLIENT and self.client_fee is not None:
            return self.client_fee
        if self.fee is not None:
            return self.fee
        return _ZERO

    @property
    def is_done(self) -> bool:
        return self.status in DONE_PROJECT_STATUSES
