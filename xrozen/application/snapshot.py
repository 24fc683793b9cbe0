"""
Snapshots: one consistent, normalized copy of everything the finance
screens need, fetched in one pass.

SnapshotLoader fetches each collection independently; a failed fetch is
logged and becomes an empty collection ("no data yet"). An authorization
failure is not a data problem and propagates to the caller.

SnapshotStore keeps the latest snapshot with last-write-wins semantics:
a fetch that was overtaken by a newer one cannot publish its result.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, TypeVar

from xrozen.application.monthly_breakdown import enrich_items
from xrozen.application.normalizer import (
    normalize_many,
    normalize_invoice,
    normalize_invoice_item,
    normalize_project,
    normalize_payment,
    normalize_profile,
)
from xrozen.domain.invoice import Invoice, InvoiceItem
from xrozen.domain.payment import Payment
from xrozen.domain.profile import Profile
from xrozen.domain.project import Project
from xrozen.infrastructure.api_client import ApiError, RemoteApiClient, UnauthorizedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot:
    profile: Optional[Profile] = None
    invoices: tuple[Invoice, ...] = ()
    invoice_items: tuple[InvoiceItem, ...] = ()
    projects: tuple[Project, ...] = ()
    shared_projects: tuple[Project, ...] = ()
    payments: tuple[Payment, ...] = ()
    fetched_at: Optional[datetime] = None
    failed: tuple[str, ...] = field(default=())  # collections that could not be fetched

    @property
    def user_id(self) -> Optional[str]:
        return self.profile.id if self.profile else None

    @property
    def role(self) -> Optional[str]:
        return self.profile.user_category if self.profile else None


class SnapshotLoader:
    def __init__(self, client: RemoteApiClient):
        self.client = client

    def _fetch(self, name: str, fetch: Callable[[], T], failed: list[str], default: T) -> T:
        try:
            return fetch()
        except UnauthorizedError:
            raise
        except ApiError:
            logger.exception("Snapshot: failed to load %s", name)
            failed.append(name)
            return default

    def load(self, user_id: Optional[str] = None) -> Snapshot:
        """
        Fetch and normalize a full snapshot

        Args:
            user_id: profile to load; None = authenticated user

        Raises:
            UnauthorizedError: the token was rejected
        """
        failed: list[str] = []

        raw_profile = self._fetch("profile", lambda: self.client.get_profile(user_id), failed, None)
        profile = normalize_profile(raw_profile) if isinstance(raw_profile, dict) else None

        invoices = normalize_many(
            self._fetch("invoices", self.client.list_invoices, failed, []), normalize_invoice,
        )

        items: list[InvoiceItem] = []
        for invoice in invoices:
            raw_items = self._fetch(
                f"invoice_items:{invoice.id}",
                lambda: self.client.list_invoice_items(invoice.id),
                failed,
                [],
            )
            items.extend(enrich_items(invoice, normalize_many(raw_items, normalize_invoice_item)))

        projects = normalize_many(
            self._fetch("projects", self.client.list_projects, failed, []), normalize_project,
        )
        shared = normalize_many(
            self._fetch("shared_projects", self.client.list_shared_projects, failed, []), normalize_project,
        )
        payments = normalize_many(
            self._fetch("payments", self.client.list_payments, failed, []), normalize_payment,
        )

        logger.info(
            "Snapshot loaded: %d invoice(s), %d item(s), %d project(s), %d shared, %d payment(s)",
            len(invoices), len(items), len(projects), len(shared), len(payments),
        )
        return Snapshot(
            profile=profile,
            invoices=tuple(invoices),
            invoice_items=tuple(items),
            projects=tuple(projects),
            shared_projects=tuple(shared),
            payments=tuple(payments),
            fetched_at=datetime.utcnow(),
            failed=tuple(failed),
        )


class SnapshotStore:
    """
    Latest-snapshot holder (last write wins)

    Usage:
        ticket = store.begin()
        snapshot = loader.load()
        store.publish(ticket, snapshot)   # False if a newer fetch has started
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._snapshot: Optional[Snapshot] = None

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def publish(self, ticket: int, snapshot: Snapshot) -> bool:
        with self._lock:
            if ticket != self._issued:
                logger.info("Discarding snapshot from fetch #%d (latest is #%d)", ticket, self._issued)
                return False
            self._snapshot = snapshot
            return True

    @property
    def current(self) -> Optional[Snapshot]:
        with self._lock:
            return self._snapshot

    def refresh(self, loader: SnapshotLoader, user_id: Optional[str] = None) -> bool:
        """Fetch through loader and publish unless overtaken."""
        ticket = self.begin()
        return self.publish(ticket, loader.load(user_id))
