"""
Tests for snapshot loading, last-write-wins store and refresh scheduling
"""
from unittest.mock import Mock

import pytest

from xrozen.application import scheduler as refresh
from xrozen.application.snapshot import Snapshot, SnapshotLoader, SnapshotStore
from xrozen.infrastructure.api_client import ApiError, UnauthorizedError


@pytest.fixture
def client():
    """Mock remote API client with one invoice, one item, owned + shared projects"""
    c = Mock()
    c.get_profile.return_value = {"id": "u1", "user_category": "editor", "full_name": "Asha"}
    c.list_invoices.return_value = [
        {"id": "i1", "editor_id": "u1", "month": "January 2025", "total_amount": "1000",
         "paid_amount": "1000", "remaining_amount": 0, "status": "paid", "editor": {"full_name": "Asha"}},
    ]
    c.list_invoice_items.return_value = [{"id": "it1", "item_name": "Teaser", "amount": "1000"}]
    c.list_projects.return_value = [{"id": "p1", "name": "Teaser", "editor_fee": 1000}]
    c.list_shared_projects.return_value = [{"id": "p2", "name": "Reel", "share_info": {"share_token": "t"}}]
    c.list_payments.return_value = [{"id": "pay1", "amount": 2499, "status": "completed"}]
    return c


def test_loader_normalizes_everything(client):
    snapshot = SnapshotLoader(client).load()

    assert snapshot.role == "editor"
    assert snapshot.user_id == "u1"
    assert [i.id for i in snapshot.invoices] == ["i1"]
    assert snapshot.invoices[0].total_amount == 1000
    assert snapshot.projects[0].editor_fee == 1000
    assert snapshot.shared_projects[0].share_info.share_token == "t"
    assert snapshot.payments[0].status == "completed"
    assert snapshot.failed == ()
    assert snapshot.fetched_at is not None
    client.list_invoice_items.assert_called_once_with("i1")


def test_loader_enriches_items_with_invoice_month(client):
    (item,) = SnapshotLoader(client).load().invoice_items

    assert item.invoice_id == "i1"
    assert item.invoice_month == "January 2025"
    assert item.invoice_status == "paid"
    assert item.editor_name == "Asha"


def test_failed_collection_becomes_empty(client):
    client.list_projects.side_effect = ApiError("HTTP 500", status_code=500)
    client.list_invoice_items.side_effect = ApiError("timeout")

    snapshot = SnapshotLoader(client).load()

    assert snapshot.projects == ()
    assert snapshot.invoice_items == ()
    assert len(snapshot.invoices) == 1
    assert snapshot.failed == ("invoice_items:i1", "projects")


def test_missing_profile_means_default_role(client):
    client.get_profile.side_effect = ApiError("HTTP 404", status_code=404)

    snapshot = SnapshotLoader(client).load()

    assert snapshot.profile is None
    assert snapshot.role is None
    assert "profile" in snapshot.failed


def test_unauthorized_propagates(client):
    client.list_invoices.side_effect = UnauthorizedError("Unauthorized", status_code=401)

    with pytest.raises(UnauthorizedError):
        SnapshotLoader(client).load()


def test_null_collections_are_empty(client):
    client.list_payments.return_value = None

    assert SnapshotLoader(client).load().payments == ()


# ---- store ----

def test_store_publishes_latest():
    store = SnapshotStore()
    snap = Snapshot()

    ticket = store.begin()

    assert store.publish(ticket, snap) is True
    assert store.current is snap


def test_overtaken_fetch_is_discarded():
    store = SnapshotStore()
    old, new = Snapshot(failed=("old",)), Snapshot(failed=("new",))

    first = store.begin()
    second = store.begin()

    assert store.publish(second, new) is True
    assert store.publish(first, old) is False
    assert store.current is new


def test_slow_first_fetch_cannot_overwrite_later_start():
    store = SnapshotStore()
    first = store.begin()
    store.begin()  # newer fetch still in flight

    assert store.publish(first, Snapshot()) is False
    assert store.current is None


def test_store_refresh_uses_loader(client):
    store = SnapshotStore()

    assert store.refresh(SnapshotLoader(client)) is True
    assert store.current.role == "editor"


# ---- refresh scheduling ----

def test_refresh_job_scheduled_and_cancelled(client, monkeypatch):
    fake = Mock()
    fake.running = False
    fake.get_job.return_value = object()
    monkeypatch.setattr(refresh, "scheduler", fake)
    store = SnapshotStore()
    loader = SnapshotLoader(client)

    refresh.start_snapshot_refresh(store, loader, 30)

    fake.add_job.assert_called_once()
    _, kwargs = fake.add_job.call_args
    assert kwargs["seconds"] == 30
    assert kwargs["args"] == [store, loader]
    assert kwargs["id"] == refresh.SNAPSHOT_REFRESH_JOB
    fake.start.assert_called_once()

    refresh.cancel_snapshot_refresh()
    fake.remove_job.assert_called_once_with(refresh.SNAPSHOT_REFRESH_JOB)


def test_refresh_job_swallows_errors(client):
    client.get_profile.side_effect = UnauthorizedError("expired", status_code=401)
    store = SnapshotStore()

    refresh._run_snapshot_refresh(store, SnapshotLoader(client))

    assert store.current is None
