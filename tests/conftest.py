"""
Pytest fixtures for testing
"""
import pytest
from decimal import Decimal

from xrozen.application.snapshot import Snapshot
from xrozen.domain.invoice import Invoice, InvoiceItem
from xrozen.domain.payment import Payment
from xrozen.domain.profile import Profile
from xrozen.domain.project import Project

_D = Decimal


def make_invoice(id="inv-1", total="0", deductions="0", paid="0", remaining="0", status="pending", **kwargs) -> Invoice:
    """Invoice with amounts given as strings (Decimal-exact)."""
    return Invoice(
        id=id,
        total_amount=_D(total),
        total_deductions=_D(deductions),
        paid_amount=_D(paid),
        remaining_amount=_D(remaining),
        status=status,
        **kwargs,
    )


def make_item(id="item-1", amount="0", month=None, **kwargs) -> InvoiceItem:
    return InvoiceItem(id=id, amount=_D(amount), invoice_month=month, **kwargs)


def make_project(id="p-1", editor_fee=None, client_fee=None, fee=None, **kwargs) -> Project:
    return Project(
        id=id,
        editor_fee=_D(editor_fee) if editor_fee is not None else None,
        client_fee=_D(client_fee) if client_fee is not None else None,
        fee=_D(fee) if fee is not None else None,
        **kwargs,
    )


def make_payment(id="pay-1", amount="0", **kwargs) -> Payment:
    return Payment(id=id, amount=_D(amount), **kwargs)


@pytest.fixture
def sample_user_id():
    """Sample user ID for tests"""
    return "user-1"


@pytest.fixture
def snapshot_factory(sample_user_id):
    """Build a Snapshot for the sample user with the given role and collections."""
    def _make(role=None, **collections) -> Snapshot:
        profile = Profile(id=sample_user_id, user_category=role, full_name="Test User")
        return Snapshot(
            profile=profile,
            **{name: tuple(records) for name, records in collections.items()},
        )
    return _make
