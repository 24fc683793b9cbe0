"""
Tests for Profile subscription status
"""
from datetime import datetime, timedelta

from xrozen.domain.profile import Profile

NOW = datetime(2026, 10, 19, 12, 0, 0)


def test_inactive_subscription():
    p = Profile(id="u1", subscription_active=False, subscription_end_date=NOW + timedelta(days=100))

    assert p.subscription_status(NOW) == "Inactive"


def test_expiring_soon_within_seven_days():
    p = Profile(id="u1", subscription_active=True, subscription_end_date=NOW + timedelta(days=6, hours=1))

    assert p.days_remaining(NOW) == 7
    assert p.subscription_status(NOW) == "Expiring Soon"


def test_active_beyond_seven_days():
    p = Profile(id="u1", subscription_active=True, subscription_end_date=NOW + timedelta(days=7, hours=1))

    assert p.days_remaining(NOW) == 8
    assert p.subscription_status(NOW) == "Active"


def test_active_without_end_date():
    p = Profile(id="u1", subscription_active=True)

    assert p.days_remaining(NOW) is None
    assert p.subscription_status(NOW) == "Active"


def test_already_expired_but_flagged_active():
    p = Profile(id="u1", subscription_active=True, subscription_end_date=NOW - timedelta(days=2))

    assert p.subscription_status(NOW) == "Expiring Soon"
