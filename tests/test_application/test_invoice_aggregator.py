"""
Tests for invoice aggregation, filter policy and totals audit
"""
import logging
import random
from decimal import Decimal

import pytest

from xrozen.application.invoice_aggregator import (
    InvoiceTotals,
    aggregate,
    audit_invoice,
    audit_invoices,
    filter_invoices,
    select_display_invoices,
)

from conftest import make_invoice

_D = Decimal


@pytest.fixture
def invoices():
    return [
        make_invoice("i1", total="1000", deductions="100", paid="900", remaining="0", status="paid",
                     editor_id="e1", month="January 2025"),
        make_invoice("i2", total="500", remaining="500", status="pending",
                     editor_id="e2", month="January 2025"),
        make_invoice("i3", total="300", paid="100", remaining="200", status="partial",
                     editor_id="e1", month="February 2025"),
    ]


def test_paid_and_pending_totals():
    result = aggregate([
        make_invoice("a", total="1000", deductions="100", paid="900", remaining="0", status="paid"),
        make_invoice("b", total="500", deductions="0", paid="0", remaining="500", status="pending"),
    ])

    assert result.total_amount == _D("1500")
    assert result.total_deductions == _D("100")
    assert result.total_paid == _D("900")
    assert result.total_pending == _D("500")
    assert result.match_count == 2


def test_filter_by_editor(invoices):
    result = aggregate(invoices, editor_id="e1")

    assert result.match_count == 2
    assert result.total_amount == _D("1300")
    assert result.total_pending == _D("200")


def test_filter_by_editor_and_month(invoices):
    result = aggregate(invoices, editor_id="e1", month="January 2025")

    assert result.match_count == 1
    assert result.total_amount == _D("1000")


def test_all_sentinel_equals_no_filter(invoices):
    assert aggregate(invoices, editor_id="all", month="all") == aggregate(invoices)


@pytest.mark.parametrize("seed", range(10))
def test_all_sentinel_equals_no_filter_generated(seed):
    rng = random.Random(seed)
    generated = [
        make_invoice(
            f"g{i}",
            total=str(rng.randint(0, 10000)),
            paid=str(rng.randint(0, 5000)),
            remaining=str(rng.randint(0, 5000)),
            editor_id=rng.choice(["e1", "e2", None]),
            month=rng.choice(["January 2025", "February 2025"]),
        )
        for i in range(rng.randint(0, 30))
    ]

    assert aggregate(generated, editor_id="all", month="all") == aggregate(generated)


def test_unset_and_empty_filters_are_noops(invoices):
    assert aggregate(invoices, editor_id=None, month="") == aggregate(invoices)


def test_no_match_yields_zero_sums(invoices):
    result = aggregate(invoices, editor_id="nobody")

    assert result == InvoiceTotals()
    assert result.match_count == 0


def test_empty_input():
    assert aggregate([]) == InvoiceTotals()


def test_filter_does_not_mutate(invoices):
    before = list(invoices)
    filter_invoices(invoices, editor_id="e1")
    assert invoices == before


# ---- fallback policy ----

def test_fallback_to_all_when_enabled(invoices):
    filtered = filter_invoices(invoices, editor_id="nobody")

    assert select_display_invoices(filtered, invoices, fallback_to_all=True) == invoices


def test_no_fallback_when_disabled(invoices):
    filtered = filter_invoices(invoices, editor_id="nobody")

    assert select_display_invoices(filtered, invoices, fallback_to_all=False) == []


def test_non_empty_filter_result_is_kept(invoices):
    filtered = filter_invoices(invoices, editor_id="e2")

    assert select_display_invoices(filtered, invoices, fallback_to_all=True) == filtered


# ---- audit ----

def test_consistent_invoice_has_no_issues(invoices):
    assert audit_invoice(invoices[0]) == []
    assert audit_invoice(invoices[1]) == []


def test_rounding_within_tolerance_is_ok():
    inv = make_invoice(total="100", paid="33.33", remaining="66.665")
    assert audit_invoice(inv) == []


def test_totals_mismatch_is_reported():
    inv = make_invoice("bad", total="1000", paid="200", remaining="900")

    issues = audit_invoice(inv)

    assert len(issues) == 1
    assert "off by -100" in issues[0]


def test_paid_with_remaining_is_reported():
    inv = make_invoice("bad", total="1000", paid="800", remaining="200", status="paid")

    issues = audit_invoice(inv)

    assert any("status is paid" in issue for issue in issues)


def test_overpayment_is_surfaced_not_clamped(caplog):
    inv = make_invoice("over", total="100", paid="150", remaining="-50", status="partial")

    with caplog.at_level(logging.WARNING, logger="xrozen.application.invoice_aggregator"):
        report = audit_invoices([inv])

    assert list(report) == ["over"]
    assert any("negative remaining -50" in issue for issue in report["over"])
    assert "over" in caplog.text
    assert aggregate([inv]).total_pending == _D("-50")
