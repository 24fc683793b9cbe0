"""
Tests for Project domain entity
"""
from decimal import Decimal

from xrozen.domain.project import FEE_BASE, FEE_CLIENT, FEE_EDITOR

from conftest import make_project


def test_role_fee_preferred():
    p = make_project(editor_fee="1200", client_fee="2000", fee="1500")

    assert p.fee_for(FEE_EDITOR) == Decimal("1200")
    assert p.fee_for(FEE_CLIENT) == Decimal("2000")
    assert p.fee_for(FEE_BASE) == Decimal("1500")


def test_fallback_to_fee_when_role_fee_absent():
    p = make_project(fee="1500")

    assert p.fee_for(FEE_EDITOR) == Decimal("1500")
    assert p.fee_for(FEE_CLIENT) == Decimal("1500")


def test_explicit_zero_role_fee_is_kept():
    """0 is a real fee, not "absent" - no fallback"""
    p = make_project(editor_fee="0", fee="1500")

    assert p.fee_for(FEE_EDITOR) == Decimal("0")


def test_no_fees_is_zero():
    assert make_project().fee_for(FEE_CLIENT) == Decimal("0")


def test_is_done():
    assert make_project(status="approved").is_done
    assert make_project(status="completed").is_done
    assert not make_project(status="pending").is_done
