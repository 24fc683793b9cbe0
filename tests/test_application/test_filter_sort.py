"""
Tests for generic filtering and sorting
"""
import random
from datetime import date, datetime
from decimal import Decimal

import pytest

from xrozen.application.filter_sort import filter_records, sort_records

from conftest import make_project

_D = Decimal


@pytest.fixture
def projects():
    return [
        make_project("1", name="Wedding Teaser", status="draft", project_type="wedding", fee="500",
                     deadline=date(2025, 3, 1)),
        make_project("2", name="Product Promo", status="in_review", description="Launch video", fee="1500",
                     deadline=date(2025, 1, 15)),
        make_project("3", name="podcast ep 4", status="completed", fee="200"),
        make_project("4", name="Brand Reel", status="draft", project_type="promo", fee="1500",
                     deadline=date(2025, 2, 1)),
    ]


FIELDS = ("name", "project_type", "status", "description")


# ---- filter ----

def test_search_is_case_insensitive_substring(projects):
    result = filter_records(projects, "PROMO", FIELDS)

    assert [p.id for p in result] == ["2", "4"]


def test_search_checks_optional_fields(projects):
    assert [p.id for p in filter_records(projects, "launch", FIELDS)] == ["2"]


def test_empty_search_is_noop(projects):
    assert filter_records(projects, "", FIELDS) == projects
    assert filter_records(projects, None, FIELDS) == projects


def test_exact_filter_and_all_sentinel(projects):
    assert [p.id for p in filter_records(projects, status="draft")] == ["1", "4"]
    assert filter_records(projects, status="all") == projects
    assert filter_records(projects, status=None) == projects


def test_search_and_exact_combined(projects):
    assert [p.id for p in filter_records(projects, "reel", FIELDS, status="draft")] == ["4"]


def test_filter_works_on_mappings():
    rows = [
        {"id": "a", "description": "Pro plan", "status": "completed"},
        {"id": "b", "description": "Basic plan", "status": "failed"},
    ]

    assert filter_records(rows, "pro", ("description", "id")) == [rows[0]]
    assert filter_records(rows, status="failed") == [rows[1]]


def test_filter_does_not_mutate(projects):
    before = list(projects)
    filter_records(projects, "promo", FIELDS, status="draft")
    assert projects == before


# ---- sort ----

def test_sort_text(projects):
    assert [p.name for p in sort_records(projects, "name")] == [
        "Brand Reel", "Product Promo", "Wedding Teaser", "podcast ep 4",
    ]


def test_sort_numbers_stable_on_ties(projects):
    assert [p.id for p in sort_records(projects, "fee")] == ["3", "1", "2", "4"]
    assert [p.id for p in sort_records(projects, "fee", "desc")] == ["2", "4", "1", "3"]


def test_sort_dates_missing_last(projects):
    assert [p.id for p in sort_records(projects, "deadline")] == ["2", "4", "1", "3"]


def test_sort_mixed_date_and_datetime():
    rows = [
        {"id": "a", "when": datetime(2025, 1, 2, 8, 0)},
        {"id": "b", "when": date(2025, 1, 1)},
        {"id": "c", "when": datetime(2024, 12, 31, 23, 59)},
    ]

    assert [r["id"] for r in sort_records(rows, "when")] == ["c", "b", "a"]


def test_sort_is_pure(projects):
    before = list(projects)
    sort_records(projects, "name", "desc")
    assert projects == before


@pytest.mark.parametrize("seed", range(15))
def test_desc_is_reverse_of_asc_for_distinct_keys(seed):
    rng = random.Random(seed)
    values = rng.sample(range(100000), rng.randint(0, 50))
    rows = [{"id": str(i), "amount": _D(v) / 100} for i, v in enumerate(values)]

    asc = sort_records(rows, "amount", "asc")
    desc = sort_records(rows, "amount", "desc")

    assert desc == list(reversed(asc))
