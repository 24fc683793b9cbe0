"""
Generic filtering and sorting for list screens (projects, invoices, line
items, payments).

Records may be dataclass instances or plain mappings. Both operations are
pure: they return new lists and leave the input untouched.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence, TypeVar

from xrozen.application.invoice_aggregator import is_active_filter

T = TypeVar("T")

SORT_ASC = "asc"
SORT_DESC = "desc"


def field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def matches_search(record: Any, query: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match on any of the given fields."""
    needle = query.lower()
    for field in fields:
        value = field_value(record, field)
        if value is not None and needle in str(value).lower():
            return True
    return False


def filter_records(
    records: Iterable[T],
    search: str | None = None,
    search_fields: Sequence[str] = (),
    **exact: Any,
) -> list[T]:
    """
    Filter records by search text and exact field values

    Args:
        records: records to filter
        search: free text; empty/None disables the search
        search_fields: fields searched by `search`
        **exact: field=value filters; "all", "" or None disables a filter

    Example:
        filter_records(projects, "promo", ("name", "status"), status="draft")
    """
    result = list(records)
    if search:
        result = [r for r in result if matches_search(r, search, search_fields)]
    for field, expected in exact.items():
        if not is_active_filter(expected):
            continue
        result = [r for r in result if field_value(r, field) == expected]
    return result


def _sort_key(value: Any) -> tuple:
    # Present values before missing ones; numbers, dates and text in separate
    # bands so mixed columns never compare int against str.
    if value is None or value == "":
        return (1,)
    if isinstance(value, bool):
        return (0, 0, int(value))
    if isinstance(value, (int, float, Decimal)):
        return (0, 0, value)
    if isinstance(value, datetime):
        return (0, 1, value)
    if isinstance(value, date):
        return (0, 1, datetime(value.year, value.month, value.day))
    return (0, 2, str(value))


def sort_records(records: Iterable[T], key: str, direction: str = SORT_ASC) -> list[T]:
    """
    Stable sort by one field

    Desc is the exact reverse of asc apart from ties, which keep their
    input order in both directions.
    """
    return sorted(
        records,
        key=lambda r: _sort_key(field_value(r, key)),
        reverse=direction == SORT_DESC,
    )
