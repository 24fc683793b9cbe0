"""
Record normalizer: the typed boundary between raw API payloads and the
finance engine.

Raw records are untyped mappings: amounts may arrive as numbers, numeric
strings, null or not at all. Nothing downstream sums raw values; every
record passes through one of the normalize_* functions first.

Rules:
  - numeric field missing / null / empty        -> 0
  - numeric field present but unparsable        -> 0, logged as a warning
  - date field missing                          -> None (never "now")
  - status missing                              -> "pending" (invoices,
                                                   payments), "draft" (projects)

None of the functions raise on bad data.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, TypeVar

from xrozen.domain.invoice import Invoice, InvoiceItem, INVOICE_STATUS_PENDING, INVOICE_STATUSES
from xrozen.domain.payment import Payment, PAYMENT_STATUS_PENDING, PAYMENT_STATUSES
from xrozen.domain.profile import Profile
from xrozen.domain.project import Project, ShareInfo, PROJECT_STATUS_DRAFT

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ZERO = Decimal("0")

# Largest accepted magnitude: 10^15 (amounts beyond that are treated as malformed)
MAX_AMOUNT_EXPONENT = 15

# "+05" / "-0530" style offsets (Postgres), which fromisoformat rejects before 3.11
_SHORT_OFFSET = re.compile(r"([T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)([+-])(\d{2}):?(\d{2})?$")


# ----------------------------------------------------------------------
# Field coercion
# ----------------------------------------------------------------------

def parse_amount(value: Any) -> Decimal | None:
    """
    Parse a raw amount

    Returns:
        Decimal, or None if the value is not a finite number or is too
        large to sum safely (exponent above MAX_AMOUNT_EXPONENT).
        Missing / null / blank values are reported as 0.
    """
    if value is None:
        return _ZERO
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return _checked(value)
    if isinstance(value, int):
        return _checked(Decimal(value))
    if isinstance(value, float):
        # via str() so 0.1 stays 0.1 instead of its binary expansion
        return _checked(Decimal(str(value)))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
        return _checked(result)
    return None


def _checked(value: Decimal) -> Decimal | None:
    if not value.is_finite() or value.adjusted() > MAX_AMOUNT_EXPONENT:
        return None
    return value


def to_decimal(raw: Mapping, field: str) -> Decimal:
    """Amount field -> Decimal, 0 for missing or malformed values."""
    value = raw.get(field)
    result = parse_amount(value)
    if result is None:
        logger.warning(
            "Malformed amount %s=%r in record id=%s, using 0",
            field, value, raw.get("id"),
        )
        return _ZERO
    return result


def to_optional_decimal(raw: Mapping, field: str) -> Decimal | None:
    """Like to_decimal, but missing / null stays None (used for fee fallbacks)."""
    value = raw.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    result = parse_amount(value)
    if result is None:
        logger.warning(
            "Malformed amount %s=%r in record id=%s, treating as absent",
            field, value, raw.get("id"),
        )
    return result


def _full_offset(match: re.Match) -> str:
    time, sign, hours, minutes = match.groups()
    return f"{time}{sign}{hours}:{minutes or '00'}"


def to_datetime(raw: Mapping, field: str) -> datetime | None:
    """
    ISO string / date / datetime -> naive UTC datetime

    Aware values are converted to UTC so that dates coming from different
    sources stay comparable.
    """
    value = raw.get(field)
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _SHORT_OFFSET.sub(_full_offset, text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Malformed date %s=%r in record id=%s", field, value, raw.get("id"))
            return None
    else:
        logger.warning("Malformed date %s=%r in record id=%s", field, value, raw.get("id"))
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_date(raw: Mapping, field: str) -> date | None:
    parsed = to_datetime(raw, field)
    return parsed.date() if parsed is not None else None


def to_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def to_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _status(raw: Mapping, default: str, known: Iterable[str] = ()) -> str:
    """Lowercased status, default when missing. Unknown values are kept but logged."""
    value = raw.get("status")
    if not value:
        return default
    status = str(value).strip().lower()
    if known and status not in known:
        logger.warning("Unknown status %r in record id=%s", status, raw.get("id"))
    return status


def _editor_name(raw: Mapping) -> str:
    editor = raw.get("editor")
    if isinstance(editor, Mapping) and editor.get("full_name"):
        return str(editor["full_name"])
    if raw.get("editor_name"):
        return str(raw["editor_name"])
    return "Unknown"


# ----------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------

def normalize_invoice(raw: Mapping) -> Invoice:
    return Invoice(
        id=to_id(raw.get("id")) or "",
        editor_id=to_id(raw.get("editor_id")),
        client_id=to_id(raw.get("client_id")),
        month=to_text(raw.get("month")),
        total_amount=to_decimal(raw, "total_amount"),
        total_deductions=to_decimal(raw, "total_deductions"),
        paid_amount=to_decimal(raw, "paid_amount"),
        remaining_amount=to_decimal(raw, "remaining_amount"),
        status=_status(raw, INVOICE_STATUS_PENDING, INVOICE_STATUSES),
        payment_type=to_text(raw.get("payment_type")),
        created_at=to_datetime(raw, "created_at"),
        due_date=to_date(raw, "due_date"),
        notes=to_text(raw.get("notes")),
        editor_name=_editor_name(raw),
    )


def normalize_invoice_item(raw: Mapping) -> InvoiceItem:
    return InvoiceItem(
        id=to_id(raw.get("id")) or "",
        invoice_id=to_id(raw.get("invoice_id")),
        item_name=to_text(raw.get("item_name")) or "",
        amount=to_decimal(raw, "amount"),
        invoice_month=to_text(raw.get("invoice_month")),
        invoice_status=to_text(raw.get("invoice_status")),
        editor_id=to_id(raw.get("editor_id")),
        editor_name=_editor_name(raw),
    )


def normalize_share_info(raw: Any) -> ShareInfo | None:
    if not isinstance(raw, Mapping):
        return None
    return ShareInfo(
        share_token=to_text(raw.get("share_token")),
        can_view=to_bool(raw.get("can_view", True)),
        can_edit=to_bool(raw.get("can_edit", False)),
        can_chat=to_bool(raw.get("can_chat", False)),
    )


def normalize_project(raw: Mapping) -> Project:
    return Project(
        id=to_id(raw.get("id")) or "",
        name=to_text(raw.get("name")) or "",
        creator_id=to_id(raw.get("creator_id")),
        editor_id=to_id(raw.get("editor_id")),
        client_id=to_id(raw.get("client_id")),
        editor_fee=to_optional_decimal(raw, "editor_fee"),
        client_fee=to_optional_decimal(raw, "client_fee"),
        fee=to_optional_decimal(raw, "fee"),
        status=_status(raw, PROJECT_STATUS_DRAFT),
        project_type=to_text(raw.get("project_type")),
        description=to_text(raw.get("description")),
        is_subproject=to_bool(raw.get("is_subproject")),
        parent_project_id=to_id(raw.get("parent_project_id")),
        assigned_date=to_date(raw, "assigned_date"),
        deadline=to_date(raw, "deadline"),
        created_at=to_datetime(raw, "created_at"),
        updated_at=to_datetime(raw, "updated_at"),
        share_info=normalize_share_info(raw.get("share_info")),
    )


def normalize_payment(raw: Mapping) -> Payment:
    return Payment(
        id=to_id(raw.get("id")) or "",
        amount=to_decimal(raw, "amount"),
        currency=to_text(raw.get("currency")) or "INR",
        status=_status(raw, PAYMENT_STATUS_PENDING, PAYMENT_STATUSES),
        date=to_datetime(raw, "date"),
        description=to_text(raw.get("description")) or "",
        payment_method=to_text(raw.get("payment_method")),
    )


def normalize_profile(raw: Mapping) -> Profile:
    category = raw.get("user_category")
    return Profile(
        id=to_id(raw.get("id")) or "",
        user_category=str(category).strip().lower() if category else None,
        full_name=to_text(raw.get("full_name")),
        subscription_tier=to_text(raw.get("subscription_tier")),
        subscription_active=to_bool(raw.get("subscription_active")),
        subscription_end_date=to_datetime(raw, "subscription_end_date"),
    )


def normalize_many(records: Iterable[Any] | None, normalize: Callable[[Mapping], T]) -> list[T]:
    """
    Normalize a fetched collection

    None is accepted as "no data yet"; entries that are not mappings are
    dropped with a warning.
    """
    result: list[T] = []
    for raw in records or ():
        if not isinstance(raw, Mapping):
            logger.warning("Skipping non-object record: %r", raw)
            continue
        result.append(normalize(raw))
    return result
