"""
Field resolution for historical financial records.

Records come from several collections (employee expenses, vendor payments,
salaries, invoices) and name their date, amount and category fields
differently. The helpers here look fields up in a fixed precedence order.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from numbers import Number
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

# Field precedence, first match wins
DATE_FIELDS = ("date", "paymentDate", "invoiceDate")
AMOUNT_FIELDS = ("amount", "amountPaid", "salary", "amountInclGST")
CATEGORY_FIELDS = ("suggestedCategory", "category")


def get_field(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping or from an object attribute."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a record date, returning None when it is not a usable date.

    Accepts datetimes, dates, ISO-like strings and epoch milliseconds.
    """
    if not _is_present(value) or isinstance(value, bool):
        return None

    try:
        if isinstance(value, datetime):
            parsed = pd.Timestamp(value)
        elif isinstance(value, date):
            parsed = pd.Timestamp(datetime(value.year, value.month, value.day))
        elif isinstance(value, Number):
            parsed = pd.to_datetime(float(value), unit="ms", errors="coerce")
        elif isinstance(value, str):
            parsed = pd.to_datetime(value.strip(), errors="coerce")
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(parsed):
        return None
    return parsed


def parse_amount(value: Any) -> float:
    """Parse a record amount, returning NaN when it is not a finite number."""
    if isinstance(value, bool):
        return math.nan

    try:
        if isinstance(value, (int, float, Decimal)):
            amount = float(value)
        elif isinstance(value, str):
            amount = float(value.strip())
        else:
            return math.nan
    except (ValueError, TypeError, OverflowError):
        return math.nan

    return amount if math.isfinite(amount) else math.nan


def resolve_date(record: Any, fields: Sequence[str] = DATE_FIELDS) -> Optional[datetime]:
    """First field in ``fields`` that parses as a date."""
    for name in fields:
        parsed = parse_date(get_field(record, name))
        if parsed is not None:
            return parsed
    return None


def resolve_amount(record: Any, fields: Sequence[str] = AMOUNT_FIELDS) -> float:
    """Parsed value of the first present field in ``fields``.

    A record without any amount field counts as 0. A present but unparseable
    amount yields NaN.
    """
    for name in fields:
        value = get_field(record, name)
        if _is_present(value):
            return parse_amount(value)
    return 0.0


def resolve_category(record: Any, default: str, fields: Sequence[str] = CATEGORY_FIELDS) -> str:
    for name in fields:
        value = get_field(record, name)
        if _is_present(value):
            return str(value).strip()
    return default


def month_key(moment: datetime) -> str:
    """``YYYY-MM`` key; sorts lexicographically in calendar order."""
    return f"{moment.year:04d}-{moment.month:02d}"
