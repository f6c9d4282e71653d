"""
Header and value normalization utilities.

Used by the row normalizer to read raw import rows.
Normalizations are composable: each is a small function
that can be chained.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping


def normalize_whitespace(value: str) -> str:
    """Collapse whitespace and strip."""
    return re.sub(r"\s+", " ", value.strip())


def normalize_case(value: str) -> str:
    """Lowercase for case-insensitive comparison."""
    return value.lower()


def normalize_header(value: str) -> str:
    """
    Header normalization for alias lookup.
    'Item Name'   → 'itemname'
    'item_name'   → 'itemname'
    'serialNumber' → 'serialnumber'
    """
    return re.sub(r"[\s_\-]", "", normalize_case(str(value)))


# ─── Row Lookup ───────────────────────────────────────────────

def index_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Re-key a raw row by normalized header.

    When two headers normalize to the same key the first one wins,
    so an exact spreadsheet header is never shadowed by a later column.
    """
    indexed: dict[str, Any] = {}
    for key, value in row.items():
        indexed.setdefault(normalize_header(key), value)
    return indexed


def lookup_field(indexed_row: Mapping[str, Any], aliases: Iterable[str]) -> str:
    """
    Return the first non-blank value found under any alias, as clean text.

    Blank values fall through to the next alias, matching the way
    spreadsheet exports leave unused columns empty rather than absent.
    """
    for alias in aliases:
        value = indexed_row.get(normalize_header(alias))
        text = clean_text(value)
        if text:
            return text
    return ""


def clean_text(value: Any) -> str:
    """Stringify a cell and collapse whitespace. None → ''."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet readers hand back 2019.0 for a typed-in 2019
        value = int(value)
    return normalize_whitespace(str(value))


def blank_to_none(value: str) -> str | None:
    return value or None


# ─── Numeric ──────────────────────────────────────────────────

_CURRENCY_NOISE = re.compile(r"[$€£,\s]")


def parse_decimal(value: str) -> Decimal | None:
    """
    Parse a money-like string to Decimal.
    '1,299.99' → Decimal('1299.99')
    '$45'      → Decimal('45')
    '(20)'     → Decimal('-20')   accounting negative

    Returns None if the value isn't a finite number.
    """
    text = _CURRENCY_NOISE.sub("", value)
    if not text:
        return None
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return -number if negative else number


# ─── Dates ────────────────────────────────────────────────────

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%Y/%m/%d", "%d.%m.%Y")


def parse_date(value: Any) -> date | None:
    """
    Parse a purchase date.

    Accepts date/datetime objects (Excel cells), ISO timestamps, and the
    common US and ISO spellings. Returns None if nothing matches.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = clean_text(value)
    if not text:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    # Full ISO timestamps: 2021-03-04T00:00:00.000Z
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None
