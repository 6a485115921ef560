"""
Row cleaning pipeline for procurement spreadsheets.

Every normalizer here is total: a malformed cell degrades to a documented
default instead of raising. The only hard filter is the PO number, which
decides whether a row is kept at all.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import CleanedRecord
from .rules import (
    CATEGORY_KEYWORDS,
    COMPOUND_DELIMITERS,
    DATE_FORMATS,
    DATE_HEADERS,
    DEFAULT_CATEGORY,
    DEFAULT_ENGINEER,
    DEFAULT_PROJECT_CODE,
    DEFAULT_QUANTITY,
    DEFAULT_SOURCE_SHEET,
    DEFAULT_SUPPLIER,
    DEFAULT_UNIT,
    DEFAULT_VAT,
    DESCRIPTION_HEADERS,
    ENGINEER_HEADERS,
    PO_HEADERS,
    PRICE_HEADERS,
    PROJECT_HEADERS,
    QUANTITY_HEADERS,
    SOURCE_SHEET_HEADERS,
    SUPPLIER_HEADERS,
    VAT_HEADERS,
)

LOG = logging.getLogger(__name__)

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_DELIMITER_RE = re.compile("[" + re.escape(COMPOUND_DELIMITERS) + "]")


def _as_text(value: Any) -> str:
    # Spreadsheet numbers like 12345.0 should read as "12345".
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def find_value(row: Mapping[str, Any], headers: Sequence[str]) -> Any:
    """
    Return the cell for the first header alias present in the row.

    Matching is case-insensitive and exact. A matching key whose value is
    None counts as missing, so the next alias is tried. Returns None when
    nothing matches. The value is returned as-is (no trimming).
    """
    for header in headers:
        wanted = header.lower()
        key = next((k for k in row if isinstance(k, str) and k.lower() == wanted), None)
        if key is not None and row[key] is not None:
            return row[key]
    return None


def is_valid_row(row: Mapping[str, Any]) -> bool:
    """A row is kept only if it carries a non-blank PO number."""
    po_value = find_value(row, PO_HEADERS)
    return po_value is not None and _as_text(po_value).strip() != ""


def parse_date(value: Any, today: Optional[date] = None) -> str:
    """
    Standardize a date cell to ISO format (YYYY-MM-DD).

    Formats are tried in DATE_FORMATS order and the first calendar-valid
    parse wins, so 03/04/2026 is read day-first. Anything unparseable falls
    back to today's date.
    """
    fallback = (today or date.today()).isoformat()
    if not value:
        return fallback

    text = _as_text(value).strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.date().isoformat()

    return fallback


def parse_number(value: Any) -> float:
    """
    Parse amounts such as "1,500.50", "฿ 2,000" or "500 บาท".

    Everything except digits, dots and minus signs is dropped, then the
    leading number is read. Returns 0 when nothing usable remains.
    """
    if not value:
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", _as_text(value))
    match = _LEADING_FLOAT_RE.match(cleaned)
    if not match:
        return 0.0
    return float(match.group()) or 0.0


def split_compound(value: Optional[str]) -> Tuple[str, str]:
    """
    Split "Supplier Name - Item Description" style cells.

    Any dash variant delimits. Further dashes after the first stay in the
    second part, rejoined with plain hyphens.
    """
    head, *tail = _DELIMITER_RE.split(value or "")
    return head.strip(), "-".join(tail).strip()


def format_vat(value: Any) -> str:
    digits = _NON_DIGIT_RE.sub("", _as_text(value))
    if not digits:
        return DEFAULT_VAT
    return f"{digits}%"


def auto_categorize(description: Optional[str]) -> str:
    desc = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in desc for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def process_row(
    row: Mapping[str, Any],
    source_sheet: str = DEFAULT_SOURCE_SHEET,
    today: Optional[date] = None,
) -> CleanedRecord:
    """Build one CleanedRecord from a row that already passed is_valid_row."""
    cleaned_date = parse_date(find_value(row, DATE_HEADERS), today=today)
    po_number = _as_text(find_value(row, PO_HEADERS)).strip()

    # Supplier and item are often merged into one cell
    supplier_name, item_description = split_compound(_as_text(find_value(row, SUPPLIER_HEADERS)))
    if not item_description:
        item_description = _as_text(find_value(row, DESCRIPTION_HEADERS))

    unit, project_code = split_compound(_as_text(find_value(row, PROJECT_HEADERS)))

    quantity = parse_number(find_value(row, QUANTITY_HEADERS)) or DEFAULT_QUANTITY
    unit_price = parse_number(find_value(row, PRICE_HEADERS))

    engineer_name = _as_text(find_value(row, ENGINEER_HEADERS)).strip()
    row_sheet = _as_text(find_value(row, SOURCE_SHEET_HEADERS))

    return CleanedRecord(
        date=cleaned_date,
        po_number=po_number,
        supplier_name=supplier_name or DEFAULT_SUPPLIER,
        item_description=item_description,
        quantity=quantity,
        unit=unit or DEFAULT_UNIT,
        project_code=project_code or DEFAULT_PROJECT_CODE,
        unit_price=unit_price,
        total_price=quantity * unit_price,
        vat_rate=format_vat(find_value(row, VAT_HEADERS)),
        engineer_name=engineer_name or DEFAULT_ENGINEER,
        category=auto_categorize(item_description),
        source_sheet=row_sheet or source_sheet,
    )


def clean_data_with_dropped(
    rows: Iterable[Mapping[str, Any]],
    source_sheet: str = DEFAULT_SOURCE_SHEET,
    today: Optional[date] = None,
) -> Tuple[List[CleanedRecord], List[int]]:
    """
    Clean rows in one pass, also returning the 1-based numbers of the rows
    dropped for a missing PO number.
    """
    records: List[CleanedRecord] = []
    dropped: List[int] = []
    for index, row in enumerate(rows, start=1):
        if not is_valid_row(row):
            LOG.debug("Dropping row %d: missing PO number", index)
            dropped.append(index)
            continue
        records.append(process_row(row, source_sheet=source_sheet, today=today))

    LOG.info(
        "Cleaned %d of %d rows (%d dropped)",
        len(records), len(records) + len(dropped), len(dropped),
    )
    return records, dropped


def clean_data(
    rows: Iterable[Mapping[str, Any]],
    source_sheet: str = DEFAULT_SOURCE_SHEET,
    today: Optional[date] = None,
) -> List[CleanedRecord]:
    """
    Main cleaning pipeline.

    Drops rows without a PO number and cleans the rest, keeping input order.
    """
    records, _ = clean_data_with_dropped(rows, source_sheet=source_sheet, today=today)
    return records
