"""
Glue between the upload boundary and the cleaning pipeline.

Builds the API response envelope: cleaned records, the cleaned CSV and a
report listing the rows that were dropped.
"""

from __future__ import annotations

import base64
import hashlib
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .cleaning import clean_data_with_dropped
from .csv_input import read_csv_rows
from .export import records_to_csv_bytes
from .rules import DEFAULT_SOURCE_SHEET, PO_HEADERS, TARGET_ENCODING


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def clean_rows(
    rows: Sequence[Mapping[str, Any]],
    source_sheet: str = DEFAULT_SOURCE_SHEET,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Clean already-tokenized rows and return a dict matching CleanResponse."""
    records, dropped = clean_data_with_dropped(rows, source_sheet=source_sheet, today=today)

    warnings: List[dict] = [
        {
            "row": index,
            "column": PO_HEADERS[0],
            "issue": "missing_po_number",
            "value": None,
            "action": "dropped",
        }
        for index in dropped
    ]

    csv_bytes = records_to_csv_bytes(records)
    return {
        "records": records,
        "cleaned_csv": {
            "sha256": _sha256_hex(csv_bytes),
            "encoding": TARGET_ENCODING,
            "content_b64": base64.b64encode(csv_bytes).decode("ascii"),
        },
        "report": {
            "summary": {
                "input_rows": len(rows),
                "cleaned_rows": len(records),
                "dropped_rows": len(warnings),
                "deterministic": True,
            },
            "warnings": warnings,
        },
    }


def clean_csv_bytes(
    raw: bytes,
    source_sheet: str = DEFAULT_SOURCE_SHEET,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Read an uploaded CSV and clean it. Raises CsvParseError for unreadable files."""
    return clean_rows(read_csv_rows(raw), source_sheet=source_sheet, today=today)
