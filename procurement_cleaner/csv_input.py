"""
CSV reading for uploaded spreadsheet exports.

Turns raw upload bytes into header-keyed rows for the cleaning pipeline:
- encoding detection + decoding (Thai exports are often TIS-620 / cp874)
- newline normalization
- delimiter detection
- blank line skipping
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .rules import NORMALIZED_DELIMITER, SNIFF_DELIMITERS

LOG = logging.getLogger(__name__)


class CsvParseError(ValueError):
    """The upload could not be read as a CSV table at all."""


def decode_bytes(raw: bytes) -> Tuple[str, str]:
    """
    Decode upload bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is consumed, never carried into the first header.
    - If decode fails, fall back to UTF-8, then to replacement characters.

    Returns the text and the codec actually used.
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used), decode_used
    except (UnicodeDecodeError, LookupError):
        pass

    try:
        return raw.decode("utf-8-sig"), "utf-8-sig"
    except UnicodeDecodeError:
        LOG.warning("Could not decode upload cleanly; using replacement characters")
        return raw.decode("utf-8", errors="replace"), "utf-8"


def detect_delimiter(text: str) -> str:
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters="".join(SNIFF_DELIMITERS))
    except csv.Error:
        return NORMALIZED_DELIMITER
    return dialect.delimiter


def read_csv_rows(raw: bytes) -> List[Dict[str, Optional[str]]]:
    """
    Parse CSV bytes into rows keyed by the header row.

    Short rows leave the missing cells as None; surplus cells on long rows
    are dropped. Rows with only blank cells are skipped.
    """
    text, encoding = decode_bytes(raw)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        raise CsvParseError("file is empty")

    delimiter = detect_delimiter(text)
    LOG.debug("Reading CSV (encoding=%s, delimiter=%r)", encoding, delimiter)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        header: Optional[List[str]] = None
        rows: List[Dict[str, Optional[str]]] = []
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            if header is None:
                header = [cell.strip() for cell in cells]
                continue
            row: Dict[str, Optional[str]] = {}
            for i, name in enumerate(header):
                row[name] = cells[i] if i < len(cells) else None
            rows.append(row)
    except csv.Error as exc:
        raise CsvParseError(f"line {reader.line_num}: {exc}") from exc

    if header is None:
        raise CsvParseError("no header row")
    return rows
