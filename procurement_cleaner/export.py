from __future__ import annotations

import csv
import io
from typing import Iterable

from .models import CleanedRecord
from .rules import NORMALIZED_DELIMITER, TARGET_ENCODING

CSV_COLUMNS = [field.alias or name for name, field in CleanedRecord.model_fields.items()]


def records_to_csv_bytes(records: Iterable[CleanedRecord]) -> bytes:
    """Serialize cleaned records as UTF-8-with-BOM CSV, schema column order."""
    outp = io.StringIO(newline="")
    writer = csv.DictWriter(
        outp,
        fieldnames=CSV_COLUMNS,
        delimiter=NORMALIZED_DELIMITER,
        lineterminator="\n",
    )
    writer.writeheader()
    for record in records:
        data = record.model_dump(by_alias=True)
        if data["sourceSheet"] is None:
            data["sourceSheet"] = ""
        writer.writerow(data)
    return outp.getvalue().encode(TARGET_ENCODING)
