import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, Form, HTTPException

from .config import settings
from .csv_input import CsvParseError
from .models import CleanResponse, CleanRowsRequest, HealthResponse
from .service import clean_csv_bytes, clean_rows

logging.basicConfig(level=settings.log_level)
LOG = logging.getLogger(__name__)

app = FastAPI(
    title="procurement-cleaner",
    description="Cleans procurement spreadsheet exports into a fixed record schema",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/clean", response_model=CleanResponse)
async def clean_csv(
    file: UploadFile = File(...),
    source_sheet: Optional[str] = Form(None),
):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Please upload a valid CSV file")

    raw = await file.read()
    if len(raw) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.max_upload_mb} MB")

    try:
        return clean_csv_bytes(raw, source_sheet=source_sheet or settings.default_source_sheet)
    except CsvParseError as exc:
        LOG.warning("CSV parsing error for %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV file: {exc}") from exc

@app.post("/clean/rows", response_model=CleanResponse)
def clean_json_rows(payload: CleanRowsRequest):
    return clean_rows(payload.rows, source_sheet=payload.source_sheet or settings.default_source_sheet)
