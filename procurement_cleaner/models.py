from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import CATEGORIES


class CleanedRecord(BaseModel):
    """One normalized procurement row. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", examples=["2026-02-18"])
    po_number: str = Field(alias="poNumber", min_length=1)
    supplier_name: str = Field(alias="supplierName")
    item_description: str = Field(alias="itemDescription")
    quantity: float
    unit: str
    project_code: str = Field(alias="projectCode")
    unit_price: float = Field(alias="unitPrice")
    total_price: float = Field(alias="totalPrice")
    vat_rate: str = Field(alias="vatRate", pattern=r"^\d+%$")
    engineer_name: str = Field(alias="engineerName")
    category: str
    source_sheet: Optional[str] = Field(default=None, alias="sourceSheet")

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        if v not in CATEGORIES:
            raise ValueError(f"category must be one of {CATEGORIES}")
        return v


class CleanedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    content_b64: str


class ReportSummary(BaseModel):
    input_rows: int = 0
    cleaned_rows: int = 0
    dropped_rows: int = 0
    deterministic: bool = True


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class CleaningReport(BaseModel):
    summary: ReportSummary
    warnings: List[ReportItem] = Field(default_factory=list)


class CleanResponse(BaseModel):
    records: List[CleanedRecord] = Field(default_factory=list)
    cleaned_csv: CleanedCsv
    report: CleaningReport


class CleanRowsRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    source_sheet: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool = True
