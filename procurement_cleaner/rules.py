"""
Deterministic cleaning rules.

Header aliases, date formats, category keywords and field defaults are
plain ordered tables so they can be extended without touching the
pipeline code. Order matters everywhere: first match wins.
"""

# --- Header aliases (English first, then Thai spreadsheet headers) ---
PO_HEADERS = ["PO", "PO_Number", "เลขที่ PO"]
DATE_HEADERS = ["DATE", "Date", "วันที่"]
SUPPLIER_HEADERS = ["Supplier", "ผู้ขาย", "ชื่อผู้ขาย"]
DESCRIPTION_HEADERS = ["Description", "รายละเอียด", "รายการ"]
PROJECT_HEADERS = ["Project", "Project Code", "โครงการ"]
QUANTITY_HEADERS = ["Qty", "Quantity", "จำนวน"]
PRICE_HEADERS = ["Price", "Amount", "ราคา", "จำนวนเงิน"]
VAT_HEADERS = ["VAT", "ภาษี"]
ENGINEER_HEADERS = ["Engineer", "ผู้อนุมัติ", "วิศวกร"]
SOURCE_SHEET_HEADERS = ["Source_Sheet"]

# --- Dates ---
# Day-first wins for ambiguous values like 03/04/2026.
DATE_FORMATS = ["%d/%m/%Y", "%m/%d/%Y", "%Y-%m-%d", "%d-%m-%Y"]

# Hyphen, en-dash, em-dash
COMPOUND_DELIMITERS = "-–—"

# --- Categories ---
DEFAULT_CATEGORY = "Office Supplies"
CATEGORY_KEYWORDS = [
    ("IT Equipment", ["คอม", "computer", "laptop"]),
    ("Furniture", ["โต๊ะ", "เก้าอี้", "furniture"]),
    ("Services", ["ค่าแรง", "labor", "service"]),
    ("Construction", ["เหล็ก", "ปูน", "material"]),
]
CATEGORIES = [name for name, _ in CATEGORY_KEYWORDS] + [DEFAULT_CATEGORY]

# --- Field defaults ---
DEFAULT_SUPPLIER = "Unknown"
DEFAULT_UNIT = "Unit"
DEFAULT_PROJECT_CODE = "N/A"
DEFAULT_QUANTITY = 1.0
DEFAULT_VAT = "7%"
DEFAULT_ENGINEER = "Unassigned"
DEFAULT_SOURCE_SHEET = "Web Upload"

# --- CSV boundary ---
TARGET_ENCODING = "utf-8-sig"  # UTF-8 with BOM, so spreadsheets open Thai text correctly
SNIFF_DELIMITERS = [",", ";", "\t", "|"]
NORMALIZED_DELIMITER = ","
