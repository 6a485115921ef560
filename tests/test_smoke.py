import base64
from datetime import date

from fastapi.testclient import TestClient
from procurement_cleaner.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_clean_thai_csv_upload():
    raw = b"\xef\xbb\xbf" + (
        "วันที่,เลขที่ PO,ผู้ขาย,โครงการ,จำนวน,ราคา,ภาษี,วิศวกร\n"
        '18/02/2026,PO-1,บริษัท เอ - โต๊ะทำงาน,Unit A - P1,2,"1,000",7%,สมชาย\n'
        "bad-date,,บริษัท บี,Unit B - P2,1,50,7%,วิชัย\n"
    ).encode("utf-8")

    files = {"file": ("purchases.csv", raw, "text/csv")}
    r = client.post("/clean", files=files)
    assert r.status_code == 200

    data = r.json()
    assert len(data["records"]) == 1
    record = data["records"][0]
    assert record == {
        "date": "2026-02-18",
        "poNumber": "PO-1",
        "supplierName": "บริษัท เอ",
        "itemDescription": "โต๊ะทำงาน",
        "quantity": 2.0,
        "unit": "Unit A",
        "projectCode": "P1",
        "unitPrice": 1000.0,
        "totalPrice": 2000.0,
        "vatRate": "7%",
        "engineerName": "สมชาย",
        "category": "Furniture",
        "sourceSheet": "Web Upload",
    }

    summary = data["report"]["summary"]
    assert summary == {"input_rows": 2, "cleaned_rows": 1, "dropped_rows": 1, "deterministic": True}
    assert data["report"]["warnings"] == [{
        "row": 2,
        "column": "PO",
        "issue": "missing_po_number",
        "value": None,
        "action": "dropped",
    }]

    assert data["cleaned_csv"]["encoding"] == "utf-8-sig"
    out_bytes = base64.b64decode(data["cleaned_csv"]["content_b64"])
    assert out_bytes.startswith(b"\xef\xbb\xbf")
    out_text = out_bytes.decode("utf-8-sig")
    assert "โต๊ะทำงาน" in out_text

def test_clean_uses_source_sheet_form_field():
    raw = b"PO,Supplier,Amount\nPO-7,Acme,10\n"
    files = {"file": ("march.csv", raw, "text/csv")}
    r = client.post("/clean", files=files, data={"source_sheet": "March 2026"})
    assert r.status_code == 200
    record = r.json()["records"][0]
    assert record["sourceSheet"] == "March 2026"
    assert record["date"] == date.today().isoformat()

def test_clean_rejects_non_csv():
    files = {"file": ("purchases.xlsx", b"PK\x03\x04", "application/octet-stream")}
    r = client.post("/clean", files=files)
    assert r.status_code == 422

def test_clean_reports_parse_failure():
    files = {"file": ("empty.csv", b"", "text/csv")}
    r = client.post("/clean", files=files)
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Failed to parse CSV file")

def test_clean_json_rows():
    payload = {
        "rows": [
            {"PO": "PO-9", "Amount": 250, "Qty": 4, "Supplier": "Dell - Laptop"},
            {"PO": None, "Amount": 1},
        ],
        "source_sheet": "API",
    }
    r = client.post("/clean/rows", json=payload)
    assert r.status_code == 200

    data = r.json()
    assert data["report"]["summary"]["cleaned_rows"] == 1
    record = data["records"][0]
    assert record["totalPrice"] == 1000
    assert record["category"] == "IT Equipment"
    assert record["sourceSheet"] == "API"
