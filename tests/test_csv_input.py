import pytest

from procurement_cleaner.csv_input import CsvParseError, read_csv_rows
from procurement_cleaner.export import CSV_COLUMNS, records_to_csv_bytes
from procurement_cleaner.cleaning import process_row


def test_read_csv_rows_basic():
    raw = b'PO,Supplier,Amount\nPO-1,Acme - Chair,"1,200.00"\n'
    assert read_csv_rows(raw) == [
        {"PO": "PO-1", "Supplier": "Acme - Chair", "Amount": "1,200.00"},
    ]


def test_read_csv_rows_utf8_bom_thai_headers():
    raw = b"\xef\xbb\xbf" + "วันที่,เลขที่ PO,ผู้ขาย\n18/02/2026,PO-1,บริษัท เอ - โต๊ะทำงาน\n".encode("utf-8")
    rows = read_csv_rows(raw)
    assert list(rows[0].keys()) == ["วันที่", "เลขที่ PO", "ผู้ขาย"]
    assert rows[0]["ผู้ขาย"] == "บริษัท เอ - โต๊ะทำงาน"


def test_read_csv_rows_semicolon_and_crlf():
    raw = b"PO;Supplier;Amount\r\nPO-1;Acme;100\r\nPO-2;Beta;200\r\n"
    rows = read_csv_rows(raw)
    assert [r["Amount"] for r in rows] == ["100", "200"]


def test_read_csv_rows_skips_blank_lines_and_pads_short_rows():
    raw = b"PO,Supplier,Amount\n\nPO-1,Acme\n\n,,\nPO-2,Beta,5,extra\n"
    rows = read_csv_rows(raw)
    assert rows == [
        {"PO": "PO-1", "Supplier": "Acme", "Amount": None},
        {"PO": "PO-2", "Supplier": "Beta", "Amount": "5"},
    ]


def test_read_csv_rows_header_only():
    assert read_csv_rows(b"PO,Supplier\n") == []


@pytest.mark.parametrize("raw", [b"", b"\n\n", b"   \r\n"])
def test_read_csv_rows_rejects_empty_file(raw):
    with pytest.raises(CsvParseError):
        read_csv_rows(raw)


def test_records_to_csv_bytes():
    record = process_row({"PO": "PO-1", "Supplier": "Acme - Laptop", "Price": "100", "Qty": "2"})
    out = records_to_csv_bytes([record])

    assert out.startswith(b"\xef\xbb\xbf")
    lines = out.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert lines[0].startswith("date,poNumber,supplierName,itemDescription")
    assert "PO-1,Acme,Laptop,2.0,Unit,N/A,100.0,200.0,7%,Unassigned,IT Equipment,Web Upload" in lines[1]


def test_records_to_csv_bytes_empty():
    out = records_to_csv_bytes([])
    assert out.decode("utf-8-sig") == ",".join(CSV_COLUMNS) + "\n"
