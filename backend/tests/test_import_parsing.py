"""
Tests for import file parsing.

Covers:
  - CSV with export headers, blank lines
  - JSON: flat array, single object, nested inventory export
  - Excel via openpyxl, typed cells preserved
  - Format detection, size and row limits, malformed files
"""

import io
import json
from datetime import datetime

import openpyxl
import pytest

from homevault.services.import_parsing import (
    ImportFileError,
    detect_format,
    flatten_export,
    parse_csv,
    parse_excel,
    parse_import_file,
    parse_json,
)
from tests.fixtures.import_factory import (
    make_household_rows,
    make_import_csv,
    make_import_excel,
    make_nested_export_json,
)


# ─── CSV ──────────────────────────────────────────────────────


def test_parse_csv_export_layout():
    rows = parse_csv(make_import_csv(make_household_rows(20)))

    assert len(rows) == 20
    assert rows[0]["Item Name"] == "Item 001"
    assert rows[0]["House Address"] == "12 Elm Street"
    assert rows[0]["Item Price"] == "10.00"


def test_parse_csv_skips_blank_lines_and_short_rows():
    content = b"Item Name,Room Name,Item Brand\nLamp,Den\n\n , , \nSofa,Den,IKEA\n"
    rows = parse_csv(content)

    assert len(rows) == 2
    assert rows[0] == {"Item Name": "Lamp", "Room Name": "Den", "Item Brand": ""}
    assert rows[1]["Item Brand"] == "IKEA"


def test_parse_csv_quoted_commas():
    content = b'Item Name,Item Notes\n"Table, oak","Seats 6, extends to 8"\n'
    rows = parse_csv(content)
    assert rows[0]["Item Name"] == "Table, oak"
    assert rows[0]["Item Notes"] == "Seats 6, extends to 8"


def test_parse_csv_utf8_bom():
    rows = parse_csv("\ufeffItem Name\nLamp\n".encode("utf-8"))
    assert rows == [{"Item Name": "Lamp"}]


def test_parse_csv_header_only():
    assert parse_csv(b"Item Name,Room Name\n") == []


# ─── JSON ─────────────────────────────────────────────────────


def test_parse_json_array():
    rows = parse_json(json.dumps([{"name": "Lamp"}, {"name": "Sofa"}]).encode())
    assert [r["name"] for r in rows] == ["Lamp", "Sofa"]


def test_parse_json_single_object():
    assert parse_json(b'{"name": "Lamp"}') == [{"name": "Lamp"}]


def test_parse_json_rejects_scalars_in_array():
    with pytest.raises(ImportFileError):
        parse_json(b'[{"name": "Lamp"}, 3]')


def test_parse_json_invalid():
    with pytest.raises(ImportFileError, match="Invalid JSON"):
        parse_json(b"{not json")


def test_parse_json_nested_export_flattens_per_item():
    rows = parse_json(make_nested_export_json())

    # Two items in the Den, none in the Attic
    assert len(rows) == 2
    first = rows[0]
    assert first["houseName"] == "Lake House"
    assert first["address1"] == "4 Shore Road"
    assert first["zipCode"] == "96145"
    assert first["roomName"] == "Den"
    assert first["roomNotes"] == "Downstairs"
    assert first["name"] == "Record Player"
    assert first["model"] == "SL-1200"
    assert rows[1]["name"] == "Armchair"


def test_flatten_export_without_houses():
    assert flatten_export({"houses": []}) == []


# ─── Excel ────────────────────────────────────────────────────


def test_parse_excel_export_layout():
    rows = parse_excel(make_import_excel(make_household_rows(12)))

    assert len(rows) == 12
    assert rows[0]["Item Name"] == "Item 001"
    assert rows[11]["Item Name"] == "Item 012"


def test_parse_excel_keeps_typed_cells_and_skips_empty_rows():
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Item Name", "Item Price", "Item Date Acquired"])
    ws.append(["Lamp", 45.5, datetime(2020, 5, 1)])
    ws.append([None, None, None])
    ws.append(["Sofa", 1200, None])
    buf = io.BytesIO()
    wb.save(buf)

    rows = parse_excel(buf.getvalue())

    assert len(rows) == 2
    assert rows[0]["Item Price"] == 45.5
    assert rows[0]["Item Date Acquired"] == datetime(2020, 5, 1)
    assert rows[1]["Item Name"] == "Sofa"


def test_parse_excel_garbage():
    with pytest.raises(ImportFileError, match="Excel"):
        parse_excel(b"definitely not a zip file")


# ─── Detection & limits ───────────────────────────────────────


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("inventory.csv", None, "csv"),
        ("INVENTORY.JSON", None, "json"),
        ("inventory.xlsx", None, "excel"),
        ("upload", "text/csv; charset=utf-8", "csv"),
        ("upload", "application/json", "json"),
    ],
)
def test_detect_format(filename, content_type, expected):
    assert detect_format(filename, content_type) == expected


def test_detect_format_unsupported():
    with pytest.raises(ImportFileError, match="CSV, JSON or Excel"):
        detect_format("inventory.pdf", "application/pdf")


def test_parse_import_file_empty():
    with pytest.raises(ImportFileError, match="Empty file"):
        parse_import_file(b"", "inventory.csv")


def test_parse_import_file_too_large():
    content = make_import_csv(make_household_rows(5))
    with pytest.raises(ImportFileError, match="File size"):
        parse_import_file(content, "inventory.csv", max_bytes=10)


def test_parse_import_file_too_many_rows():
    content = make_import_csv(make_household_rows(5))
    with pytest.raises(ImportFileError, match="limited to 3 rows"):
        parse_import_file(content, "inventory.csv", max_rows=3)


def test_parse_import_file_dispatches_json():
    rows = parse_import_file(make_nested_export_json(), "export.json")
    assert len(rows) == 2
