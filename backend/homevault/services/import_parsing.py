"""
Import file parsing — the front end of the import pipeline.

Turns an uploaded CSV, JSON or Excel file into a list of raw row dicts
keyed by column header (or JSON property). No validation beyond file
shape happens here; the row normalizer and preview builder own that.

Accepted JSON shapes:
  - a flat array of row objects
  - a single row object
  - the nested inventory export: {"houses": [{"rooms": [{"items": [...]}]}]}
"""

import csv
import io
import json
from pathlib import PurePath
from typing import Any

import openpyxl


class ImportFileError(ValueError):
    """The uploaded file can't be turned into rows."""


_FORMATS_BY_EXTENSION = {
    ".csv": "csv",
    ".json": "json",
    ".xlsx": "excel",
    ".xlsm": "excel",
}

_FORMATS_BY_CONTENT_TYPE = {
    "text/csv": "csv",
    "text/plain": "csv",
    "application/json": "json",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "excel",
}


def detect_format(filename: str | None, content_type: str | None = None) -> str:
    """Pick a parser from the file extension, falling back to the content type."""
    suffix = PurePath(filename or "").suffix.lower()
    fmt = _FORMATS_BY_EXTENSION.get(suffix)
    if fmt is None and content_type:
        fmt = _FORMATS_BY_CONTENT_TYPE.get(content_type.split(";")[0].strip().lower())
    if fmt is None:
        raise ImportFileError("Please select a CSV, JSON or Excel (.xlsx) file")
    return fmt


def _decode(file_bytes: bytes) -> str:
    try:
        return file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFileError(f"File is not valid UTF-8 text: {e}") from e


# ─── CSV ──────────────────────────────────────────────────────

def parse_csv(file_bytes: bytes) -> list[dict[str, Any]]:
    """Parse a CSV file with a header row into row dicts. Blank lines are skipped."""
    reader = csv.reader(io.StringIO(_decode(file_bytes)))

    header_row_values = next(reader, None)
    if not header_row_values:
        return []
    headers = [h.strip() for h in header_row_values]

    parsed: list[dict[str, Any]] = []
    for row_values in reader:
        if not row_values or all(v.strip() == "" for v in row_values):
            continue
        record = {
            header: (row_values[idx].strip() if idx < len(row_values) else "")
            for idx, header in enumerate(headers)
            if header
        }
        parsed.append(record)
    return parsed


# ─── Excel ────────────────────────────────────────────────────

def parse_excel(file_bytes: bytes) -> list[dict[str, Any]]:
    """
    Parse the active sheet of an Excel workbook.

    Row 1 holds headers. Cell values keep their Excel types (numbers,
    datetimes) so the normalizer can read prices and dates natively.
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except Exception as e:
        raise ImportFileError(f"Could not read Excel workbook: {e}") from e

    try:
        ws = wb.active
        rows_iter = ws.iter_rows(values_only=True)
        header_row_values = next(rows_iter, None)
        if not header_row_values:
            return []

        headers = [str(h).strip() if h is not None else "" for h in header_row_values]

        parsed: list[dict[str, Any]] = []
        for row_values in rows_iter:
            if not row_values or all(v is None or str(v).strip() == "" for v in row_values):
                continue
            record = {
                header: (row_values[idx] if idx < len(row_values) else None)
                for idx, header in enumerate(headers)
                if header
            }
            parsed.append(record)
        return parsed
    finally:
        wb.close()


# ─── JSON ─────────────────────────────────────────────────────

def parse_json(file_bytes: bytes) -> list[dict[str, Any]]:
    """Parse a JSON file into row dicts (see module docstring for shapes)."""
    try:
        data = json.loads(_decode(file_bytes))
    except json.JSONDecodeError as e:
        raise ImportFileError(f"Invalid JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("houses"), list):
        return flatten_export(data)
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        rows = [row for row in data if isinstance(row, dict)]
        if len(rows) != len(data):
            raise ImportFileError("JSON array must contain only objects")
        return rows
    raise ImportFileError("JSON must be an object or an array of objects")


def flatten_export(export: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Flatten the nested inventory export into one row per item.

    House and room attributes are denormalized onto every item row, the
    same shape a spreadsheet export would have.
    """
    rows: list[dict[str, Any]] = []
    for house in export.get("houses") or []:
        house_fields = {
            "houseName": house.get("name"),
            "address1": house.get("address1"),
            "city": house.get("city"),
            "state": house.get("state"),
            "zipCode": house.get("zipCode"),
        }
        for room in house.get("rooms") or []:
            room_fields = {
                "roomName": room.get("name"),
                "roomNotes": room.get("notes"),
            }
            for item in room.get("items") or []:
                rows.append({
                    **house_fields,
                    **room_fields,
                    "name": item.get("name"),
                    "category": item.get("category"),
                    "brand": item.get("brand"),
                    "model": item.get("model"),
                    "serialNumber": item.get("serialNumber"),
                    "price": item.get("price"),
                    "purchaseDate": item.get("purchaseDate") or item.get("dateAcquired"),
                    "status": item.get("status"),
                    "condition": item.get("condition"),
                    "notes": item.get("notes"),
                })
    return rows


# ─── Entry Point ──────────────────────────────────────────────

_PARSERS = {
    "csv": parse_csv,
    "json": parse_json,
    "excel": parse_excel,
}


def parse_import_file(
    file_bytes: bytes,
    filename: str | None,
    content_type: str | None = None,
    max_bytes: int | None = None,
    max_rows: int | None = None,
) -> list[dict[str, Any]]:
    """
    Parse an uploaded import file into raw rows.

    Raises ImportFileError for empty, oversized, unsupported or
    malformed files, and for files with more rows than max_rows.
    """
    if not file_bytes:
        raise ImportFileError("Empty file uploaded")
    if max_bytes is not None and len(file_bytes) > max_bytes:
        raise ImportFileError(
            f"File size must be less than {max_bytes // (1024 * 1024)}MB"
        )

    fmt = detect_format(filename, content_type)
    rows = _PARSERS[fmt](file_bytes)

    if max_rows is not None and len(rows) > max_rows:
        raise ImportFileError(
            f"File has {len(rows)} rows; imports are limited to {max_rows} rows"
        )
    return rows
