"""
Factory for generating test import rows and files.

Creates realistic household inventory data in the same column layout
the inventory CSV export produces.
"""

import csv
import io
import json
from typing import Any

import openpyxl


EXPORT_HEADERS = [
    "House Name",
    "House Address",
    "House City",
    "House State",
    "Room Name",
    "Room Notes",
    "Item Name",
    "Item Category",
    "Item Brand",
    "Item Model",
    "Item Serial Number",
    "Item Price",
    "Item Date Acquired",
    "Item Status",
    "Item Condition",
    "Item Notes",
]

ROOMS = ["Living Room", "Kitchen", "Primary Bedroom", "Garage"]
CATEGORIES = ["Furniture", "Electronics", "Appliances", "Tools"]
BRANDS = ["IKEA", "Samsung", "LG", "DeWalt"]


def make_row(
    item_name: str = "Lamp",
    house_name: str = "Main Residence",
    house_address: str = "12 Elm Street",
    room_name: str = "Living Room",
    **overrides: Any,
) -> dict[str, Any]:
    """One spreadsheet-style row. Keyword overrides use export header names with
    spaces replaced by underscores (Item_Brand="IKEA")."""
    row: dict[str, Any] = {
        "House Name": house_name,
        "House Address": house_address,
        "House City": "Springfield",
        "House State": "IL",
        "Room Name": room_name,
        "Room Notes": "",
        "Item Name": item_name,
        "Item Category": "",
        "Item Brand": "",
        "Item Model": "",
        "Item Serial Number": "",
        "Item Price": "",
        "Item Date Acquired": "",
        "Item Status": "",
        "Item Condition": "",
        "Item Notes": "",
    }
    for key, value in overrides.items():
        row[key.replace("_", " ")] = value
    return row


def make_household_rows(
    num_items: int = 20,
    house_name: str = "Main Residence",
    house_address: str = "12 Elm Street",
) -> list[dict[str, Any]]:
    """Rows for one house, items spread across ROOMS round-robin."""
    rows = []
    for i in range(1, num_items + 1):
        rows.append(make_row(
            item_name=f"Item {i:03d}",
            house_name=house_name,
            house_address=house_address,
            room_name=ROOMS[i % len(ROOMS)],
            Item_Category=CATEGORIES[i % len(CATEGORIES)],
            Item_Brand=BRANDS[i % len(BRANDS)],
            Item_Price=f"{i * 10}.00",
        ))
    return rows


def make_import_csv(rows: list[dict[str, Any]]) -> bytes:
    """Write rows as an export-style CSV."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_HEADERS)
    writer.writeheader()
    for row in rows:
        writer.writerow({h: row.get(h, "") for h in EXPORT_HEADERS})
    return buf.getvalue().encode("utf-8")


def make_import_excel(rows: list[dict[str, Any]]) -> bytes:
    """Write rows as an Excel workbook with the export headers in row 1."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Inventory"
    ws.append(EXPORT_HEADERS)
    for row in rows:
        ws.append([row.get(h) or None for h in EXPORT_HEADERS])

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()


def make_nested_export_json(
    houses: list[dict[str, Any]] | None = None,
) -> bytes:
    """The JSON inventory export: houses → rooms → items."""
    if houses is None:
        houses = [{
            "name": "Lake House",
            "address1": "4 Shore Road",
            "city": "Tahoe City",
            "state": "CA",
            "zipCode": "96145",
            "rooms": [
                {
                    "name": "Den",
                    "notes": "Downstairs",
                    "items": [
                        {"name": "Record Player", "brand": "Technics", "model": "SL-1200", "price": 899},
                        {"name": "Armchair", "category": "Furniture", "price": 350},
                    ],
                },
                {"name": "Attic", "items": []},
            ],
        }]
    export = {
        "exportInfo": {"scope": "all", "format": "json", "totalHouses": len(houses)},
        "houses": houses,
    }
    return json.dumps(export).encode("utf-8")
