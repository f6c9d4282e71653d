"""
Import preview — row normalization, deduplication and validation.

Pure and side-effect free: nothing here touches storage. The preview is
handed back to the user for review, then passed unchanged to the commit
executor once approved.

Key flow:
  1. Normalize each raw row: alias lookup → canonical fields + natural keys
  2. Reject rows missing a required field (error, row excluded entirely)
  3. Deduplicate houses and rooms by natural key (first occurrence wins)
  4. Emit one item candidate per valid row, correcting out-of-range
     values with a warning
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from homevault.core.import_fields import ImportField, get_import_field, get_required_fields
from homevault.schemas.imports import (
    HouseCandidate,
    HouseKey,
    ImportPreview,
    ItemCandidate,
    RoomCandidate,
    RoomKey,
)
from homevault.services.normalization import (
    blank_to_none,
    index_row,
    lookup_field,
    parse_date,
    parse_decimal,
)

logger = logging.getLogger(__name__)


# ─── Row Normalizer ───────────────────────────────────────────

@dataclass(frozen=True)
class NormalizedRow:
    """A raw row read through the field aliases. All values are clean text."""
    row_number: int
    house_name: str
    house_address1: str
    house_city: str
    house_state: str
    house_zip_code: str
    room_name: str
    room_notes: str
    name: str
    category: str
    brand: str
    model: str
    serial_number: str
    price: str
    purchase_date: str
    status: str
    condition: str
    notes: str

    @property
    def house_key(self) -> HouseKey:
        return HouseKey(name=self.house_name, address1=self.house_address1)

    @property
    def room_key(self) -> RoomKey:
        return RoomKey(house=self.house_key, name=self.room_name)

    def missing_required(self) -> list[ImportField]:
        return [f for f in get_required_fields() if not getattr(self, f.name)]


def _read(indexed: Mapping[str, Any], field_name: str) -> str:
    config = get_import_field(field_name)
    return lookup_field(indexed, config.aliases)


def normalize_row(raw: Mapping[str, Any], row_number: int) -> NormalizedRow:
    """Read one raw row (spreadsheet headers or camelCase properties)."""
    indexed = index_row(raw)
    return NormalizedRow(
        row_number=row_number,
        house_name=_read(indexed, "house_name"),
        house_address1=_read(indexed, "house_address1"),
        house_city=_read(indexed, "house_city"),
        house_state=_read(indexed, "house_state"),
        house_zip_code=_read(indexed, "house_zip_code"),
        room_name=_read(indexed, "room_name"),
        room_notes=_read(indexed, "room_notes"),
        name=_read(indexed, "name"),
        category=_read(indexed, "category"),
        brand=_read(indexed, "brand"),
        model=_read(indexed, "model"),
        serial_number=_read(indexed, "serial_number"),
        price=_read(indexed, "price"),
        purchase_date=_read(indexed, "purchase_date"),
        status=_read(indexed, "status"),
        condition=_read(indexed, "condition"),
        notes=_read(indexed, "notes"),
    )


# ─── Value Validation ─────────────────────────────────────────

def _coerce_price(row: NormalizedRow, warnings: list[str]) -> Decimal:
    """Prices are never negative; bad values become 0 with a warning."""
    if not row.price:
        return Decimal(get_import_field("price").default)

    price = parse_decimal(row.price)
    if price is None:
        warnings.append(f"Row {row.row_number}: Invalid price '{row.price}' converted to 0")
        return Decimal("0")
    if price < 0:
        warnings.append(f"Row {row.row_number}: Negative price converted to 0")
        return Decimal("0")
    return price


def _build_item(row: NormalizedRow, warnings: list[str]) -> ItemCandidate:
    price = _coerce_price(row, warnings)

    purchase_date = parse_date(row.purchase_date)
    if row.purchase_date and purchase_date is None:
        warnings.append(
            f"Row {row.row_number}: Unrecognized purchase date '{row.purchase_date}' ignored"
        )

    return ItemCandidate(
        name=row.name,
        category=blank_to_none(row.category),
        brand=blank_to_none(row.brand),
        model=blank_to_none(row.model),
        serial_number=blank_to_none(row.serial_number),
        price=price,
        purchase_date=purchase_date,
        status=row.status or get_import_field("status").default,
        condition=row.condition or get_import_field("condition").default,
        notes=blank_to_none(row.notes),
        house_key=row.house_key,
        room_key=row.room_key,
        row_number=row.row_number,
    )


# ─── Preview Builder ──────────────────────────────────────────

def build_preview(raw_rows: Iterable[Mapping[str, Any]]) -> ImportPreview:
    """
    Deduplicate and validate raw rows into an import preview.

    Row numbers in errors and warnings are 1-based positions in raw_rows.
    """
    preview = ImportPreview()
    seen_houses: set[HouseKey] = set()
    seen_rooms: set[RoomKey] = set()

    for index, raw in enumerate(raw_rows):
        row = normalize_row(raw, index + 1)

        missing = row.missing_required()
        if missing:
            for f in missing:
                preview.errors.append(
                    f"Row {row.row_number}: {f.label.capitalize()} is required"
                )
            continue

        house_key = row.house_key
        if not house_key.is_blank and house_key not in seen_houses:
            preview.houses.append(HouseCandidate(
                key=house_key,
                name=blank_to_none(row.house_name),
                address1=row.house_address1,
                city=row.house_city,
                state=row.house_state,
                zip_code=blank_to_none(row.house_zip_code),
                row_number=row.row_number,
            ))
            seen_houses.add(house_key)

        room_key = row.room_key
        if not room_key.is_blank and room_key not in seen_rooms:
            preview.rooms.append(RoomCandidate(
                key=room_key,
                name=row.room_name,
                notes=blank_to_none(row.room_notes),
                row_number=row.row_number,
            ))
            seen_rooms.add(room_key)

        preview.items.append(_build_item(row, preview.warnings))

    logger.info(
        "Built import preview: %d houses, %d rooms, %d items, %d errors, %d warnings",
        len(preview.houses),
        len(preview.rooms),
        len(preview.items),
        len(preview.errors),
        len(preview.warnings),
    )
    return preview
