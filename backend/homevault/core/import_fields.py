"""
Import field configuration.

Column names are application configuration, not code. Supporting a new
spreadsheet header needs only a new alias here.

Each field defines:
  - which entity it belongs to (house, room, item)
  - the ordered aliases accepted in raw rows; spreadsheet headers
    ("Item Name") come first, camelCase properties ("name") after
  - a default used when every alias is blank

Header matching is insensitive to case, spaces, hyphens and underscores,
so "Item Name", "item_name" and "itemName" all hit the same alias.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ImportField:
    """Definition of a canonical field extracted from a raw import row."""
    name: str
    label: str
    entity: str  # house, room, item
    aliases: list[str] = field(default_factory=list)
    data_type: str = "string"  # string, decimal, date
    required: bool = False
    default: str | None = None


# ─── Field Registry ────────────────────────────────────────────

IMPORT_FIELDS: dict[str, ImportField] = {}


def register_field(config: ImportField) -> ImportField:
    """Register an import field."""
    IMPORT_FIELDS[config.name] = config
    return config


def get_import_field(name: str) -> ImportField:
    """Look up a registered field. Unknown names are a programming error."""
    return IMPORT_FIELDS[name]


def get_required_fields() -> list[ImportField]:
    return [f for f in IMPORT_FIELDS.values() if f.required]


# ─── House Fields ──────────────────────────────────────────────

register_field(ImportField(
    name="house_name",
    label="House Name",
    entity="house",
    aliases=["House Name", "houseName"],
))

register_field(ImportField(
    name="house_address1",
    label="House Address",
    entity="house",
    aliases=["House Address", "House Address 1", "address1"],
))

register_field(ImportField(
    name="house_city",
    label="House City",
    entity="house",
    aliases=["House City", "city"],
))

register_field(ImportField(
    name="house_state",
    label="House State",
    entity="house",
    aliases=["House State", "state"],
))

register_field(ImportField(
    name="house_zip_code",
    label="House Zip Code",
    entity="house",
    aliases=["House Zip Code", "House Zip", "zipCode"],
))


# ─── Room Fields ───────────────────────────────────────────────

register_field(ImportField(
    name="room_name",
    label="Room Name",
    entity="room",
    aliases=["Room Name", "roomName"],
))

register_field(ImportField(
    name="room_notes",
    label="Room Notes",
    entity="room",
    aliases=["Room Notes", "roomNotes"],
))


# ─── Item Fields ───────────────────────────────────────────────

register_field(ImportField(
    name="name",
    label="Item Name",
    entity="item",
    aliases=["Item Name", "name"],
    required=True,
))

register_field(ImportField(
    name="category",
    label="Item Category",
    entity="item",
    aliases=["Item Category", "category"],
))

register_field(ImportField(
    name="brand",
    label="Item Brand",
    entity="item",
    aliases=["Item Brand", "brand"],
))

register_field(ImportField(
    name="model",
    label="Item Model",
    entity="item",
    aliases=["Item Model", "model"],
))

register_field(ImportField(
    name="serial_number",
    label="Item Serial Number",
    entity="item",
    aliases=["Item Serial Number", "serialNumber"],
))

register_field(ImportField(
    name="price",
    label="Item Price",
    entity="item",
    aliases=["Item Price", "price"],
    data_type="decimal",
    default="0",
))

register_field(ImportField(
    name="purchase_date",
    label="Item Date Acquired",
    entity="item",
    aliases=["Item Date Acquired", "Item Purchase Date", "purchaseDate", "dateAcquired"],
    data_type="date",
))

register_field(ImportField(
    name="status",
    label="Item Status",
    entity="item",
    aliases=["Item Status", "status"],
    default="ACTIVE",
))

register_field(ImportField(
    name="condition",
    label="Item Condition",
    entity="item",
    aliases=["Item Condition", "condition"],
    default="GOOD",
))

register_field(ImportField(
    name="notes",
    label="Item Notes",
    entity="item",
    aliases=["Item Notes", "notes"],
))
