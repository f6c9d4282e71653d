"""Pydantic schemas for the bulk import pipeline."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ─── Natural Keys ──────────────────────────────────────────────

class HouseKey(BaseModel):
    """
    In-memory join key for a house within one import run.

    Compared structurally, never by string concatenation, so a house
    named "A-B" at "C" cannot collide with one named "A" at "B-C".
    """
    name: str = ""
    address1: str = ""

    model_config = {"frozen": True}

    @property
    def is_blank(self) -> bool:
        return not self.name and not self.address1

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} ({self.address1})" if self.address1 else self.name
        return self.address1


class RoomKey(BaseModel):
    """In-memory join key for a room: its house key plus the room name."""
    house: HouseKey
    name: str = ""

    model_config = {"frozen": True}

    @property
    def is_blank(self) -> bool:
        return self.house.is_blank and not self.name

    def __str__(self) -> str:
        return f"{self.house} / {self.name}"


# ─── Preview Candidates ────────────────────────────────────────

class HouseCandidate(BaseModel):
    """A deduplicated house extracted from the import rows."""
    key: HouseKey
    name: str | None = None
    address1: str = ""
    city: str = ""
    state: str = ""
    zip_code: str | None = None
    row_number: int = Field(..., ge=1, description="First row that introduced this house")


class RoomCandidate(BaseModel):
    """A deduplicated room extracted from the import rows."""
    key: RoomKey
    name: str = ""
    notes: str | None = None
    row_number: int = Field(..., ge=1, description="First row that introduced this room")

    @property
    def house_key(self) -> HouseKey:
        return self.key.house


class ItemCandidate(BaseModel):
    """One item per valid import row, joined to its room by key."""
    name: str
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    serial_number: str | None = None
    price: Decimal = Decimal("0")
    purchase_date: date | None = None
    status: str = "ACTIVE"
    condition: str = "GOOD"
    notes: str | None = None
    house_key: HouseKey
    room_key: RoomKey
    row_number: int = Field(..., ge=1)

    def persisted_fields(self) -> dict[str, Any]:
        """Attribute values written on create or update (everything but name)."""
        return {
            "category": self.category,
            "brand": self.brand,
            "model": self.model,
            "serial_number": self.serial_number,
            # A zero price is stored as "no recorded value"
            "price": self.price or None,
            "purchase_date": self.purchase_date,
            "status": self.status,
            "condition": self.condition,
            "notes": self.notes,
        }


class ImportPreview(BaseModel):
    """
    Dry-run result of an import: what would be created, plus validation.

    Built without touching storage. Callers must not commit a preview
    whose errors list is non-empty.
    """
    houses: list[HouseCandidate] = Field(default_factory=list)
    rooms: list[RoomCandidate] = Field(default_factory=list)
    items: list[ItemCandidate] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


# ─── Options ───────────────────────────────────────────────────

class ImportOptions(BaseModel):
    """User-chosen reconciliation policy for one commit."""
    create_missing_houses: bool = Field(
        True,
        description="Create houses that don't match an existing address. "
                    "When false, rows map only onto the user's existing houses.",
    )
    create_missing_rooms: bool = Field(
        True,
        description="Create rooms that don't exist in their house. "
                    "When false, rows map only onto existing rooms.",
    )
    update_existing: bool = Field(
        False,
        description="Overwrite a matching item in place. Takes precedence over skip_duplicates.",
    )
    skip_duplicates: bool = Field(
        True,
        description="Leave a matching item alone and count the row as skipped.",
    )


# ─── Requests ──────────────────────────────────────────────────

class ImportRowsRequest(BaseModel):
    """Already-parsed rows to build a preview from."""
    rows: list[dict[str, Any]]


class ImportCommitRequest(BaseModel):
    """Commit a previously reviewed preview for a user."""
    user_email: str = Field(..., min_length=1)
    preview: ImportPreview
    options: ImportOptions = Field(default_factory=ImportOptions)


# ─── Commit Result ─────────────────────────────────────────────

class CreatedCounts(BaseModel):
    houses: int = 0
    rooms: int = 0
    items: int = 0


class UpdatedCounts(BaseModel):
    items: int = 0


class SkippedCounts(BaseModel):
    items: int = 0


class DiagnosticKind(str, Enum):
    UNRESOLVED_HOUSE = "unresolved_house"
    UNRESOLVED_ROOM = "unresolved_room"
    STORAGE_ERROR = "storage_error"


class CommitDiagnostic(BaseModel):
    """A row dropped at commit time. Informational; counts are authoritative."""
    row_number: int
    kind: DiagnosticKind
    message: str


class CommitResult(BaseModel):
    """Authoritative report of what a commit actually did."""
    created: CreatedCounts = Field(default_factory=CreatedCounts)
    updated: UpdatedCounts = Field(default_factory=UpdatedCounts)
    skipped: SkippedCounts = Field(default_factory=SkippedCounts)
    summary: str = ""
    diagnostics: list[CommitDiagnostic] = Field(default_factory=list)
