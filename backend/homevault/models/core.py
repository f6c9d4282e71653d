"""
Core data models: Houses, Rooms, Items.

The inventory is a strict three-level hierarchy:

  House → Room → Item

A house belongs to one user, a room to one house, an item to one room.
Imports reconcile flat rows into this hierarchy by natural key:
  - House: (user_id, address1, city, state)
  - Room:  (house_id, name)
  - Item:  (room_id, name, brand, model) — duplicate detection only
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homevault.core.database import Base


class House(Base):
    """
    A property owned by a user.

    The display name is optional; the address is what identifies a house
    when an import is matched against existing records.
    """

    __tablename__ = "houses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional display name: 'Lake House', 'Main Residence'.",
    )
    address1: Mapped[str] = mapped_column(String(255), nullable=False)
    address2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    rooms: Mapped[list["Room"]] = relationship(
        "Room",
        back_populates="house",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # Natural key used by import matching
        Index("idx_houses_natural_key", "user_id", "address1", "city", "state"),
    )

    def __repr__(self) -> str:
        return f"<House {self.name or self.address1}>"


class Room(Base):
    """A room inside exactly one house."""

    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    house_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("houses.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Relationships
    house: Mapped["House"] = relationship("House", back_populates="rooms")
    items: Mapped[list["Item"]] = relationship(
        "Item",
        back_populates="room",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_rooms_house_name", "house_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Room {self.name}>"


class Item(Base):
    """
    A single belonging documented for insurance purposes.

    (room_id, name, brand, model) is not unique: it only flags likely
    duplicates when rows are imported into a room that already has data.
    is_imported distinguishes import-created rows from manual entries.
    """

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(255), nullable=True)
    model: Mapped[str | None] = mapped_column(String(255), nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Free-text lifecycle status, ACTIVE by default on import.",
    )
    condition: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_imported: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="True when the row was created by a bulk import.",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="items")

    __table_args__ = (
        # Duplicate detection lookup
        Index("idx_items_duplicate_probe", "room_id", "name", "brand", "model"),
    )

    def __repr__(self) -> str:
        return f"<Item {self.name}>"
