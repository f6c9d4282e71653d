"""
Persistence seam for the import engine.

The resolver and commit executor only talk to an ImportStore. The
production implementation runs over an AsyncSession; tests can swap in
an in-memory store to inject failures.

Each write runs inside its own SAVEPOINT, so a failed row rolls back
alone and earlier rows in the same request survive. There is no
transaction spanning the whole import.
"""

import uuid
from typing import Any, Protocol

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from homevault.models.core import House, Item, Room
from homevault.schemas.imports import HouseCandidate, RoomCandidate


class ImportStore(Protocol):
    """Storage operations the import engine needs."""

    async def find_house(
        self, owner_id: uuid.UUID, address1: str, city: str, state: str
    ) -> House | None: ...

    async def create_house(self, owner_id: uuid.UUID, candidate: HouseCandidate) -> House: ...

    async def list_houses(self, owner_id: uuid.UUID) -> list[House]: ...

    async def find_room(self, house_id: uuid.UUID, name: str) -> Room | None: ...

    async def create_room(self, house_id: uuid.UUID, candidate: RoomCandidate) -> Room: ...

    async def list_rooms(self, house_ids: list[uuid.UUID]) -> list[Room]: ...

    async def find_item(
        self, room_id: uuid.UUID, name: str, brand: str | None, model: str | None
    ) -> Item | None: ...

    async def create_item(self, room_id: uuid.UUID, fields: dict[str, Any]) -> Item: ...

    async def update_item(self, item_id: uuid.UUID, fields: dict[str, Any]) -> Item: ...


def _eq_or_null(column, value: str | None):
    """Blank brand/model match NULL, the way they were stored."""
    return column.is_(None) if value is None else column == value


class SqlImportStore:
    """ImportStore over a SQLAlchemy AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Houses ───────────────────────────────────────────────

    async def find_house(
        self, owner_id: uuid.UUID, address1: str, city: str, state: str
    ) -> House | None:
        result = await self.db.execute(
            select(House)
            .where(
                and_(
                    House.user_id == owner_id,
                    House.address1 == address1,
                    House.city == city,
                    House.state == state,
                )
            )
            .order_by(House.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_house(self, owner_id: uuid.UUID, candidate: HouseCandidate) -> House:
        house = House(
            user_id=owner_id,
            name=candidate.name,
            address1=candidate.address1,
            city=candidate.city,
            state=candidate.state,
            zip_code=candidate.zip_code,
        )
        async with self.db.begin_nested():
            self.db.add(house)
        await self.db.refresh(house)
        return house

    async def list_houses(self, owner_id: uuid.UUID) -> list[House]:
        result = await self.db.execute(
            select(House).where(House.user_id == owner_id).order_by(House.created_at)
        )
        return list(result.scalars().all())

    # ─── Rooms ────────────────────────────────────────────────

    async def find_room(self, house_id: uuid.UUID, name: str) -> Room | None:
        result = await self.db.execute(
            select(Room)
            .where(and_(Room.house_id == house_id, Room.name == name))
            .order_by(Room.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_room(self, house_id: uuid.UUID, candidate: RoomCandidate) -> Room:
        room = Room(house_id=house_id, name=candidate.name, notes=candidate.notes)
        async with self.db.begin_nested():
            self.db.add(room)
        await self.db.refresh(room)
        return room

    async def list_rooms(self, house_ids: list[uuid.UUID]) -> list[Room]:
        if not house_ids:
            return []
        result = await self.db.execute(
            select(Room).where(Room.house_id.in_(house_ids)).order_by(Room.created_at)
        )
        return list(result.scalars().all())

    # ─── Items ────────────────────────────────────────────────

    async def find_item(
        self, room_id: uuid.UUID, name: str, brand: str | None, model: str | None
    ) -> Item | None:
        result = await self.db.execute(
            select(Item)
            .where(
                and_(
                    Item.room_id == room_id,
                    Item.name == name,
                    _eq_or_null(Item.brand, brand),
                    _eq_or_null(Item.model, model),
                )
            )
            .order_by(Item.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_item(self, room_id: uuid.UUID, fields: dict[str, Any]) -> Item:
        item = Item(room_id=room_id, **fields)
        async with self.db.begin_nested():
            self.db.add(item)
        await self.db.refresh(item)
        return item

    async def update_item(self, item_id: uuid.UUID, fields: dict[str, Any]) -> Item:
        async with self.db.begin_nested():
            item = await self.db.get(Item, item_id)
            if item is None:
                raise LookupError(f"Item not found: {item_id}")
            for key, value in fields.items():
                setattr(item, key, value)
        await self.db.refresh(item)
        return item
