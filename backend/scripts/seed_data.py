"""
Seed data script — creates a demo household.

  - 1 User ("demo@homevault.dev")
  - 1 House ("Main Residence", 12 Elm Street, Springfield, IL)
  - 4 Rooms (Living Room, Kitchen, Primary Bedroom, Garage)
  - 12 Items (3 per room), entered manually (is_imported=False)

Useful for trying imports against a household that already has data:
re-importing rows for "Main Residence" exercises duplicate handling.

Usage:
  python -m scripts.seed_data

  Alternatively, import and call seed_household() with a database session.
"""

import asyncio
import random
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

# Ensure models are imported so Base.metadata is populated
from homevault.models.core import House, Item, Room
from homevault.models.infrastructure import User
from homevault.core.config import settings


# ─── Item generators ───────────────────────────────────────────

ROOM_ITEMS: dict[str, list[tuple[str, str, str | None, str | None]]] = {
    "Living Room": [
        ("Sofa", "Furniture", "West Elm", "Harmony"),
        ("Television", "Electronics", "Samsung", "QN65Q80C"),
        ("Lamp", "Lighting", "IKEA", None),
    ],
    "Kitchen": [
        ("Refrigerator", "Appliances", "LG", "LRMVS3006S"),
        ("Stand Mixer", "Appliances", "KitchenAid", "KSM150PS"),
        ("Dining Table", "Furniture", None, None),
    ],
    "Primary Bedroom": [
        ("Bed Frame", "Furniture", "Article", "Timber"),
        ("Dresser", "Furniture", "IKEA", "MALM"),
        ("Jewelry Box", "Valuables", None, None),
    ],
    "Garage": [
        ("Lawn Mower", "Tools", "Honda", "HRN216"),
        ("Cordless Drill", "Tools", "DeWalt", "DCD771C2"),
        ("Bicycle", "Sporting Goods", "Trek", "FX 2"),
    ],
}

CONDITIONS = ["NEW", "GOOD", "AVERAGE"]


def make_price(idx: int) -> Decimal:
    """Generate a reproducible price."""
    random.seed(idx)
    return Decimal(random.randint(40, 2500)).quantize(Decimal("0.01"))


# ─── Seed function ─────────────────────────────────────────────

async def seed_household(db: AsyncSession) -> dict[str, uuid.UUID]:
    """
    Create the demo household.
    Returns a dict of key names → UUIDs for reference.
    """
    ids: dict[str, uuid.UUID] = {}

    # ── User ───────────────────────────────────────────────
    user = User(email="demo@homevault.dev", name="Demo")
    db.add(user)
    await db.flush()
    ids["user"] = user.id

    # ── House ──────────────────────────────────────────────
    house = House(
        user_id=user.id,
        name="Main Residence",
        address1="12 Elm Street",
        city="Springfield",
        state="IL",
        zip_code="62701",
    )
    db.add(house)
    await db.flush()
    ids["house"] = house.id

    # ── Rooms & Items ──────────────────────────────────────
    idx = 0
    for room_name, items in ROOM_ITEMS.items():
        room = Room(house_id=house.id, name=room_name)
        db.add(room)
        await db.flush()
        ids[f"room_{room_name}"] = room.id

        for name, category, brand, model in items:
            item = Item(
                room_id=room.id,
                name=name,
                category=category,
                brand=brand,
                model=model,
                price=make_price(idx),
                status="ACTIVE",
                condition=CONDITIONS[idx % len(CONDITIONS)],
                is_imported=False,
            )
            db.add(item)
            idx += 1

    await db.flush()

    print("Seeded demo household:")
    print(f"  User:   {user.email} ({ids['user']})")
    print(f"  House:  {house.name} ({ids['house']})")
    print(f"  Rooms:  {len(ROOM_ITEMS)}")
    print(f"  Items:  {idx}")

    return ids


# ─── CLI entry point ───────────────────────────────────────────

async def main():
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        async with session.begin():
            await seed_household(session)

    await engine.dispose()
    print("\nSeed complete.")


if __name__ == "__main__":
    asyncio.run(main())
