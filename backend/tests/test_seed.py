"""Tests for Seed Data — verifies seed_household() creates the demo household."""

import pytest
from sqlalchemy import func, select

from homevault.models.core import House, Item, Room
from homevault.models.infrastructure import User
from homevault.schemas.imports import ImportOptions
from homevault.services.import_commit import commit_import
from homevault.services.import_preview import build_preview
from homevault.services.import_store import SqlImportStore
from scripts.seed_data import ROOM_ITEMS, seed_household
from tests.fixtures.import_factory import make_row


# ─── Seed Execution ────────────────────────────────────────────

@pytest.mark.asyncio
async def test_seed_returns_ids(db_session):
    ids = await seed_household(db_session)

    assert "user" in ids
    assert "house" in ids
    for room_name in ROOM_ITEMS:
        assert f"room_{room_name}" in ids


@pytest.mark.asyncio
async def test_seed_creates_hierarchy(db_session):
    ids = await seed_household(db_session)

    user = (await db_session.execute(select(User))).scalar_one()
    assert user.email == "demo@homevault.dev"

    house = (await db_session.execute(select(House))).scalar_one()
    assert house.user_id == ids["user"]
    assert house.address1 == "12 Elm Street"

    rooms = (await db_session.execute(select(Room))).scalars().all()
    assert sorted(r.name for r in rooms) == sorted(ROOM_ITEMS)

    count = (await db_session.execute(select(func.count()).select_from(Item))).scalar()
    assert count == 12


@pytest.mark.asyncio
async def test_seed_items_are_manual(db_session):
    await seed_household(db_session)

    imported = (await db_session.execute(
        select(func.count()).select_from(Item).where(Item.is_imported.is_(True))
    )).scalar()
    assert imported == 0


# ─── Re-import Against Seed ────────────────────────────────────

@pytest.mark.asyncio
async def test_import_onto_seed_reuses_house_and_room(db_session):
    ids = await seed_household(db_session)

    preview = build_preview([
        make_row("Lamp", Item_Brand="IKEA"),
        make_row("Floor Rug"),
    ])
    result = await commit_import(
        SqlImportStore(db_session), ids["user"], preview, ImportOptions(),
    )

    assert result.created.houses == 0
    assert result.created.rooms == 0
    assert result.created.items == 1
    assert result.skipped.items == 1

    rug = (await db_session.execute(select(Item).where(Item.name == "Floor Rug"))).scalar_one()
    assert rug.room_id == ids["room_Living Room"]
