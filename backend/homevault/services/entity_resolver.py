"""
Entity resolution — natural key → persisted identifier, per import run.

Resolution is strictly ordered: every house is resolved before any room,
because a room can only be matched or created once its house id is final.
The maps built here are the single source of truth for one commit run;
a key that is already mapped is never looked up or created again.

Two modes per level:
  - create_missing_*=True:  match each preview candidate against storage,
    creating it when nothing matches
  - create_missing_*=False: ignore preview candidates and map the user's
    existing records by the same key shape the preview uses
"""

import logging
import uuid
from dataclasses import dataclass, field

from homevault.schemas.imports import (
    CommitDiagnostic,
    DiagnosticKind,
    HouseCandidate,
    HouseKey,
    ImportOptions,
    ImportPreview,
    RoomCandidate,
    RoomKey,
)
from homevault.services.import_store import ImportStore
from homevault.services.storage_guard import guarded

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Key maps plus creation counts for one resolution pass."""
    house_ids: dict[HouseKey, uuid.UUID] = field(default_factory=dict)
    room_ids: dict[RoomKey, uuid.UUID] = field(default_factory=dict)
    houses_created: int = 0
    rooms_created: int = 0
    diagnostics: list[CommitDiagnostic] = field(default_factory=list)


# ─── Houses ───────────────────────────────────────────────────

async def _resolve_house(
    store: ImportStore,
    owner_id: uuid.UUID,
    candidate: HouseCandidate,
) -> tuple[uuid.UUID, bool]:
    """Return (house_id, created) for one candidate."""
    existing = await store.find_house(
        owner_id, candidate.address1, candidate.city, candidate.state
    )
    if existing:
        return existing.id, False
    house = await store.create_house(owner_id, candidate)
    return house.id, True


async def resolve_houses(
    store: ImportStore,
    owner_id: uuid.UUID,
    preview: ImportPreview,
    options: ImportOptions,
    result: ResolutionResult,
) -> None:
    if not options.create_missing_houses:
        outcome = await guarded(lambda: store.list_houses(owner_id), "existing houses")
        for house in outcome.value or []:
            key = HouseKey(name=house.name or "", address1=house.address1)
            result.house_ids.setdefault(key, house.id)
        return

    for candidate in preview.houses:
        if candidate.key in result.house_ids:
            continue

        outcome = await guarded(
            lambda: _resolve_house(store, owner_id, candidate),
            f"house {candidate.key}",
        )
        if not outcome.ok:
            result.diagnostics.append(CommitDiagnostic(
                row_number=candidate.row_number,
                kind=DiagnosticKind.STORAGE_ERROR,
                message=f"House '{candidate.key}' could not be saved ({type(outcome.error).__name__})",
            ))
            continue

        house_id, created = outcome.value
        result.house_ids[candidate.key] = house_id
        if created:
            result.houses_created += 1


# ─── Rooms ────────────────────────────────────────────────────

async def _resolve_room(
    store: ImportStore,
    house_id: uuid.UUID,
    candidate: RoomCandidate,
) -> tuple[uuid.UUID, bool]:
    """Return (room_id, created) for one candidate."""
    existing = await store.find_room(house_id, candidate.name)
    if existing:
        return existing.id, False
    room = await store.create_room(house_id, candidate)
    return room.id, True


async def resolve_rooms(
    store: ImportStore,
    preview: ImportPreview,
    options: ImportOptions,
    result: ResolutionResult,
) -> None:
    """Resolve rooms against the finalized house map in result."""
    if not options.create_missing_rooms:
        keys_by_house_id: dict[uuid.UUID, list[HouseKey]] = {}
        for key, house_id in result.house_ids.items():
            keys_by_house_id.setdefault(house_id, []).append(key)

        outcome = await guarded(
            lambda: store.list_rooms(list(keys_by_house_id)), "existing rooms"
        )
        for room in outcome.value or []:
            for house_key in keys_by_house_id.get(room.house_id, []):
                result.room_ids.setdefault(RoomKey(house=house_key, name=room.name), room.id)
        return

    for candidate in preview.rooms:
        if candidate.key in result.room_ids:
            continue

        house_id = result.house_ids.get(candidate.house_key)
        if house_id is None:
            logger.info(
                "Dropping room '%s' (row %d): house did not resolve",
                candidate.key, candidate.row_number,
            )
            result.diagnostics.append(CommitDiagnostic(
                row_number=candidate.row_number,
                kind=DiagnosticKind.UNRESOLVED_HOUSE,
                message=f"Room '{candidate.name}' skipped: house '{candidate.house_key}' "
                        "was not found or created",
            ))
            continue

        outcome = await guarded(
            lambda: _resolve_room(store, house_id, candidate),
            f"room {candidate.key}",
        )
        if not outcome.ok:
            result.diagnostics.append(CommitDiagnostic(
                row_number=candidate.row_number,
                kind=DiagnosticKind.STORAGE_ERROR,
                message=f"Room '{candidate.key}' could not be saved ({type(outcome.error).__name__})",
            ))
            continue

        room_id, created = outcome.value
        result.room_ids[candidate.key] = room_id
        if created:
            result.rooms_created += 1


async def resolve_entities(
    store: ImportStore,
    owner_id: uuid.UUID,
    preview: ImportPreview,
    options: ImportOptions,
) -> ResolutionResult:
    """Resolve every house, then every room. Never raises for a single row."""
    result = ResolutionResult()
    await resolve_houses(store, owner_id, preview, options, result)
    await resolve_rooms(store, preview, options, result)
    return result
