"""
Import commit executor.

Applies a reviewed preview to storage, strictly in dependency order:

  1. Houses  (resolve or create)
  2. Rooms   (resolve or create, against the finalized house map)
  3. Items   (conflict policy: create / update / skip / duplicate)

There is no transaction around the whole batch. A row that fails is
counted and the run continues, so the returned counts are the
authoritative record of what happened.

The executor does not re-validate the preview. Callers must refuse to
commit a preview with errors, and must not let it go stale.
"""

import logging
import uuid

from homevault.core.config import settings
from homevault.schemas.imports import (
    CommitDiagnostic,
    CommitResult,
    DiagnosticKind,
    ImportOptions,
    ImportPreview,
    ItemCandidate,
)
from homevault.services.conflict_policy import ItemAction, decide_item_action, duplicate_name
from homevault.services.entity_resolver import resolve_entities
from homevault.services.import_store import ImportStore
from homevault.services.storage_guard import guarded

logger = logging.getLogger(__name__)


async def apply_item(
    store: ImportStore,
    room_id: uuid.UUID,
    candidate: ItemCandidate,
    options: ImportOptions,
    duplicate_suffix: str,
) -> ItemAction:
    """Look up a matching item, decide, and persist. Returns the action taken."""
    existing = await store.find_item(room_id, candidate.name, candidate.brand, candidate.model)
    action = decide_item_action(
        existing is not None,
        options.update_existing,
        options.skip_duplicates,
    )

    if action is ItemAction.CREATE:
        await store.create_item(room_id, {
            "name": candidate.name,
            **candidate.persisted_fields(),
            "is_imported": True,
        })
    elif action is ItemAction.UPDATE:
        await store.update_item(existing.id, candidate.persisted_fields())
    elif action is ItemAction.DUPLICATE:
        await store.create_item(room_id, {
            "name": duplicate_name(candidate.name, duplicate_suffix),
            **candidate.persisted_fields(),
            "is_imported": True,
        })
    return action


def _plural(count: int, noun: str, plural: str | None = None) -> str:
    return f"{count} {noun if count == 1 else (plural or noun + 's')}"


def format_summary(result: CommitResult) -> str:
    """One-line human recap of a commit."""
    return (
        f"Import completed: {_plural(result.created.houses, 'house')}, "
        f"{_plural(result.created.rooms, 'room')}, "
        f"{_plural(result.created.items, 'item')} created. "
        f"{_plural(result.updated.items, 'item')} updated, "
        f"{_plural(result.skipped.items, 'item')} skipped."
    )


async def commit_import(
    store: ImportStore,
    owner_id: uuid.UUID,
    preview: ImportPreview,
    options: ImportOptions,
    duplicate_suffix: str | None = None,
) -> CommitResult:
    """
    Execute the commit phase for one user.

    Returns CommitResult with created/updated/skipped counts, a summary
    line, and diagnostics for rows dropped along the way.
    """
    logger.info(
        "Committing import for owner %s: %d houses, %d rooms, %d items (%s)",
        owner_id,
        len(preview.houses),
        len(preview.rooms),
        len(preview.items),
        options.model_dump(),
    )

    if duplicate_suffix is None:
        duplicate_suffix = settings.IMPORT_DUPLICATE_SUFFIX

    result = CommitResult()

    # Steps 1–2: houses, then rooms
    resolution = await resolve_entities(store, owner_id, preview, options)
    result.created.houses = resolution.houses_created
    result.created.rooms = resolution.rooms_created
    result.diagnostics.extend(resolution.diagnostics)

    # Step 3: items
    for candidate in preview.items:
        room_id = resolution.room_ids.get(candidate.room_key)
        if room_id is None:
            logger.debug(
                "Skipping item '%s' (row %d): room '%s' did not resolve",
                candidate.name, candidate.row_number, candidate.room_key,
            )
            result.skipped.items += 1
            result.diagnostics.append(CommitDiagnostic(
                row_number=candidate.row_number,
                kind=DiagnosticKind.UNRESOLVED_ROOM,
                message=f"Item '{candidate.name}' skipped: room '{candidate.room_key}' "
                        "was not found or created",
            ))
            continue

        outcome = await guarded(
            lambda: apply_item(store, room_id, candidate, options, duplicate_suffix),
            f"item row {candidate.row_number}",
        )
        if not outcome.ok:
            result.skipped.items += 1
            result.diagnostics.append(CommitDiagnostic(
                row_number=candidate.row_number,
                kind=DiagnosticKind.STORAGE_ERROR,
                message=f"Item '{candidate.name}' could not be saved ({type(outcome.error).__name__})",
            ))
            continue

        if outcome.value is ItemAction.UPDATE:
            result.updated.items += 1
        elif outcome.value is ItemAction.SKIP:
            result.skipped.items += 1
        else:
            result.created.items += 1

    result.summary = format_summary(result)
    logger.info(result.summary)
    return result
