"""
Item conflict policy.

Decides what happens to an incoming item row once its room is known:

  no match                         → CREATE
  match, update_existing           → UPDATE     (wins over skip)
  match, skip_duplicates           → SKIP
  match, neither flag              → DUPLICATE  (new item, name suffixed)

Houses and rooms have no policy: they are always create-or-reuse.
"""

from enum import Enum


class ItemAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"
    DUPLICATE = "duplicate"


def decide_item_action(
    match_exists: bool,
    update_existing: bool,
    skip_duplicates: bool,
) -> ItemAction:
    if not match_exists:
        return ItemAction.CREATE
    if update_existing:
        return ItemAction.UPDATE
    if skip_duplicates:
        return ItemAction.SKIP
    return ItemAction.DUPLICATE


def duplicate_name(name: str, suffix: str) -> str:
    """'Lamp' → 'Lamp (Imported)'"""
    return f"{name}{suffix}"
