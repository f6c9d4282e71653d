"""
Per-row failure isolation for import commits.

Every storage call made while committing an import goes through
guarded(): a failure is logged and handed back as a value so the caller
can count it and move on to the next row. Nothing raised by a single
house, room or item aborts the run.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GuardedOutcome(Generic[T]):
    """Result of one guarded storage operation."""
    ok: bool
    value: T | None = None
    error: Exception | None = None


async def guarded(
    operation: Callable[[], Awaitable[T]],
    description: str,
) -> GuardedOutcome[T]:
    """Await operation(); on any exception log it and return a failed outcome."""
    try:
        value = await operation()
    except Exception as e:
        logger.error("Import storage failure on %s: %s", description, e, exc_info=True)
        return GuardedOutcome(ok=False, error=e)
    return GuardedOutcome(ok=True, value=value)
