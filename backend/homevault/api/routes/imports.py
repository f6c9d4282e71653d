"""
Import API routes — bulk import of houses, rooms and items.

Endpoints:
  GET    /api/v1/import/fields        — Accepted columns and their aliases
  POST   /api/v1/import/preview       — Upload a file (CSV/JSON/Excel), get a preview
  POST   /api/v1/import/preview/rows  — Preview already-parsed rows
  POST   /api/v1/import/commit        — Commit a reviewed preview

Preview never writes. Commit is refused while the preview carries errors.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homevault.core.config import settings
from homevault.core.database import get_db
from homevault.core.import_fields import IMPORT_FIELDS
from homevault.models.infrastructure import User
from homevault.schemas.imports import (
    CommitResult,
    ImportCommitRequest,
    ImportPreview,
    ImportRowsRequest,
)
from homevault.services.import_commit import commit_import
from homevault.services.import_parsing import ImportFileError, parse_import_file
from homevault.services.import_preview import build_preview
from homevault.services.import_store import SqlImportStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Helpers ───────────────────────────────────────────────────

async def _get_user_by_email_or_404(db: AsyncSession, email: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail=f"User not found: {email}")
    return user


# ─── Field Reference ──────────────────────────────────────────

@router.get("/fields")
async def list_fields():
    """List the canonical import columns, grouped by entity, with accepted aliases."""
    return {
        name: {
            "label": cfg.label,
            "entity": cfg.entity,
            "aliases": cfg.aliases,
            "data_type": cfg.data_type,
            "required": cfg.required,
            "default": cfg.default,
        }
        for name, cfg in IMPORT_FIELDS.items()
    }


# ─── Preview ──────────────────────────────────────────────────

@router.post("/preview", response_model=ImportPreview)
async def preview_file(file: UploadFile = File(...)):
    """
    Parse an uploaded file and build an import preview.

    Nothing is written. The caller reviews houses, rooms, items, errors
    and warnings, then posts the preview back to /commit.
    """
    file_bytes = await file.read()
    try:
        rows = parse_import_file(
            file_bytes,
            filename=file.filename,
            content_type=file.content_type,
            max_bytes=settings.IMPORT_MAX_FILE_BYTES,
            max_rows=settings.IMPORT_MAX_ROWS,
        )
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return build_preview(rows)


@router.post("/preview/rows", response_model=ImportPreview)
async def preview_rows(payload: ImportRowsRequest):
    """Build an import preview from rows the client already parsed."""
    if len(payload.rows) > settings.IMPORT_MAX_ROWS:
        raise HTTPException(
            status_code=400,
            detail=f"Imports are limited to {settings.IMPORT_MAX_ROWS} rows",
        )
    return build_preview(payload.rows)


# ─── Commit ───────────────────────────────────────────────────

@router.post("/commit", response_model=CommitResult, status_code=201)
async def commit(
    payload: ImportCommitRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Commit a reviewed preview for a user.

    Houses, then rooms, then items. Row-level failures are counted, not
    raised; the response counts are what actually happened.
    """
    if payload.preview.has_errors:
        logger.warning(
            "Refusing import commit for %s: preview has %d errors",
            payload.user_email, len(payload.preview.errors),
        )
        raise HTTPException(
            status_code=400,
            detail="Preview has errors; fix the file and preview again before importing. "
                   f"First error: {payload.preview.errors[0]}",
        )

    user = await _get_user_by_email_or_404(db, payload.user_email)

    return await commit_import(
        store=SqlImportStore(db),
        owner_id=user.id,
        preview=payload.preview,
        options=payload.options,
    )
