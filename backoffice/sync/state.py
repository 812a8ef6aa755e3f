"""Sync status bookkeeping on local service records."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import SyncStatus

log = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mark_synced(
    record,
    *,
    account_id: str,
    control_panel_id: uuid.UUID | None,
    now: datetime | None = None,
) -> None:
    record.external_account_id = account_id
    if control_panel_id is not None:
        record.control_panel_id = control_panel_id
    record.sync_status = SyncStatus.SYNCED
    record.sync_error = None
    record.last_synced_at = now or utcnow()


async def commit_sync_state(db: AsyncSession, what: str) -> str | None:
    """Commit after a successful remote mutation.

    A failed commit does not fail the sync: the remote side already holds
    the truth and the next sync re-discovers it. Returns a warning message
    in that case, otherwise None.
    """
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        log.warning("Remote sync of %s succeeded but local save failed: %s", what, exc)
        return f"Remote changes applied but local state for {what} was not saved: {exc}"
    return None


async def record_failure(
    db: AsyncSession,
    record,
    exc: Exception,
    *,
    account_id: str | None = None,
) -> None:
    """Store ``exc`` on the record as an ERROR state.

    A remote account id discovered before the failure is kept so the next
    attempt does not search for it again.
    """
    await db.rollback()
    try:
        await db.refresh(record)
        record.sync_status = SyncStatus.ERROR
        record.sync_error = str(exc)[:MAX_ERROR_LENGTH]
        if account_id and not record.external_account_id:
            record.external_account_id = account_id
        await db.commit()
    except SQLAlchemyError as save_exc:
        await db.rollback()
        log.warning("Could not record sync failure on %r: %s", record, save_exc)
