"""Base model classes and mixins for back office models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SyncStatus:
    """Values of ``ServiceSyncMixin.sync_status``."""

    NOT_SYNCED = "NOT_SYNCED"
    SYNCED = "SYNCED"
    ERROR = "ERROR"

    ALL = (NOT_SYNCED, SYNCED, ERROR)


class UUIDMixin:
    """Adds a UUID primary key."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class ServiceSyncMixin:
    """Adds control panel sync tracking columns.

    ``sync_metadata`` holds remote identifiers without a dedicated column
    (subscriptionId, subscriptionSyncedAt, ...). Always assign a new dict;
    in-place mutation is not tracked.
    """

    control_panel_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("control_panel.id", ondelete="SET NULL"), default=None
    )
    external_account_id: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    sync_status: Mapped[str] = mapped_column(String(20), default=SyncStatus.NOT_SYNCED)
    sync_error: Mapped[str | None] = mapped_column(Text, default=None)
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    sync_metadata: Mapped[dict | None] = mapped_column(JSON, default=None)
