"""Domain and Website models."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, ServiceSyncMixin


class Domain(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "domain"

    domain_name: Mapped[str] = mapped_column(String(255), index=True)
    customer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("customer.id", ondelete="SET NULL"), default=None, index=True
    )
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")

    def __repr__(self) -> str:
        return f"<Domain {self.domain_name!r}>"


class Website(UUIDMixin, TimestampMixin, ServiceSyncMixin, Base):
    __tablename__ = "website"

    name: Mapped[str] = mapped_column(String(255))
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customer.id", ondelete="CASCADE"), index=True
    )
    domain_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("domain.id", ondelete="SET NULL"), default=None
    )
    hosting_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("hosting.id", ondelete="SET NULL"), default=None
    )
    vps_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("vps.id", ondelete="SET NULL"), default=None
    )
    status: Mapped[str] = mapped_column(String(20), default="LIVE")  # LIVE, DOWN, MAINTENANCE
    description: Mapped[str | None] = mapped_column(Text, default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    # Remote website id. Older rows only carry it inside a [SYNC] note.
    external_website_id: Mapped[str | None] = mapped_column(String(255), default=None, index=True)

    # Relationships
    customer: Mapped["Customer"] = relationship(back_populates="websites")  # noqa: F821
    domain: Mapped["Domain | None"] = relationship()
    hosting: Mapped["Hosting | None"] = relationship()  # noqa: F821
    vps: Mapped["Vps | None"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<Website {self.name!r}>"
