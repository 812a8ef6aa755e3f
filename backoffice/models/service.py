"""Hosting and VPS service records - the local side of a remote subscription."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, ServiceSyncMixin


class Hosting(UUIDMixin, TimestampMixin, ServiceSyncMixin, Base):
    __tablename__ = "hosting"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customer.id", ondelete="CASCADE"), index=True
    )
    hosting_package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("hosting_package.id", ondelete="RESTRICT"), index=True
    )
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE, INACTIVE, SUSPENDED
    ip_address: Mapped[str | None] = mapped_column(String(45), default=None)
    expiry_date: Mapped[date | None] = mapped_column(Date, default=None)

    # Relationships
    customer: Mapped["Customer"] = relationship(back_populates="hostings")  # noqa: F821
    package: Mapped["HostingPackage"] = relationship()  # noqa: F821

    @property
    def local_plan_id(self) -> uuid.UUID:
        return self.hosting_package_id

    def __repr__(self) -> str:
        return f"<Hosting {self.id}>"


class Vps(UUIDMixin, TimestampMixin, ServiceSyncMixin, Base):
    __tablename__ = "vps"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customer.id", ondelete="CASCADE"), index=True
    )
    vps_package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("vps_package.id", ondelete="RESTRICT"), index=True
    )
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    ip_address: Mapped[str | None] = mapped_column(String(45), default=None)
    expiry_date: Mapped[date | None] = mapped_column(Date, default=None)

    # Relationships
    customer: Mapped["Customer"] = relationship(back_populates="vps_list")  # noqa: F821
    package: Mapped["VpsPackage"] = relationship()  # noqa: F821

    @property
    def local_plan_id(self) -> uuid.UUID:
        return self.vps_package_id

    def __repr__(self) -> str:
        return f"<Vps {self.id}>"
