"""Catalog packages - the local plans that get mapped to control panel plans."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class HostingPackage(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "hosting_package"

    plan_name: Mapped[str] = mapped_column(String(255))
    storage_gb: Mapped[int | None] = mapped_column(Integer, default=None)
    bandwidth_gb: Mapped[int | None] = mapped_column(Integer, default=None)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")

    def __repr__(self) -> str:
        return f"<HostingPackage {self.plan_name!r}>"


class VpsPackage(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "vps_package"

    plan_name: Mapped[str] = mapped_column(String(255))
    cpu: Mapped[int | None] = mapped_column(Integer, default=None)
    ram_gb: Mapped[int | None] = mapped_column(Integer, default=None)
    storage_gb: Mapped[int | None] = mapped_column(Integer, default=None)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")

    def __repr__(self) -> str:
        return f"<VpsPackage {self.plan_name!r}>"
