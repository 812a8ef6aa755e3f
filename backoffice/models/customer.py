"""Customer model."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin


class Customer(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "customer"

    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), default=None)
    company: Mapped[str | None] = mapped_column(String(255), default=None)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE, INACTIVE, SUSPENDED

    # Relationships
    hostings: Mapped[list["Hosting"]] = relationship(  # noqa: F821
        back_populates="customer", cascade="all, delete-orphan"
    )
    vps_list: Mapped[list["Vps"]] = relationship(  # noqa: F821
        back_populates="customer", cascade="all, delete-orphan"
    )
    websites: Mapped[list["Website"]] = relationship(  # noqa: F821
        back_populates="customer", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Customer {self.email!r}>"
