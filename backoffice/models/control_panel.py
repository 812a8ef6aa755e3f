"""Control panel configuration and local-to-remote plan mappings."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin


class ControlPanelType:
    ENHANCE = "ENHANCE"
    CPANEL = "CPANEL"
    PLESK = "PLESK"
    DIRECTADMIN = "DIRECTADMIN"

    ALL = (ENHANCE, CPANEL, PLESK, DIRECTADMIN)


class LocalPlanType:
    HOSTING = "HOSTING"
    VPS = "VPS"

    ALL = (HOSTING, VPS)


class ControlPanel(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "control_panel"

    type: Mapped[str] = mapped_column(String(20), unique=True)  # ENHANCE, CPANEL, PLESK, DIRECTADMIN
    name: Mapped[str | None] = mapped_column(String(255), default=None)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    # {"apiKey": ..., "baseUrl": ..., "orgId": ...}
    config: Mapped[dict | None] = mapped_column(JSON, default=None)

    # Relationships
    plan_mappings: Mapped[list["PlanMapping"]] = relationship(
        back_populates="control_panel", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ControlPanel {self.type} enabled={self.enabled}>"


class PlanMapping(UUIDMixin, TimestampMixin, Base):
    """Links a local catalog package to a plan on a control panel.

    At most one active row exists per (panel, local plan type, local plan);
    inactive rows are kept as history.
    """

    __tablename__ = "plan_mapping"
    __table_args__ = (
        Index(
            "uq_plan_mapping_active",
            "control_panel_id",
            "local_plan_type",
            "local_plan_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("ix_plan_mapping_external", "control_panel_id", "external_plan_id"),
    )

    control_panel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("control_panel.id", ondelete="CASCADE"), index=True
    )
    local_plan_type: Mapped[str] = mapped_column(String(20))  # HOSTING, VPS
    local_plan_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    external_plan_id: Mapped[str] = mapped_column(String(255))
    external_plan_name: Mapped[str | None] = mapped_column(String(255), default=None)
    # Optional explicit ordering for upgrade/downgrade detection
    tier: Mapped[int | None] = mapped_column(Integer, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    mapping_config: Mapped[dict | None] = mapped_column(JSON, default=None)

    # Relationships
    control_panel: Mapped["ControlPanel"] = relationship(back_populates="plan_mappings")

    def __repr__(self) -> str:
        return (
            f"<PlanMapping {self.local_plan_type}:{self.local_plan_id} "
            f"-> {self.external_plan_id} active={self.is_active}>"
        )
