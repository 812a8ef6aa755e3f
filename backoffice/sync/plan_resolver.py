"""Local package -> control panel plan resolution."""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.control_panel import LocalPlanType, PlanMapping
from ..models.package import HostingPackage, VpsPackage
from .errors import ConfigurationError, MappingNotFound, NotFoundError

_PACKAGE_MODELS = {
    LocalPlanType.HOSTING: HostingPackage,
    LocalPlanType.VPS: VpsPackage,
}


def _check_plan_type(plan_type: str) -> str:
    if plan_type not in _PACKAGE_MODELS:
        raise ConfigurationError(
            f"Unknown plan type {plan_type!r}; expected one of {', '.join(LocalPlanType.ALL)}"
        )
    return plan_type


async def resolve_plan(
    db: AsyncSession,
    control_panel_id: uuid.UUID,
    plan_type: str,
    local_plan_id: uuid.UUID,
) -> PlanMapping:
    """Return the active mapping for a local package.

    Raises MappingNotFound when no active mapping exists; callers must not
    fall back to guessing an external plan id.
    """
    model = _PACKAGE_MODELS[_check_plan_type(plan_type)]

    package = await db.get(model, local_plan_id)
    if package is None:
        raise NotFoundError(f"{plan_type.title()} package {local_plan_id} not found")

    stmt = (
        select(PlanMapping)
        .where(
            PlanMapping.control_panel_id == control_panel_id,
            PlanMapping.local_plan_type == plan_type,
            PlanMapping.local_plan_id == local_plan_id,
            PlanMapping.is_active.is_(True),
        )
        .order_by(PlanMapping.updated_at.desc())
    )
    mapping = (await db.execute(stmt)).scalars().first()
    if mapping is None:
        raise MappingNotFound(
            f"No active plan mapping for {plan_type.lower()} package "
            f"'{package.plan_name}'. Create a plan mapping first."
        )
    return mapping


async def find_mapping_for_external_plan(
    db: AsyncSession,
    control_panel_id: uuid.UUID,
    plan_type: str,
    external_plan_id: str | int,
) -> PlanMapping | None:
    """Find a mapping (active first) that points at ``external_plan_id``."""
    _check_plan_type(plan_type)
    stmt = (
        select(PlanMapping)
        .where(
            PlanMapping.control_panel_id == control_panel_id,
            PlanMapping.local_plan_type == plan_type,
            PlanMapping.external_plan_id == str(external_plan_id),
        )
        .order_by(PlanMapping.is_active.desc(), PlanMapping.updated_at.desc())
    )
    return (await db.execute(stmt)).scalars().first()


async def activate_mapping(db: AsyncSession, mapping: PlanMapping) -> PlanMapping:
    """Make ``mapping`` the only active one for its local package. Commits."""
    _check_plan_type(mapping.local_plan_type)
    if mapping.id is None:
        mapping.id = uuid.uuid4()

    await db.execute(
        update(PlanMapping)
        .where(
            PlanMapping.control_panel_id == mapping.control_panel_id,
            PlanMapping.local_plan_type == mapping.local_plan_type,
            PlanMapping.local_plan_id == mapping.local_plan_id,
            PlanMapping.id != mapping.id,
            PlanMapping.is_active.is_(True),
        )
        .values(is_active=False)
        .execution_options(synchronize_session="fetch")
    )
    mapping.is_active = True
    db.add(mapping)
    await db.commit()
    await db.refresh(mapping)
    return mapping
