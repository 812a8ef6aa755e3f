"""Control panel routes - connectivity and remote plan catalog."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services import control_panel_svc
from ..services.control_panel_svc import get_panel

router = APIRouter(prefix="/control-panels", tags=["control-panels"])


@router.get("/{control_panel_id}/health")
async def panel_health(
    control_panel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await control_panel_svc.check_health(db, control_panel_id, panel=panel)


@router.get("/{control_panel_id}/plans")
async def panel_plans(
    control_panel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    plans = await control_panel_svc.list_remote_plans(db, control_panel_id, panel=panel)
    return {"plans": plans}
