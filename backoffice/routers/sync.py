"""Sync routes - operator-triggered reconciliation of single records."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.sync import (
    CustomerSyncReport,
    RetryQueueStats,
    RetryReport,
    SubscriptionSyncResult,
    WebsiteSyncResult,
)
from ..services.control_panel_svc import get_panel
from ..sync import sync_engine

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("/customers/{customer_id}", response_model=CustomerSyncReport)
async def sync_customer(
    customer_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await sync_engine.sync_customer(db, customer_id, panel=panel)


@router.post("/hosting/{hosting_id}", response_model=SubscriptionSyncResult)
async def sync_hosting(
    hosting_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await sync_engine.sync_hosting(db, hosting_id, panel=panel)


@router.post("/vps/{vps_id}", response_model=SubscriptionSyncResult)
async def sync_vps(
    vps_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await sync_engine.sync_vps(db, vps_id, panel=panel)


@router.post("/websites/{website_id}", response_model=WebsiteSyncResult)
async def sync_website(
    website_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await sync_engine.sync_website(db, website_id, panel=panel)


@router.post("/retry", response_model=RetryReport)
async def retry_failed(
    limit: int | None = Query(default=None, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    panel=Depends(get_panel),
):
    return await sync_engine.retry_failed_syncs(db, limit=limit, panel=panel)


@router.get("/retry", response_model=RetryQueueStats)
async def retry_queue(db: AsyncSession = Depends(get_db)):
    return await sync_engine.failed_sync_stats(db)
