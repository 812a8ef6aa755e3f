"""Sync orchestrator - operator-triggered reconciliation of single records.

Each entry point serializes on the record (``record_lock`` plus a row lock),
runs under a deadline, and leaves the record either SYNCED, ERROR with a
message, or untouched when the deadline expires or the call is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from panelkit.api.errors import ControlPanelError, RemoteTransientError

from ..config import settings
from ..models.base import SyncStatus
from ..models.control_panel import LocalPlanType
from ..models.customer import Customer
from ..models.service import Hosting, Vps
from ..models.website import Domain, Website
from ..schemas.sync import (
    CustomerSyncReport,
    RetryQueueStats,
    RetryReport,
    SubscriptionSyncResult,
    WebsiteSyncResult,
)
from ..services.control_panel_svc import load_control_panel, panel_session
from .customer_sync import ensure_remote_account
from .errors import ConfigurationError, NotFoundError, SyncError
from .locks import record_lock
from .plan_resolver import resolve_plan
from .state import commit_sync_state, record_failure
from .subscription_sync import ensure_subscription
from .website_sync import ensure_website

log = logging.getLogger(__name__)

_SERVICE_MODELS = {
    LocalPlanType.HOSTING: Hosting,
    LocalPlanType.VPS: Vps,
}


async def _locked(db: AsyncSession, kind: str, record_id: uuid.UUID, coro, deadline: float | None):
    """Run ``coro`` under the record lock and deadline.

    The deadline also covers waiting for the lock. Expiry or cancellation
    rolls back and leaves the record untouched.
    """
    timeout = settings.sync_deadline_seconds if deadline is None else deadline

    async def _run():
        try:
            async with record_lock(kind, record_id):
                return await coro
        finally:
            # never started when the deadline hit while waiting for the lock
            coro.close()

    try:
        return await asyncio.wait_for(_run(), timeout)
    except asyncio.TimeoutError as exc:
        await db.rollback()
        raise RemoteTransientError(f"Sync did not finish within {timeout:g}s; retry later") from exc
    except asyncio.CancelledError:
        await db.rollback()
        raise


async def _load_for_update(db: AsyncSession, model, record_id: uuid.UUID):
    stmt = (
        select(model)
        .where(model.id == record_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"{model.__name__} {record_id} not found")
    return record


async def _get_customer(db: AsyncSession, customer_id: uuid.UUID) -> Customer:
    customer = await db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return customer


async def _known_account_id(db: AsyncSession, record) -> str | None:
    """Account id cached on this record or any other record of the customer."""
    if record.external_account_id:
        return record.external_account_id
    for model in (Hosting, Vps, Website):
        stmt = (
            select(model.external_account_id)
            .where(
                model.customer_id == record.customer_id,
                model.external_account_id.is_not(None),
            )
            .order_by(model.created_at)
            .limit(1)
        )
        account_id = (await db.execute(stmt)).scalar_one_or_none()
        if account_id:
            return account_id
    return None


async def _fail(db: AsyncSession, record, exc: Exception, account_id: str | None) -> None:
    """Record a failed step, keeping an account id found or created before it."""
    log.warning("Sync of %r failed: %s", record, exc)
    await record_failure(db, record, exc, account_id=account_id)


# -- Hosting / VPS -----------------------------------------------------------


async def _run_service_sync(
    db: AsyncSession, plan_type: str, record_id: uuid.UUID, panel
) -> SubscriptionSyncResult:
    record = await _load_for_update(db, _SERVICE_MODELS[plan_type], record_id)
    account_id: str | None = None
    try:
        cp, config = await load_control_panel(db)
        mapping = await resolve_plan(db, cp.id, plan_type, record.local_plan_id)
        customer = await _get_customer(db, record.customer_id)
        known = await _known_account_id(db, record)

        async with panel_session(config, panel) as client:
            account = await ensure_remote_account(client, customer, known_account_id=known)
            account_id = account.external_account_id
            return await ensure_subscription(db, client, record, account_id, mapping)
    except (SyncError, ControlPanelError) as exc:
        await _fail(db, record, exc, account_id)
        raise


async def sync_hosting(
    db: AsyncSession,
    hosting_id: uuid.UUID,
    *,
    panel=None,
    deadline: float | None = None,
) -> SubscriptionSyncResult:
    """Reconcile a hosting record with its remote subscription.

    ``panel`` is an already-open client; by default one is opened from the
    configured Enhance panel.
    """
    return await _locked(
        db, "hosting", hosting_id,
        _run_service_sync(db, LocalPlanType.HOSTING, hosting_id, panel), deadline,
    )


async def sync_vps(
    db: AsyncSession,
    vps_id: uuid.UUID,
    *,
    panel=None,
    deadline: float | None = None,
) -> SubscriptionSyncResult:
    """Reconcile a VPS record with its remote subscription."""
    return await _locked(
        db, "vps", vps_id,
        _run_service_sync(db, LocalPlanType.VPS, vps_id, panel), deadline,
    )


# -- Websites ----------------------------------------------------------------


async def _subscription_for_website(db: AsyncSession, website: Website) -> str | None:
    for model, linked_id in ((Hosting, website.hosting_id), (Vps, website.vps_id)):
        if linked_id is None:
            continue
        service = await db.get(model, linked_id)
        if service is not None:
            sub_id = (service.sync_metadata or {}).get("subscriptionId")
            if sub_id:
                return str(sub_id)
    return None


async def _run_website_sync(db: AsyncSession, website_id: uuid.UUID, panel) -> WebsiteSyncResult:
    website = await _load_for_update(db, Website, website_id)
    account_id: str | None = None
    try:
        cp, config = await load_control_panel(db)
        customer = await _get_customer(db, website.customer_id)

        if website.domain_id is None:
            raise ConfigurationError(f"Website {website.name!r} has no domain assigned")
        domain = await db.get(Domain, website.domain_id)
        if domain is None:
            raise NotFoundError(f"Domain {website.domain_id} not found")

        subscription_id = await _subscription_for_website(db, website)
        known = await _known_account_id(db, website)

        async with panel_session(config, panel) as client:
            account = await ensure_remote_account(client, customer, known_account_id=known)
            account_id = account.external_account_id
            return await ensure_website(
                db, client, website, account_id, domain.domain_name,
                subscription_id=subscription_id, control_panel_id=cp.id,
            )
    except (SyncError, ControlPanelError) as exc:
        await _fail(db, website, exc, account_id)
        raise


async def sync_website(
    db: AsyncSession,
    website_id: uuid.UUID,
    *,
    panel=None,
    deadline: float | None = None,
) -> WebsiteSyncResult:
    """Reconcile a website record with a remote website on its domain."""
    return await _locked(
        db, "website", website_id, _run_website_sync(db, website_id, panel), deadline,
    )


# -- Customers ---------------------------------------------------------------


async def _run_customer_sync(db: AsyncSession, customer_id: uuid.UUID, panel) -> CustomerSyncReport:
    customer = await _get_customer(db, customer_id)
    _, config = await load_control_panel(db)

    async with panel_session(config, panel) as client:
        account = await ensure_remote_account(client, customer)
    account_id = account.external_account_id

    # Share the account id with service records that do not have one yet
    updated = 0
    for model in (Hosting, Vps, Website):
        stmt = select(model).where(model.customer_id == customer.id)
        for record in (await db.execute(stmt)).scalars().all():
            if not record.external_account_id:
                record.external_account_id = account_id
                updated += 1
            elif record.external_account_id != account_id:
                log.warning(
                    "%r is linked to account %s, customer %s resolves to %s",
                    record, record.external_account_id, customer.email, account_id,
                )

    if updated:
        await commit_sync_state(db, f"customer {customer.email}")
    return CustomerSyncReport(
        customer_id=str(customer.id),
        external_account_id=account_id,
        action=account.action,
        services_updated=updated,
    )


async def sync_customer(
    db: AsyncSession,
    customer_id: uuid.UUID,
    *,
    panel=None,
    deadline: float | None = None,
) -> CustomerSyncReport:
    """Find, rename or create the customer's remote account."""
    return await _locked(
        db, "customer", customer_id, _run_customer_sync(db, customer_id, panel), deadline,
    )


# -- Retry -------------------------------------------------------------------


async def failed_sync_stats(db: AsyncSession) -> RetryQueueStats:
    stats = RetryQueueStats()
    for model, kind in ((Hosting, "hosting"), (Vps, "vps"), (Website, "website")):
        stmt = select(func.count()).select_from(model).where(model.sync_status == SyncStatus.ERROR)
        count = (await db.execute(stmt)).scalar_one()
        setattr(stats, kind, count)
        stats.total += count
    return stats


async def retry_failed_syncs(
    db: AsyncSession,
    *,
    limit: int | None = None,
    panel=None,
) -> RetryReport:
    """Re-run sync for records left in ERROR, oldest first."""
    limit = settings.sync_retry_batch_limit if limit is None else limit
    report = RetryReport()
    if limit <= 0:
        return report

    candidates: list[tuple[Any, str, uuid.UUID]] = []
    for model, kind in ((Hosting, "hosting"), (Vps, "vps"), (Website, "website")):
        stmt = (
            select(model.id, model.updated_at)
            .where(model.sync_status == SyncStatus.ERROR)
            .order_by(model.updated_at)
            .limit(limit)
        )
        for row in (await db.execute(stmt)).all():
            candidates.append((row.updated_at, kind, row.id))
    candidates.sort(key=lambda c: (c[0] is None, c[0] or 0))

    runners = {"hosting": sync_hosting, "vps": sync_vps, "website": sync_website}
    for _, kind, record_id in candidates[:limit]:
        report.attempted += 1
        try:
            await runners[kind](db, record_id, panel=panel)
        except (SyncError, ControlPanelError) as exc:
            report.failed += 1
            report.errors.append(f"{kind} {record_id}: {exc}")
        else:
            report.succeeded += 1
    log.info(
        "Retried %d failed syncs: %d ok, %d failed",
        report.attempted, report.succeeded, report.failed,
    )
    return report
