"""Reconciliation result schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class CustomerSyncResult(BaseModel):
    external_account_id: str
    action: Literal["existing", "found", "updated", "created"]


class SubscriptionSyncResult(BaseModel):
    external_account_id: str
    subscription_id: str
    plan_id: str
    action: Literal["created", "updated", "upgrade", "downgrade", "recreated"]
    previous_subscription_id: str | None = None
    local_persisted: bool = True
    warnings: list[str] = []


class WebsiteSyncResult(BaseModel):
    external_account_id: str
    external_website_id: str
    already_existed: bool = False
    domain_updated: bool = False
    local_persisted: bool = True
    warnings: list[str] = []


class CustomerSyncReport(BaseModel):
    customer_id: str
    external_account_id: str
    action: str
    services_updated: int = 0


class RetryReport(BaseModel):
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = []


class RetryQueueStats(BaseModel):
    """Records waiting for a retry (sync_status ERROR), per record type."""

    hosting: int = 0
    vps: int = 0
    website: int = 0
    total: int = 0
