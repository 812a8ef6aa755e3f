"""Control panel service - resolves panel config and opens API clients."""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from panelkit.api import EnhanceClient, EnhanceConfig

from ..config import settings
from ..models.control_panel import ControlPanel, ControlPanelType, PlanMapping
from ..sync.errors import ConfigurationError, NotFoundError


class ControlPanelConfig(BaseModel):
    """Validated ``ControlPanel.config`` blob.

    Keys are stored camelCase (``apiKey``, ``baseUrl``, ``orgId``); blanks are
    filled from the ``ENHANCE_*`` settings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key: str = Field(default="", alias="apiKey")
    base_url: str = Field(default="", alias="baseUrl")
    org_id: str | None = Field(default=None, alias="orgId")
    timeout: float | None = None

    @classmethod
    def from_panel(cls, panel: ControlPanel) -> "ControlPanelConfig":
        try:
            config = cls.model_validate(panel.config or {})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid config for control panel {panel.type}: {exc}") from exc

        config.api_key = (config.api_key or "").strip() or (settings.enhance_api_key or "").strip()
        config.base_url = (config.base_url or "").strip() or settings.enhance_base_url
        config.org_id = (config.org_id or "").strip() or (settings.enhance_org_id or "").strip() or None
        if config.timeout is None:
            config.timeout = settings.control_panel_timeout_seconds

        if not config.api_key:
            raise ConfigurationError(f"Control panel {panel.type} has no API key configured")
        if not config.org_id:
            raise ConfigurationError(
                f"Control panel {panel.type} has no organization id (config orgId or ENHANCE_ORG_ID)"
            )
        return config

    def to_client_config(self) -> EnhanceConfig:
        return EnhanceConfig(
            api_key=self.api_key,
            base_url=self.base_url,
            org_id=self.org_id,
            timeout=self.timeout or settings.control_panel_timeout_seconds,
        )


# Parsed once per panel row and config content
_config_cache: dict[tuple[uuid.UUID, str], ControlPanelConfig] = {}


def _resolve_config(panel: ControlPanel) -> ControlPanelConfig:
    key = (panel.id, json.dumps(panel.config or {}, sort_keys=True, default=str))
    config = _config_cache.get(key)
    if config is None:
        config = _config_cache[key] = ControlPanelConfig.from_panel(panel)
    return config


async def load_control_panel(
    db: AsyncSession,
    control_panel_id: uuid.UUID | None = None,
    *,
    require_enabled: bool = True,
) -> tuple[ControlPanel, ControlPanelConfig]:
    """Load a control panel row and its validated config.

    Without an id the Enhance panel is used.
    """
    if control_panel_id is not None:
        panel = await db.get(ControlPanel, control_panel_id)
        if panel is None:
            raise NotFoundError(f"Control panel {control_panel_id} not found")
    else:
        stmt = select(ControlPanel).where(ControlPanel.type == ControlPanelType.ENHANCE)
        panel = (await db.execute(stmt)).scalar_one_or_none()
        if panel is None:
            raise ConfigurationError("No Enhance control panel is configured")

    if panel.type != ControlPanelType.ENHANCE:
        raise ConfigurationError(f"Control panel type {panel.type} is not supported")
    if require_enabled and not panel.enabled:
        raise ConfigurationError(f"Control panel {panel.type} is disabled")

    return panel, _resolve_config(panel)


def open_panel_client(config: ControlPanelConfig) -> EnhanceClient:
    """Unopened client; use with ``async with``."""
    return EnhanceClient(config.to_client_config())


async def get_panel():
    """FastAPI dependency for an already-open panel client.

    None means "open one from the stored config"; tests override it.
    """
    return None


@asynccontextmanager
async def panel_session(config: ControlPanelConfig, panel=None) -> AsyncIterator[Any]:
    """Yield ``panel`` when given (already open), else an opened client."""
    if panel is not None:
        yield panel
        return
    async with open_panel_client(config) as client:
        yield client


async def check_health(
    db: AsyncSession, control_panel_id: uuid.UUID, *, panel=None
) -> dict[str, Any]:
    cp, config = await load_control_panel(db, control_panel_id, require_enabled=False)
    base = {"control_panel_id": str(cp.id), "type": cp.type}
    if not cp.enabled:
        return {**base, "status": "disabled"}

    async with panel_session(config, panel) as client:
        status = await client.health_check()
    return {**base, **status}


async def list_remote_plans(
    db: AsyncSession, control_panel_id: uuid.UUID, *, panel=None
) -> list[dict[str, Any]]:
    """Remote plans, each flagged with whether an active mapping uses it."""
    cp, config = await load_control_panel(db, control_panel_id)

    stmt = select(PlanMapping.external_plan_id).where(
        PlanMapping.control_panel_id == cp.id,
        PlanMapping.is_active.is_(True),
    )
    mapped = {str(pid) for pid in (await db.execute(stmt)).scalars().all()}

    async with panel_session(config, panel) as client:
        plans = await client.plans.list()

    result = []
    for plan in plans:
        plan_id = str(plan.get("id", ""))
        result.append({
            "id": plan_id,
            "name": plan.get("name") or "",
            "mapped": plan_id in mapped,
        })
    return result
