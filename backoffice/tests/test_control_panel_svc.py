"""Tests for control panel config resolution and panel queries."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from panelkit.api import EnhanceClient

from backoffice.config import settings
from backoffice.models import ControlPanel, ControlPanelType
from backoffice.services.control_panel_svc import (
    ControlPanelConfig,
    check_health,
    list_remote_plans,
    load_control_panel,
    open_panel_client,
)
from backoffice.sync.errors import ConfigurationError, NotFoundError


def _panel(config: dict | None) -> ControlPanel:
    return ControlPanel(id=uuid.uuid4(), type=ControlPanelType.ENHANCE, enabled=True, config=config)


def test_config_from_camel_case_blob():
    config = ControlPanelConfig.from_panel(
        _panel({"apiKey": " key ", "baseUrl": "https://panel.test/", "orgId": "org-1", "unused": 1})
    )
    assert config.api_key == "key"
    assert config.base_url == "https://panel.test/"
    assert config.org_id == "org-1"
    assert config.timeout == settings.control_panel_timeout_seconds


def test_config_falls_back_to_settings(monkeypatch):
    monkeypatch.setattr(settings, "enhance_api_key", "env-key")
    monkeypatch.setattr(settings, "enhance_org_id", "env-org")
    monkeypatch.setattr(settings, "enhance_base_url", "https://env.panel.test")

    config = ControlPanelConfig.from_panel(_panel(None))

    assert config.api_key == "env-key"
    assert config.org_id == "env-org"
    assert config.base_url == "https://env.panel.test"


def test_config_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "enhance_api_key", None)
    with pytest.raises(ConfigurationError, match="API key"):
        ControlPanelConfig.from_panel(_panel({"orgId": "org-1"}))


def test_config_rejects_bad_types():
    with pytest.raises(ConfigurationError):
        ControlPanelConfig.from_panel(_panel({"apiKey": "k", "orgId": "o", "timeout": "soon"}))


def test_open_panel_client_uses_config():
    config = ControlPanelConfig(apiKey="k", baseUrl="https://panel.test", orgId="org-1", timeout=5)
    client = open_panel_client(config)
    assert isinstance(client, EnhanceClient)
    assert client.config.org_id == "org-1"
    assert client.config.timeout == 5


@pytest.mark.asyncio
async def test_load_default_panel(db: AsyncSession, control_panel):
    cp, config = await load_control_panel(db)
    assert cp.id == control_panel.id
    assert config.org_id == "reseller-org"


@pytest.mark.asyncio
async def test_load_without_panel(db: AsyncSession):
    with pytest.raises(ConfigurationError, match="No Enhance"):
        await load_control_panel(db)


@pytest.mark.asyncio
async def test_load_unknown_panel_id(db: AsyncSession):
    with pytest.raises(NotFoundError):
        await load_control_panel(db, uuid.uuid4())


@pytest.mark.asyncio
async def test_load_unsupported_type(db: AsyncSession):
    cp = ControlPanel(id=uuid.uuid4(), type=ControlPanelType.CPANEL, config={"apiKey": "k", "orgId": "o"})
    db.add(cp)
    await db.commit()

    with pytest.raises(ConfigurationError, match="not supported"):
        await load_control_panel(db, cp.id)


@pytest.mark.asyncio
async def test_check_health(db: AsyncSession, panel, control_panel):
    status = await check_health(db, control_panel.id, panel=panel)
    assert status["status"] == "healthy"
    assert status["type"] == "ENHANCE"


@pytest.mark.asyncio
async def test_check_health_disabled_panel(db: AsyncSession, panel, control_panel):
    control_panel.enabled = False
    await db.commit()

    status = await check_health(db, control_panel.id, panel=panel)
    assert status["status"] == "disabled"


@pytest.mark.asyncio
async def test_list_remote_plans_flags_mapped(db: AsyncSession, panel, control_panel, starter_mapping):
    plans = await list_remote_plans(db, control_panel.id, panel=panel)
    assert plans == [
        {"id": "101", "name": "Starter", "mapped": True},
        {"id": "202", "name": "Business", "mapped": False},
    ]
