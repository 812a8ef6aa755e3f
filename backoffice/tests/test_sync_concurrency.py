"""Concurrent syncs of one record must not duplicate remote subscriptions."""

from __future__ import annotations

import asyncio
import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backoffice.models import (
    Base,
    ControlPanel,
    ControlPanelType,
    Customer,
    Hosting,
    HostingPackage,
    LocalPlanType,
    PlanMapping,
)
from backoffice.sync import sync_engine
from backoffice.sync.locks import held_locks, record_lock


@pytest_asyncio.fixture
async def file_sessions(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)
    await eng.dispose()


@pytest_asyncio.fixture
async def seeded_hosting_id(file_sessions):
    async with file_sessions() as session:
        cp = ControlPanel(
            id=uuid.uuid4(),
            type=ControlPanelType.ENHANCE,
            config={"apiKey": "k", "orgId": "reseller-org"},
        )
        pkg = HostingPackage(id=uuid.uuid4(), plan_name="Starter")
        alice = Customer(id=uuid.uuid4(), name="Alice", email="alice@example.com")
        session.add_all([cp, pkg, alice])
        await session.flush()
        session.add(PlanMapping(
            control_panel_id=cp.id,
            local_plan_type=LocalPlanType.HOSTING,
            local_plan_id=pkg.id,
            external_plan_id="101",
        ))
        hosting = Hosting(id=uuid.uuid4(), customer_id=alice.id, hosting_package_id=pkg.id)
        session.add(hosting)
        await session.commit()
        return hosting.id


@pytest.mark.asyncio
async def test_concurrent_syncs_create_one_subscription(file_sessions, seeded_hosting_id, panel):
    async def run_once():
        async with file_sessions() as session:
            return await sync_engine.sync_hosting(session, seeded_hosting_id, panel=panel)

    first, second = await asyncio.gather(run_once(), run_once())

    assert sorted([first.action, second.action]) == ["created", "updated"]
    assert first.subscription_id == second.subscription_id == "555"
    assert len(panel.subscriptions.create_calls) == 1
    assert len(panel.customers.create_calls) == 1
    assert held_locks() == 0

    async with file_sessions() as session:
        hosting = await session.get(Hosting, seeded_hosting_id)
        assert hosting.sync_metadata["subscriptionId"] == "555"


@pytest.mark.asyncio
async def test_record_lock_serializes_same_key_only():
    order: list[str] = []

    async def worker(key: str, name: str):
        async with record_lock("hosting", key):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a", "one"), worker("a", "two"), worker("b", "three"))

    one_two = [o for o in order if not o.startswith("three")]
    assert one_two in (
        ["one-in", "one-out", "two-in", "two-out"],
        ["two-in", "two-out", "one-in", "one-out"],
    )
    assert order.index("three-in") < order.index("one-out")
    assert held_locks() == 0
