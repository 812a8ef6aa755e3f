"""Async test fixtures for back office tests using SQLite."""

from __future__ import annotations

import asyncio
import uuid
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from panelkit.api.errors import ControlPanelError, RemoteConflict, RemoteNotFound
from panelkit.api.payloads import account_emails, normalize_email

from backoffice.database import get_db
from backoffice.models import (
    Base,
    ControlPanel,
    ControlPanelType,
    Customer,
    Domain,
    Hosting,
    HostingPackage,
    LocalPlanType,
    PlanMapping,
    VpsPackage,
    Website,
)
from backoffice.services.control_panel_svc import get_panel


# ============================================================================
# Fake control panel
# ============================================================================


class FakeCustomersAPI:
    def __init__(self, accounts: list[dict] | None = None):
        self.accounts = list(accounts or [])
        self.find_calls: list[str] = []
        self.create_calls: list[dict] = []
        self.update_calls: list[dict] = []

    async def find_by_email(self, email: str):
        self.find_calls.append(email)
        wanted = normalize_email(email)
        for account in self.accounts:
            if wanted in account_emails(account):
                return account
        return None

    async def create_account(self, *, name, email, phone=None, company=None):
        self.create_calls.append({"name": name, "email": email, "phone": phone, "company": company})
        account = {"id": f"acct-{len(self.accounts) + 1}", "name": name, "ownerEmail": email}
        self.accounts.append(account)
        return {**account, "email": email}

    async def update(self, customer_id: str, *, name=None):
        self.update_calls.append({"customer_id": customer_id, "name": name})
        for account in self.accounts:
            if account["id"] == customer_id:
                account["name"] = name
        return {}


class FakeSubscriptionsAPI:
    def __init__(self, next_id: int = 555):
        self.by_account: dict[str, list[dict]] = {}
        self.next_id = next_id
        self.list_calls: list[str] = []
        self.create_calls: list[dict] = []
        self.update_calls: list[dict] = []

    async def list(self, customer_id: str):
        self.list_calls.append(customer_id)
        await asyncio.sleep(0)
        return [dict(s) for s in self.by_account.get(customer_id, [])]

    async def create(self, customer_id: str, plan_id):
        self.create_calls.append({"customer_id": customer_id, "plan_id": int(plan_id)})
        await asyncio.sleep(0)
        sub = {"id": self.next_id, "planId": int(plan_id)}
        self.next_id += 1
        self.by_account.setdefault(customer_id, []).append(sub)
        return {"id": sub["id"]}

    async def update(self, customer_id: str, subscription_id, plan_id):
        self.update_calls.append(
            {"customer_id": customer_id, "subscription_id": str(subscription_id), "plan_id": int(plan_id)}
        )
        for sub in self.by_account.get(customer_id, []):
            if str(sub["id"]) == str(subscription_id):
                sub["planId"] = int(plan_id)
        return {}

    def delete_remote(self, customer_id: str, subscription_id) -> None:
        self.by_account[customer_id] = [
            s for s in self.by_account.get(customer_id, []) if str(s["id"]) != str(subscription_id)
        ]


class FakeWebsitesAPI:
    def __init__(self):
        self.by_account: dict[str, list[dict]] = {}
        self.get_calls: list[str] = []
        self.list_calls: list[str] = []
        self.create_calls: list[dict] = []
        self.add_domain_calls: list[dict] = []
        self.update_calls: list[dict] = []
        self.reject_alias = False
        self.reject_update = False
        # Site inserted by "someone else" when create is called
        self.conflict_with: dict | None = None
        self._seq = 0

    def add_remote(self, account_id: str, domain: str, site_id: str | None = None) -> dict:
        self._seq += 1
        site = {"id": site_id or f"5e1f0000-0000-4000-8000-{self._seq:012d}", "domain": domain}
        self.by_account.setdefault(account_id, []).append(site)
        return site

    async def get(self, website_id: str, org_id=None):
        self.get_calls.append(website_id)
        for site in self.by_account.get(org_id, []):
            if site["id"] == website_id:
                return dict(site)
        raise RemoteNotFound(f"Website {website_id} not found", 404)

    async def list(self, org_id=None):
        self.list_calls.append(org_id)
        return [dict(s) for s in self.by_account.get(org_id, [])]

    async def create(self, org_id, *, domain, subscription_id=None):
        self.create_calls.append({"org_id": org_id, "domain": domain, "subscription_id": subscription_id})
        if self.conflict_with is not None:
            self.by_account.setdefault(org_id, []).append(self.conflict_with)
            raise RemoteConflict("Website already exists", 409)
        site = self.add_remote(org_id, domain)
        return {"id": site["id"]}

    async def add_domain(self, website_id, domain, org_id=None):
        self.add_domain_calls.append({"website_id": website_id, "domain": domain, "org_id": org_id})
        if self.reject_alias:
            raise RemoteConflict("Domain already exist on another website", 400)
        return {"id": "dom-1"}

    async def update(self, website_id, params, org_id=None):
        self.update_calls.append({"website_id": website_id, "params": params, "org_id": org_id})
        if self.reject_update:
            raise ControlPanelError("Domain is invalid", 422)
        for site in self.by_account.get(org_id, []):
            if site["id"] == website_id:
                site.update(params)
        return {}


class FakePlansAPI:
    def __init__(self, plans: list[dict] | None = None):
        self.plans = list(plans or [])

    async def list(self):
        return list(self.plans)


class FakePanel:
    def __init__(self):
        self.customers = FakeCustomersAPI()
        self.subscriptions = FakeSubscriptionsAPI()
        self.websites = FakeWebsitesAPI()
        self.plans = FakePlansAPI([{"id": 101, "name": "Starter"}, {"id": 202, "name": "Business"}])
        self.health = {"status": "healthy", "version": "12.0.0"}

    async def health_check(self):
        return dict(self.health)

    @property
    def call_count(self) -> int:
        c, s, w = self.customers, self.subscriptions, self.websites
        return sum(
            len(calls)
            for calls in (
                c.find_calls, c.create_calls, c.update_calls,
                s.list_calls, s.create_calls, s.update_calls,
                w.get_calls, w.list_calls, w.create_calls, w.add_domain_calls, w.update_calls,
            )
        )


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def panel():
    return FakePanel()


@pytest_asyncio.fixture
async def control_panel(db: AsyncSession):
    cp = ControlPanel(
        id=uuid.uuid4(),
        type=ControlPanelType.ENHANCE,
        name="Enhance",
        enabled=True,
        config={"apiKey": "test-key", "baseUrl": "https://panel.test", "orgId": "reseller-org"},
    )
    db.add(cp)
    await db.commit()
    await db.refresh(cp)
    return cp


@pytest_asyncio.fixture
async def customer(db: AsyncSession):
    alice = Customer(
        id=uuid.uuid4(),
        name="Alice",
        email="alice@example.com",
        phone="+15550100",
        company="Alice Co",
    )
    db.add(alice)
    await db.commit()
    await db.refresh(alice)
    return alice


@pytest_asyncio.fixture
async def starter_package(db: AsyncSession):
    pkg = HostingPackage(id=uuid.uuid4(), plan_name="Starter", price=Decimal("5.00"))
    db.add(pkg)
    await db.commit()
    await db.refresh(pkg)
    return pkg


@pytest_asyncio.fixture
async def business_package(db: AsyncSession):
    pkg = HostingPackage(id=uuid.uuid4(), plan_name="Business", price=Decimal("15.00"))
    db.add(pkg)
    await db.commit()
    await db.refresh(pkg)
    return pkg


@pytest_asyncio.fixture
async def vps_package(db: AsyncSession):
    pkg = VpsPackage(id=uuid.uuid4(), plan_name="VPS 2GB", cpu=1, ram_gb=2)
    db.add(pkg)
    await db.commit()
    await db.refresh(pkg)
    return pkg


@pytest_asyncio.fixture
async def starter_mapping(db: AsyncSession, control_panel, starter_package):
    mapping = PlanMapping(
        control_panel_id=control_panel.id,
        local_plan_type=LocalPlanType.HOSTING,
        local_plan_id=starter_package.id,
        external_plan_id="101",
        external_plan_name="Starter",
    )
    db.add(mapping)
    await db.commit()
    await db.refresh(mapping)
    return mapping


@pytest_asyncio.fixture
async def business_mapping(db: AsyncSession, control_panel, business_package):
    mapping = PlanMapping(
        control_panel_id=control_panel.id,
        local_plan_type=LocalPlanType.HOSTING,
        local_plan_id=business_package.id,
        external_plan_id="202",
        external_plan_name="Business",
    )
    db.add(mapping)
    await db.commit()
    await db.refresh(mapping)
    return mapping


@pytest_asyncio.fixture
async def hosting(db: AsyncSession, customer, starter_package):
    record = Hosting(
        id=uuid.uuid4(),
        customer_id=customer.id,
        hosting_package_id=starter_package.id,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


@pytest_asyncio.fixture
async def domain(db: AsyncSession, customer):
    record = Domain(id=uuid.uuid4(), domain_name="example.com", customer_id=customer.id)
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


@pytest_asyncio.fixture
async def website(db: AsyncSession, customer, domain, hosting):
    record = Website(
        id=uuid.uuid4(),
        name="Alice's site",
        customer_id=customer.id,
        domain_id=domain.id,
        hosting_id=hosting.id,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


@pytest_asyncio.fixture
async def client(engine, panel):
    """HTTPX async test client against the back office app."""
    from backoffice.app import app

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_panel():
        return panel

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_panel] = override_get_panel

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
