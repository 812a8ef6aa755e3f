"""Customers API - customer organizations, logins and memberships."""

from __future__ import annotations

import logging
import secrets
from typing import Any, TYPE_CHECKING

from .errors import ControlPanelError, RemoteConflict, RemoteNotFound
from .payloads import account_emails, extract_id, extract_items, normalize_email

if TYPE_CHECKING:
    from .client import EnhanceClient

log = logging.getLogger(__name__)

OWNER_ROLE = "Owner"


class CustomersAPI:
    """Customers API for Enhance.

    A customer is an organization nested under the reseller org. Email is not
    part of the org itself; it lives on the owner login, so creating an
    account is org -> login -> Owner membership.

    Usage:
        async with EnhanceClient(config) as panel:
            account = await panel.customers.find_by_email("alice@example.com")
            if account is None:
                account = await panel.customers.create_account(
                    name="Alice", email="alice@example.com",
                )
    """

    def __init__(self, client: "EnhanceClient"):
        self._client = client

    async def list(self) -> list[dict[str, Any]]:
        """List all customer orgs of the reseller org.

        Returns:
            [{"id": ..., "name": ..., "ownerEmail": ..., ...}, ...]
        """
        data = await self._client._get(f"{self._client.org_prefix}/customers")
        return extract_items(data, "customers")

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        """Find a customer org by owner/login email (case-insensitive).

        The API has no email filter, so this lists and matches locally.
        """
        wanted = normalize_email(email)
        if not wanted:
            raise ValueError("email is required")

        for account in await self.list():
            if wanted in account_emails(account):
                return account
        return None

    async def get(self, customer_id: str) -> dict[str, Any]:
        """Get a customer org by id.

        There is no single-customer endpoint; list and match.
        """
        wanted = str(customer_id).strip()
        for account in await self.list():
            if extract_id(account) == wanted:
                return account
        raise RemoteNotFound(f"Customer not found with ID: {customer_id}", 404)

    async def create(self, name: str) -> str:
        """Create a customer org. Returns the new org id."""
        data = await self._client._post(
            f"{self._client.org_prefix}/customers", {"name": name}
        )
        org_id = extract_id(data)
        if not org_id:
            raise ValueError("Customer created but no id returned")
        return org_id

    async def update(self, customer_id: str, *, name: str | None = None) -> dict[str, Any]:
        """Update a customer org.

        Only the org name is writable here; email/phone/company live on
        logins and are not part of the org update schema.
        """
        body: dict[str, Any] = {}
        if name:
            body["name"] = name
        return await self._client._patch(f"/orgs/{customer_id}", body)

    async def list_logins(self, org_id: str | None = None) -> list[dict[str, Any]]:
        """List logins visible in an org realm (defaults to the reseller org)."""
        oid = org_id or self._client.org_id
        data = await self._client._get(f"/orgs/{oid}/logins")
        return extract_items(data, "logins")

    async def create_login(
        self,
        customer_org_id: str,
        *,
        email: str,
        name: str,
        password: str | None = None,
    ) -> str:
        """Create (or reuse) a login for the customer org. Returns the login id.

        Logins are unique per realm: when the email is already registered the
        existing login is looked up in the reseller realm and reused.
        """
        body = {
            "email": email,
            "name": name,
            "password": password or secrets.token_urlsafe(18),
        }
        try:
            data = await self._client._post("/logins", body, orgId=customer_org_id)
        except RemoteConflict:
            wanted = normalize_email(email)
            for login in await self.list_logins():
                login_email = normalize_email(login.get("email") or login.get("emailAddress"))
                if login_email == wanted and extract_id(login):
                    return extract_id(login)
            raise

        login_id = extract_id(data)
        if not login_id:
            raise ValueError("Login created but no id returned")
        return login_id

    async def add_member(
        self, customer_org_id: str, login_id: str, roles: list[str] | None = None
    ) -> str:
        """Attach a login to the customer org. Returns the member id."""
        data = await self._client._post(
            f"/orgs/{customer_org_id}/members",
            {"loginId": login_id, "roles": roles or [OWNER_ROLE]},
        )
        return extract_id(data)

    async def create_account(
        self,
        *,
        name: str,
        email: str,
        phone: str | None = None,
        company: str | None = None,
    ) -> dict[str, Any]:
        """Create a customer org plus its Owner login.

        The org exists once the first call succeeds, so a failing login step
        is logged and the org is still returned. ``phone``/``company`` are not
        supported by the org schema and are only echoed back.
        """
        org_id = await self.create(name)

        login_id = None
        try:
            login_id = await self.create_login(org_id, email=email, name=name)
            await self.add_member(org_id, login_id)
        except (ControlPanelError, ValueError) as exc:
            log.error("Customer org %s created but owner login failed: %s", org_id, exc)

        return {
            "id": org_id,
            "name": name,
            "email": email,
            "phone": phone,
            "company": company,
            "loginId": login_id,
        }
