"""Websites API - websites and domains of customer orgs."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .payloads import extract_items, parse_int

if TYPE_CHECKING:
    from .client import EnhanceClient


class WebsitesAPI:
    """Websites API for Enhance.

    All calls take the org that owns the website (the customer org); when it
    is omitted the reseller org is used.

    Usage:
        async with EnhanceClient(config) as panel:
            sites = await panel.websites.list(customer_org_id)
            site = await panel.websites.create(
                customer_org_id, domain="example.com", subscription_id=555,
            )
            await panel.websites.add_domain(site["id"], "www.example.com", customer_org_id)
    """

    def __init__(self, client: "EnhanceClient"):
        self._client = client

    def _path(self, org_id: str | None) -> str:
        return f"/orgs/{org_id or self._client.org_id}/websites"

    async def list(self, org_id: str | None = None) -> list[dict[str, Any]]:
        """List websites of an org.

        Returns:
            [{"id": ..., "domain": ..., "subscriptionId": ..., ...}, ...]
        """
        data = await self._client._get(self._path(org_id))
        return extract_items(data, "websites")

    async def get(self, website_id: str, org_id: str | None = None) -> dict[str, Any]:
        """Get website details. Raises RemoteNotFound when it is gone."""
        data = await self._client._get(f"{self._path(org_id)}/{website_id}")
        return data if isinstance(data, dict) else {}

    async def create(
        self,
        org_id: str | None,
        *,
        domain: str,
        subscription_id: int | str | None = None,
    ) -> dict[str, Any]:
        """Create a website bound to ``domain``.

        Returns:
            {"id": "<uuid>"}
        """
        if not domain or not domain.strip():
            raise ValueError("domain is required")

        body: dict[str, Any] = {"domain": domain.strip()}
        if subscription_id is not None and subscription_id != "":
            body["subscriptionId"] = parse_int(subscription_id, "subscriptionId")

        data = await self._client._post(self._path(org_id), body)
        return data if isinstance(data, dict) else {}

    async def update(
        self, website_id: str, params: dict[str, Any], org_id: str | None = None
    ) -> dict[str, Any]:
        """Update website fields (e.g. ``{"domain": "new.example.com"}``)."""
        data = await self._client._put(f"{self._path(org_id)}/{website_id}", params)
        return data if isinstance(data, dict) else {}

    async def add_domain(
        self, website_id: str, domain: str, org_id: str | None = None
    ) -> dict[str, Any]:
        """Attach an additional domain (alias) to a website."""
        data = await self._client._post(
            f"{self._path(org_id)}/{website_id}/domains", {"domain": domain.strip()}
        )
        return data if isinstance(data, dict) else {}
