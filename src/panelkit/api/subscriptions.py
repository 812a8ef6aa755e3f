"""Subscriptions API - plan subscriptions of customer orgs."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .errors import RemoteNotFound
from .payloads import extract_items, parse_int

if TYPE_CHECKING:
    from .client import EnhanceClient


class SubscriptionsAPI:
    """Subscriptions API for Enhance.

    Subscription and plan ids are integers on the wire; string ids are
    parsed before sending.

    Usage:
        async with EnhanceClient(config) as panel:
            subs = await panel.subscriptions.list(customer_org_id)
            sub = await panel.subscriptions.create(customer_org_id, plan_id=101)
            await panel.subscriptions.update(customer_org_id, sub["id"], plan_id=202)
    """

    def __init__(self, client: "EnhanceClient"):
        self._client = client

    def _customer_path(self, customer_id: str) -> str:
        return f"{self._client.org_prefix}/customers/{customer_id}/subscriptions"

    async def list(self, customer_id: str) -> list[dict[str, Any]]:
        """List subscriptions of a customer org.

        Returns:
            [{"id": 555, "planId": 101, ...}, ...]
        """
        data = await self._client._get(self._customer_path(customer_id))
        return extract_items(data, "subscriptions")

    async def get(self, customer_id: str, subscription_id: int | str) -> dict[str, Any]:
        """Get one subscription.

        The single-entity endpoint has been seen to 404 for live
        subscriptions; prefer ``list`` for existence checks.
        """
        sid = parse_int(subscription_id, "subscriptionId")
        return await self._client._get(f"{self._customer_path(customer_id)}/{sid}")

    async def create(self, customer_id: str, plan_id: int | str) -> dict[str, Any]:
        """Subscribe a customer org to a plan.

        Returns:
            {"id": 555}
        """
        pid = parse_int(plan_id, "planId")
        data = await self._client._post(self._customer_path(customer_id), {"planId": pid})
        return data if isinstance(data, dict) else {}

    async def update(
        self, customer_id: str, subscription_id: int | str, plan_id: int | str
    ) -> dict[str, Any]:
        """Move a subscription to another plan.

        The subscription belongs to the customer org, so the customer org path
        is tried first; some deployments only expose it under the reseller
        org, which is tried on 404.
        """
        pid = parse_int(plan_id, "planId")
        sid = parse_int(subscription_id, "subscriptionId")
        body = {"planId": pid}

        try:
            data = await self._client._patch(f"/orgs/{customer_id}/subscriptions/{sid}", body)
        except RemoteNotFound:
            data = await self._client._patch(f"{self._client.org_prefix}/subscriptions/{sid}", body)
        return data if isinstance(data, dict) else {}
