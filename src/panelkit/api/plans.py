"""Plans API - hosting plans of the reseller org."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .payloads import extract_items

if TYPE_CHECKING:
    from .client import EnhanceClient


class PlansAPI:
    """Plans API for Enhance (read-only).

    Used by operators to pick the external plan when creating plan mappings.
    """

    def __init__(self, client: "EnhanceClient"):
        self._client = client

    async def list(self) -> list[dict[str, Any]]:
        """List plans.

        Returns:
            [{"id": 101, "name": "Starter", ...}, ...]
        """
        data = await self._client._get(f"{self._client.org_prefix}/plans")
        return extract_items(data, "plans")

    async def get(self, plan_id: int | str) -> dict[str, Any]:
        """Get plan details."""
        data = await self._client._get(f"{self._client.org_prefix}/plans/{plan_id}")
        return data if isinstance(data, dict) else {}
