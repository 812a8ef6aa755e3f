"""Enhance control panel API client - typed async wrapper over the REST API.

Endpoints follow the Enhance API reference (https://apidocs.enhance.com).
Every call is scoped to the reseller organization (``org_id``); customer
accounts are themselves organizations nested under it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import httpx

from .errors import ControlPanelError, RemoteTransientError, error_from_response

if TYPE_CHECKING:
    from .customers import CustomersAPI
    from .subscriptions import SubscriptionsAPI
    from .websites import WebsitesAPI
    from .plans import PlansAPI

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.enhance.com"
DEFAULT_TIMEOUT = 30.0


@dataclass
class EnhanceConfig:
    """Enhance API configuration."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    org_id: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "EnhanceConfig":
        """Load config from ENHANCE_* environment variables."""
        api_key = os.environ.get("ENHANCE_API_KEY", "").strip()
        if not api_key:
            raise ValueError("ENHANCE_API_KEY is not set")
        return cls(
            api_key=api_key,
            base_url=os.environ.get("ENHANCE_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            org_id=os.environ.get("ENHANCE_ORG_ID", "").strip() or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Export config as dictionary (API key masked)."""
        return {
            "api_key": (self.api_key[:6] + "...") if self.api_key else None,
            "base_url": self.base_url,
            "org_id": self.org_id,
            "timeout": self.timeout,
        }


class EnhanceClient:
    """Enhance control panel client with domain-specific sub-APIs.

    Usage:
        async with EnhanceClient(EnhanceConfig(api_key=..., org_id=...)) as panel:
            account = await panel.customers.find_by_email("alice@example.com")
            subs = await panel.subscriptions.list(account["id"])
            sites = await panel.websites.list(account["id"])
    """

    def __init__(self, config: EnhanceConfig):
        self.config = config
        self._client: httpx.AsyncClient | None = None

        # Domain APIs (initialized on enter)
        self._customers: CustomersAPI | None = None
        self._subscriptions: SubscriptionsAPI | None = None
        self._websites: WebsitesAPI | None = None
        self._plans: PlansAPI | None = None

        if not config.org_id:
            log.warning("Enhance org_id is not set; org-scoped endpoints will fail")

    async def __aenter__(self) -> "EnhanceClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            timeout=self.config.timeout,
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        self._init_apis()
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _init_apis(self) -> None:
        from .customers import CustomersAPI
        from .subscriptions import SubscriptionsAPI
        from .websites import WebsitesAPI
        from .plans import PlansAPI

        self._customers = CustomersAPI(self)
        self._subscriptions = SubscriptionsAPI(self)
        self._websites = WebsitesAPI(self)
        self._plans = PlansAPI(self)

    @property
    def org_id(self) -> str:
        """Reseller org id or raise error."""
        if not self.config.org_id:
            raise ControlPanelError("org_id is required for this operation")
        return self.config.org_id

    @property
    def org_prefix(self) -> str:
        return f"/orgs/{self.org_id}"

    # Domain API properties
    @property
    def customers(self) -> "CustomersAPI":
        """Customer accounts (orgs), logins and memberships."""
        if not self._customers:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._customers

    @property
    def subscriptions(self) -> "SubscriptionsAPI":
        """Customer plan subscriptions."""
        if not self._subscriptions:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._subscriptions

    @property
    def websites(self) -> "WebsitesAPI":
        """Websites and their domains."""
        if not self._websites:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._websites

    @property
    def plans(self) -> "PlansAPI":
        """Hosting plans offered by the reseller org."""
        if not self._plans:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._plans

    # HTTP methods
    async def _send(self, method: str, endpoint: str, **kwargs) -> Any:
        """Send a request and translate failures into ControlPanelError subclasses."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        sender = getattr(self._client, method)
        try:
            resp = await sender(endpoint, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteTransientError(f"Request timeout: {method.upper()} {endpoint}") from exc
        except httpx.TransportError as exc:
            raise RemoteTransientError(f"Connection error: {exc}") from exc

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            err = error_from_response(exc.response)
            log.debug("Enhance %s %s failed: %s", method.upper(), endpoint, err)
            raise err from exc

        if resp.status_code == 204:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    async def _get(self, endpoint: str, **params) -> Any:
        """Make GET request."""
        return await self._send("get", endpoint, params=params or None)

    async def _post(self, endpoint: str, data: dict | None = None, **params) -> Any:
        """Make POST request."""
        return await self._send("post", endpoint, json=data, params=params or None)

    async def _put(self, endpoint: str, data: dict | None = None) -> Any:
        """Make PUT request."""
        return await self._send("put", endpoint, json=data)

    async def _patch(self, endpoint: str, data: dict | None = None) -> Any:
        """Make PATCH request."""
        return await self._send("patch", endpoint, json=data)

    async def _delete(self, endpoint: str) -> Any:
        """Make DELETE request."""
        return await self._send("delete", endpoint)

    # Status
    async def version(self) -> str:
        """Get the control panel API version."""
        data = await self._get("/version")
        if isinstance(data, dict):
            return str(data.get("version") or data.get("data") or "")
        return str(data)

    async def health_check(self) -> dict[str, Any]:
        """Return {"status": "healthy"|"down", ...} without raising."""
        try:
            version = await self.version()
        except ControlPanelError as exc:
            return {"status": "down", "error": str(exc), "status_code": exc.status_code}
        return {"status": "healthy", "version": version}
