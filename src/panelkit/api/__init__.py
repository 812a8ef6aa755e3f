"""Enhance control panel API client module.

Usage:
    from panelkit.api import EnhanceClient, EnhanceConfig

    config = EnhanceConfig(api_key="...", org_id="...")
    async with EnhanceClient(config) as panel:
        account = await panel.customers.find_by_email("alice@example.com")
        subs = await panel.subscriptions.list(account["id"])
        sites = await panel.websites.list(account["id"])
"""

from .client import EnhanceClient, EnhanceConfig
from .customers import CustomersAPI
from .subscriptions import SubscriptionsAPI
from .websites import WebsitesAPI
from .plans import PlansAPI
from .errors import (
    ControlPanelError,
    RemoteConflict,
    RemoteNotFound,
    RemoteTransientError,
)

__all__ = [
    "EnhanceClient",
    "EnhanceConfig",
    "CustomersAPI",
    "SubscriptionsAPI",
    "WebsitesAPI",
    "PlansAPI",
    "ControlPanelError",
    "RemoteConflict",
    "RemoteNotFound",
    "RemoteTransientError",
]
