"""Shared test fixtures for the panelkit client test suite."""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

# Sample IDs used across tests
SAMPLE_ORG_ID = "reseller-org-0001"
SAMPLE_CUSTOMER_ID = "cust-org-0042"
SAMPLE_LOGIN_ID = "login-0007"
SAMPLE_WEBSITE_ID = "5e1f0000-0000-4000-8000-000000000001"
SAMPLE_SUBSCRIPTION_ID = 555


# ============================================================================
# Mock Response Data
# ============================================================================

MOCK_CUSTOMERS = {
    "items": [
        {"id": "cust-org-0001", "name": "Bob", "ownerEmail": "bob@example.com"},
        {"id": SAMPLE_CUSTOMER_ID, "name": "Alice", "login": {"email": "Alice@Example.com"}},
    ],
    "total": 2,
}

MOCK_SUBSCRIPTIONS = {
    "items": [
        {"id": SAMPLE_SUBSCRIPTION_ID, "planId": 101, "status": "active"},
    ],
}

MOCK_WEBSITES = {
    "items": [
        {"id": SAMPLE_WEBSITE_ID, "domain": {"domain": "example.com"}, "subscriptionId": 555},
    ],
}

MOCK_PLANS = {
    "items": [
        {"id": 101, "name": "Starter"},
        {"id": 202, "name": "Business"},
    ],
}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def mock_config():
    """Create a test EnhanceConfig."""
    from panelkit.api.client import EnhanceConfig
    return EnhanceConfig(
        api_key="test_key_abc123",
        base_url="https://panel.test",
        org_id=SAMPLE_ORG_ID,
    )


@pytest.fixture
def mock_response():
    """Factory fixture to create real httpx responses."""
    def _create_response(data: Any = None, status_code: int = 200, method: str = "GET"):
        request = httpx.Request(method, "https://panel.test/api")
        if data is None:
            return httpx.Response(status_code, request=request)
        return httpx.Response(status_code, json=data, request=request)
    return _create_response


@pytest.fixture
def mock_http_client(mock_response):
    """Create a mock httpx.AsyncClient."""
    client = AsyncMock()

    # Default successful response
    client.get = AsyncMock(return_value=mock_response({}))
    client.post = AsyncMock(return_value=mock_response({}))
    client.put = AsyncMock(return_value=mock_response({}))
    client.patch = AsyncMock(return_value=mock_response({}))
    client.delete = AsyncMock(return_value=mock_response(None, 204))

    return client


@pytest.fixture
def mock_panel_client(mock_config, mock_http_client):
    """Create an EnhanceClient with initialized APIs over the mock transport."""
    from panelkit.api.client import EnhanceClient

    client = EnhanceClient(mock_config)
    client._client = mock_http_client
    client._init_apis()

    return client
