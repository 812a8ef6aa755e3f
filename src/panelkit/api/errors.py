"""Typed errors raised by the control panel client."""

from __future__ import annotations

import httpx


class ControlPanelError(Exception):
    """Base error for a failed control panel call.

    Carries the upstream HTTP status (when there was a response) so callers
    can render an actionable message.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class RemoteNotFound(ControlPanelError):
    """The remote entity does not exist (or no longer exists)."""


class RemoteConflict(ControlPanelError):
    """The remote system reports the entity already exists."""


class RemoteTransientError(ControlPanelError):
    """Timeout, connection failure, rate limit or 5xx. Safe to retry."""


_CONFLICT_MARKERS = ("already exists", "already exist", "duplicate")


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()

    text = resp.text.strip() if resp.text else ""
    return text[:300] or f"HTTP {resp.status_code}: {resp.reason_phrase}"


def error_from_response(resp: httpx.Response) -> ControlPanelError:
    """Translate an error response into the matching ControlPanelError."""
    status = resp.status_code
    message = _error_message(resp)

    if status == 404:
        return RemoteNotFound(message, status)
    if status == 409:
        return RemoteConflict(message, status)
    if 400 <= status < 500 and any(m in message.lower() for m in _CONFLICT_MARKERS):
        return RemoteConflict(message, status)
    if status == 429 or status >= 500:
        return RemoteTransientError(message, status)
    return ControlPanelError(message, status)
