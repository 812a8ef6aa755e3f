"""Local reconciliation errors.

Remote failures are raised by the client as ``panelkit.api.errors`` types;
these cover problems on the back office side.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for local sync failures."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(SyncError):
    """Control panel or mapping configuration is missing or invalid."""

    status_code = 400


class MappingNotFound(ConfigurationError):
    """No active plan mapping exists for a local package."""

    status_code = 404


class NotFoundError(SyncError):
    """A local entity referenced by the sync does not exist."""

    status_code = 404
