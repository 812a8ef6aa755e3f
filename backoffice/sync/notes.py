"""[SYNC] note markers appended to website notes."""

from __future__ import annotations

import re
from datetime import datetime, timezone

SYNC_PREFIX = "[SYNC]"

_WEBSITE_ID_RE = re.compile(r"External Website ID:\s*([a-f0-9-]+)", re.IGNORECASE)


def format_sync_note(
    website_id: str,
    account_id: str,
    *,
    domain: str | None = None,
    at: datetime | None = None,
) -> str:
    """Build the marker line. Passing ``domain`` records a domain change."""
    stamp = (at or datetime.now(timezone.utc)).isoformat()
    if domain:
        return (
            f"{SYNC_PREFIX} External Website ID: {website_id}, "
            f"Customer External ID: {account_id}, Domain: {domain}, Updated at: {stamp}"
        )
    return (
        f"{SYNC_PREFIX} External Website ID: {website_id}, "
        f"Customer External ID: {account_id}, Synced at: {stamp}"
    )


def parse_external_website_id(notes: str | None) -> str | None:
    """Return the website id from the most recent marker in ``notes``."""
    if not notes:
        return None
    matches = _WEBSITE_ID_RE.findall(notes)
    return matches[-1] if matches else None


def append_note(existing: str | None, line: str) -> str:
    if not existing or not existing.strip():
        return line
    return f"{existing.rstrip()}\n{line}"
