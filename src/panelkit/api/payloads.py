"""Helpers for the loosely-shaped JSON payloads returned by control panels."""

from __future__ import annotations

from typing import Any


def extract_items(data: Any, *keys: str) -> list[dict]:
    """Return the list of dict items in a list response.

    Handles a bare list, ``{"items": [...]}``, ``{"data": [...]}`` and any
    extra wrapper keys passed in ``keys``.
    """
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if not isinstance(data, dict):
        return []

    for key in (*keys, "items", "data"):
        raw = data.get(key)
        if isinstance(raw, list):
            return [item for item in raw if isinstance(item, dict)]
        if isinstance(raw, dict):
            nested = extract_items(raw, *keys)
            if nested:
                return nested
    return []


def extract_id(payload: Any) -> str:
    """Return the id of a payload as a string, or "" when missing."""
    if not isinstance(payload, dict):
        return ""
    for key in ("id", "uuid", "_id"):
        value = payload.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def parse_int(value: Any, field: str = "value") -> int:
    """Parse an integer id sent as int or numeric string."""
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a valid integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            pass
    raise ValueError(f"{field} must be a valid integer, got {value!r}")


def normalize_email(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def normalize_domain(value: Any) -> str:
    """Lower-case, trimmed domain for comparisons."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower().rstrip(".")


def website_domain(website: Any) -> str:
    """Best-effort primary domain of a website payload.

    ``domain``/``primaryDomain`` may be a string, an object with a
    ``domain``/``name`` key, or a list of such objects.
    """
    if not isinstance(website, dict):
        return ""

    value = website.get("domain") or website.get("primaryDomain")
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("domain") or value.get("name") or ""
    if value is None:
        return ""
    return str(value)


def account_emails(account: Any) -> set[str]:
    """All normalized emails that identify a customer account payload."""
    if not isinstance(account, dict):
        return set()

    emails = {
        normalize_email(account.get("ownerEmail")),
        normalize_email(account.get("email")),
    }
    login = account.get("login")
    if isinstance(login, dict):
        emails.add(normalize_email(login.get("email")))
    emails.discard("")
    return emails
