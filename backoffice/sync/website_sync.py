"""Website record -> remote website bound to the right domain."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from panelkit.api.errors import ControlPanelError, RemoteConflict, RemoteNotFound, RemoteTransientError
from panelkit.api.payloads import extract_id, normalize_domain, website_domain

from ..models.website import Website
from ..schemas.sync import WebsiteSyncResult
from .errors import ConfigurationError
from .notes import append_note, format_sync_note, parse_external_website_id
from .state import commit_sync_state, mark_synced, utcnow

log = logging.getLogger(__name__)


def _match_domain(websites: list[dict[str, Any]], wanted: str) -> str | None:
    for site in websites:
        if normalize_domain(website_domain(site)) == wanted:
            site_id = extract_id(site)
            if site_id:
                return site_id
    return None


def recorded_website_id(website: Website) -> str | None:
    """Remote id stored on the row, or parsed from an older [SYNC] note."""
    if website.external_website_id:
        return website.external_website_id
    return parse_external_website_id(website.notes)


async def _rebind_domain(
    panel, website_id: str, domain: str, account_id: str, warnings: list[str]
) -> bool:
    """Point an existing remote website at ``domain``.

    Tries an alias first and falls back to replacing the primary domain.
    Rejections end up in ``warnings``; transient failures propagate.
    """
    try:
        await panel.websites.add_domain(website_id, domain, account_id)
        return True
    except RemoteTransientError:
        raise
    except ControlPanelError as exc:
        log.info("Alias %s rejected for website %s (%s); updating primary domain", domain, website_id, exc)

    try:
        await panel.websites.update(website_id, {"domain": domain}, account_id)
        return True
    except RemoteTransientError:
        raise
    except ControlPanelError as exc:
        log.warning("Could not move website %s to %s: %s", website_id, domain, exc)
        warnings.append(f"Website {website_id} exists but its domain could not be changed to {domain}: {exc}")
        return False


async def ensure_website(
    db: AsyncSession,
    panel,
    website: Website,
    account_id: str,
    domain_name: str,
    *,
    subscription_id: str | None = None,
    control_panel_id: uuid.UUID | None = None,
) -> WebsiteSyncResult:
    """Find, adopt or create the remote website for ``website``.

    1. A recorded remote id is fetched directly; a domain mismatch is fixed
       in place. A 404 falls through to discovery.
    2. The account's websites are listed and matched by domain.
    3. A new website is created; on a conflict the list is searched once more.
    """
    domain = (domain_name or "").strip()
    wanted = normalize_domain(domain)
    if not wanted:
        raise ConfigurationError(f"Website {website.name!r} has no domain")

    warnings: list[str] = []
    recorded = recorded_website_id(website)

    if recorded:
        try:
            remote = await panel.websites.get(recorded, account_id)
        except RemoteNotFound:
            log.info("Website %s is gone remotely; rediscovering by domain", recorded)
            remote = None

        if remote:
            if normalize_domain(website_domain(remote)) == wanted:
                return await _finish(
                    db, website, recorded, account_id, control_panel_id,
                    already_existed=True, domain=None, warnings=warnings,
                    note=website.external_website_id != recorded,
                )
            updated = await _rebind_domain(panel, recorded, domain, account_id, warnings)
            return await _finish(
                db, website, recorded, account_id, control_panel_id,
                already_existed=True, domain=domain if updated else None, warnings=warnings,
            )

    existing_id = _match_domain(await panel.websites.list(account_id), wanted)
    if existing_id:
        log.info("Adopting existing website %s for %s", existing_id, wanted)
        return await _finish(
            db, website, existing_id, account_id, control_panel_id,
            already_existed=True, domain=None, warnings=warnings,
        )

    try:
        created = await panel.websites.create(
            account_id, domain=domain, subscription_id=subscription_id
        )
    except RemoteConflict:
        existing_id = _match_domain(await panel.websites.list(account_id), wanted)
        if not existing_id:
            raise
        log.info("Website for %s appeared concurrently; adopting %s", wanted, existing_id)
        return await _finish(
            db, website, existing_id, account_id, control_panel_id,
            already_existed=True, domain=None, warnings=warnings,
        )

    website_id = extract_id(created)
    if not website_id:
        raise ControlPanelError(f"Website for {domain} created but no id returned")
    log.info("Created website %s for %s", website_id, domain)
    return await _finish(
        db, website, website_id, account_id, control_panel_id,
        already_existed=False, domain=None, warnings=warnings,
    )


async def _finish(
    db: AsyncSession,
    website: Website,
    website_id: str,
    account_id: str,
    control_panel_id: uuid.UUID | None,
    *,
    already_existed: bool,
    domain: str | None,
    warnings: list[str],
    note: bool = True,
) -> WebsiteSyncResult:
    now = utcnow()
    website.external_website_id = website_id
    if note:
        website.notes = append_note(
            website.notes, format_sync_note(website_id, account_id, domain=domain, at=now)
        )
    mark_synced(website, account_id=account_id, control_panel_id=control_panel_id, now=now)

    result = WebsiteSyncResult(
        external_account_id=account_id,
        external_website_id=website_id,
        already_existed=already_existed,
        domain_updated=domain is not None,
        warnings=warnings,
    )
    warning = await commit_sync_state(db, f"website {website_id}")
    if warning:
        result.local_persisted = False
        result.warnings.append(warning)
    return result
