"""Local customer -> remote control panel account."""

from __future__ import annotations

import logging

from panelkit.api.errors import ControlPanelError
from panelkit.api.payloads import extract_id

from ..models.customer import Customer
from ..schemas.sync import CustomerSyncResult
from .errors import ConfigurationError

log = logging.getLogger(__name__)


async def ensure_remote_account(
    panel,
    customer: Customer,
    *,
    known_account_id: str | None = None,
) -> CustomerSyncResult:
    """Find or create the remote account for ``customer``.

    A ``known_account_id`` (already stored on a service record) is trusted
    as-is. Otherwise the account is looked up by email and created when
    missing. Nothing is written locally; callers persist the id together
    with the rest of their sync state.
    """
    if known_account_id:
        return CustomerSyncResult(external_account_id=known_account_id, action="existing")

    email = (customer.email or "").strip()
    if not email:
        raise ConfigurationError(f"Customer {customer.id} has no email; cannot match a remote account")

    try:
        account = await panel.customers.find_by_email(email)
        if account is not None:
            account_id = extract_id(account)
            if not account_id:
                raise ControlPanelError(f"Remote account for {email} has no id")

            local_name = (customer.name or "").strip()
            remote_name = str(account.get("name") or "").strip()
            if local_name and remote_name != local_name:
                await panel.customers.update(account_id, name=local_name)
                log.info("Renamed remote account %s to %r", account_id, local_name)
                return CustomerSyncResult(external_account_id=account_id, action="updated")

            return CustomerSyncResult(external_account_id=account_id, action="found")

        created = await panel.customers.create_account(
            name=customer.name,
            email=email,
            phone=customer.phone,
            company=customer.company,
        )
    except ValueError as exc:
        # Malformed remote payload (missing id and the like)
        raise ControlPanelError(str(exc)) from exc

    account_id = extract_id(created)
    if not account_id:
        raise ControlPanelError(f"Remote account for {email} created but no id returned")
    log.info("Created remote account %s for %s", account_id, email)
    return CustomerSyncResult(external_account_id=account_id, action="created")
