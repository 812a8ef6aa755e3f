"""Hosting/VPS record -> exactly one remote subscription on the right plan.

State machine, evaluated in order:

1. No remembered ``subscriptionId``: create one (``created``).
2. Remembered id: list the account's subscriptions and match by id. The
   single-subscription endpoint returns spurious 404s, so it is never used
   as an existence check.
   - Not listed (deleted out-of-band): create again (``recreated``).
   - Listed on the resolved plan: nothing to do (``updated``).
   - Listed on another plan: move it (``upgrade`` / ``downgrade``).
3. Remember the subscription id, plan and sync time on the record.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from panelkit.api.errors import ControlPanelError
from panelkit.api.payloads import extract_id, parse_int

from ..models.control_panel import PlanMapping
from ..schemas.sync import SubscriptionSyncResult
from .errors import ConfigurationError
from .plan_resolver import find_mapping_for_external_plan
from .state import commit_sync_state, mark_synced, utcnow

log = logging.getLogger(__name__)


def plan_id_as_int(value: Any, what: str = "plan id") -> int:
    try:
        return parse_int(value, what)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {what}: {value!r} is not numeric") from exc


def plan_change_direction(
    current_plan_id: Any,
    new_plan_id: Any,
    *,
    current_tier: int | None = None,
    new_tier: int | None = None,
) -> str:
    """Return "upgrade" or "downgrade" for a move between two plans.

    Explicit tiers decide when both plans have one and they differ;
    otherwise the numeric plan ids are compared.
    """
    if current_tier is not None and new_tier is not None and current_tier != new_tier:
        return "upgrade" if new_tier > current_tier else "downgrade"
    current = plan_id_as_int(current_plan_id, "current plan id")
    new = plan_id_as_int(new_plan_id, "new plan id")
    return "upgrade" if new > current else "downgrade"


def _remote_plan_id(subscription: dict[str, Any]) -> Any:
    value = subscription.get("planId")
    if value is None:
        plan = subscription.get("plan")
        if isinstance(plan, dict):
            value = plan.get("id")
    return value


async def _create(panel, account_id: str, plan_id: int) -> str:
    created = await panel.subscriptions.create(account_id, plan_id)
    subscription_id = extract_id(created)
    if not subscription_id:
        raise ControlPanelError(
            f"Subscription for account {account_id} created but no id returned"
        )
    return subscription_id


async def ensure_subscription(
    db: AsyncSession,
    panel,
    record,
    account_id: str,
    mapping: PlanMapping,
) -> SubscriptionSyncResult:
    """Make the record's remote subscription exist on ``mapping``'s plan.

    ``record`` is a Hosting or Vps row loaded in ``db``; its sync state is
    updated and committed. A failed commit is reported as a warning with
    ``local_persisted=False``.
    """
    new_plan = plan_id_as_int(mapping.external_plan_id, "external plan id")
    metadata = dict(record.sync_metadata or {})
    remembered = str(metadata.get("subscriptionId") or "").strip()
    previous_id: str | None = None
    warnings: list[str] = []

    if not remembered:
        subscription_id = await _create(panel, account_id, new_plan)
        action = "created"
        log.info("Created subscription %s (plan %s) for %r", subscription_id, new_plan, record)
    else:
        subscriptions = await panel.subscriptions.list(account_id)
        current = next((s for s in subscriptions if extract_id(s) == remembered), None)

        if current is None:
            log.warning(
                "Subscription %s of %r is gone remotely; creating a new one", remembered, record
            )
            subscription_id = await _create(panel, account_id, new_plan)
            previous_id = remembered
            action = "recreated"
        else:
            subscription_id = remembered
            remote_plan = _remote_plan_id(current)
            if remote_plan is None:
                remote_plan = metadata.get("planId")

            if remote_plan is None:
                await panel.subscriptions.update(account_id, subscription_id, new_plan)
                warnings.append(
                    f"Subscription {subscription_id} reported no plan; set to plan {new_plan}"
                )
                action = "updated"
            elif plan_id_as_int(remote_plan, "remote plan id") == new_plan:
                action = "updated"
            else:
                current_mapping = await find_mapping_for_external_plan(
                    db, mapping.control_panel_id, mapping.local_plan_type, remote_plan
                )
                action = plan_change_direction(
                    remote_plan,
                    new_plan,
                    current_tier=current_mapping.tier if current_mapping else None,
                    new_tier=mapping.tier,
                )
                await panel.subscriptions.update(account_id, subscription_id, new_plan)
                log.info(
                    "Subscription %s %s: plan %s -> %s", subscription_id, action, remote_plan, new_plan
                )

    now = utcnow()
    metadata.update(
        subscriptionId=subscription_id,
        externalSubscriptionId=subscription_id,
        subscriptionSyncedAt=now.isoformat(),
        planId=str(new_plan),
    )
    if previous_id:
        metadata["previousSubscriptionId"] = previous_id
    record.sync_metadata = metadata
    mark_synced(record, account_id=account_id, control_panel_id=mapping.control_panel_id, now=now)

    result = SubscriptionSyncResult(
        external_account_id=account_id,
        subscription_id=subscription_id,
        plan_id=str(new_plan),
        action=action,
        previous_subscription_id=previous_id,
        warnings=warnings,
    )
    warning = await commit_sync_state(db, f"subscription {subscription_id}")
    if warning:
        result.local_persisted = False
        result.warnings.append(warning)
    return result
