"""
Membership enforcement decisions.

Pure functions: given a snapshot of studios with their owners' billing state
and a point in time, work out which studios need their status flipped, which
featured promotions have run out, and which owners must be downgraded to
BASIC. Nothing here touches the database; see enforcement_applier for that.

Precedence for a studio's desired status:
    admin allowlist > BASIC tier > most recent subscription's period end
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from app.core.membership_policy import EnforcementPolicy
from app.models.studio_profile import StudioStatus
from app.models.user import MembershipTier
from app.schemas.enforcement import (
    FeaturedStatusDecision,
    StatusUpdate,
    StudioEnforcementDecision,
    StudioSnapshot,
    StudioStatusDecision,
)


def _utc_naive(value: datetime) -> datetime:
    """Compare everything as naive UTC (the DB stores naive UTC timestamps)."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def compute_studio_status(studio: StudioSnapshot, now: datetime, policy: EnforcementPolicy) -> StudioStatusDecision:
    """Desired ACTIVE/INACTIVE status for a studio and the rule that decided it."""
    account = studio.account

    def decision(desired: StudioStatus, reason: str) -> StudioStatusDecision:
        return StudioStatusDecision(
            studio_id=studio.id,
            current_status=studio.status,
            desired_status=desired,
            reason=reason,
        )

    if policy.is_admin_email(account.email):
        return decision(StudioStatus.ACTIVE, "admin_override")

    if account.membership_tier == MembershipTier.BASIC:
        return decision(StudioStatus.ACTIVE, "basic_tier")

    latest = account.subscriptions[0] if account.subscriptions else None
    if latest is None or latest.current_period_end is None:
        return decision(StudioStatus.INACTIVE, "expired")

    if _utc_naive(latest.current_period_end) < _utc_naive(now):
        return decision(StudioStatus.INACTIVE, "expired")
    return decision(StudioStatus.ACTIVE, "active")


def compute_featured_status(studio: StudioSnapshot, now: datetime) -> FeaturedStatusDecision:
    if (
        studio.is_featured
        and studio.featured_until is not None
        and _utc_naive(studio.featured_until) < _utc_naive(now)
    ):
        return FeaturedStatusDecision(studio_id=studio.id, should_unfeature=True, reason="expired_featured")
    return FeaturedStatusDecision(studio_id=studio.id, should_unfeature=False, reason="still_valid")


def compute_enforcement_decisions(
    studios: Iterable[StudioSnapshot],
    now: Optional[datetime],
    policy: EnforcementPolicy,
) -> List[StudioEnforcementDecision]:
    """
    Combine status and featured decisions per studio.

    Only studios that need work are returned. A studio whose owner is
    expired always gets trigger_downgrade, even when it is already INACTIVE:
    a listing that was switched off by hand while the owner stayed PREMIUM
    still has to be reconciled.
    """
    now = now or datetime.utcnow()
    decisions: List[StudioEnforcementDecision] = []

    for studio in studios:
        status_decision = compute_studio_status(studio, now, policy)
        featured_decision = compute_featured_status(studio, now)

        decision = StudioEnforcementDecision(
            studio_id=studio.id,
            account_id=studio.account.id,
            unfeature_update=featured_decision.should_unfeature,
            trigger_downgrade=status_decision.reason == "expired",
        )
        if status_decision.desired_status != status_decision.current_status:
            decision.status_update = StatusUpdate(status=status_decision.desired_status)

        if decision.needs_work():
            decisions.append(decision)

    return decisions
