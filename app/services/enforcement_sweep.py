"""
One reconciliation sweep: load the studio snapshot, compute decisions, apply them.

Called by the scheduled Celery task and by scripts/run_enforcement.py.
Overlapping sweeps are not prevented here. Decisions are recomputed from
current state each run, so a second sweep converges to the same result, but
two sweeps racing on the same expired account can each send it a
confirmation email.
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.membership_policy import EnforcementPolicy
from app.models.studio_profile import StudioProfile
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.enforcement import (
    AccountSnapshot,
    EnforcementSummary,
    StudioSnapshot,
    SubscriptionSnapshot,
)
from app.services.enforcement import compute_enforcement_decisions
from app.services.enforcement_applier import apply_enforcement_decisions, partition_decisions
from app.services.membership_downgrade import NotificationSender

logger = logging.getLogger(__name__)


def load_studio_snapshots(db: Session) -> List[StudioSnapshot]:
    """Every studio with its owner's email, tier and subscriptions (most recent first)."""
    rows = db.query(StudioProfile, User).join(User, User.id == StudioProfile.user_id).all()
    if not rows:
        return []

    user_ids = [user.id for _, user in rows]
    subscriptions_by_user: Dict[int, List[SubscriptionSnapshot]] = defaultdict(list)
    subscriptions = db.query(Subscription.user_id, Subscription.current_period_end).filter(
        Subscription.user_id.in_(user_ids)
    ).order_by(
        Subscription.user_id,
        Subscription.created_at.desc(),
        Subscription.id.desc()
    ).all()
    for user_id, current_period_end in subscriptions:
        subscriptions_by_user[user_id].append(SubscriptionSnapshot(current_period_end=current_period_end))

    return [
        StudioSnapshot(
            id=studio.id,
            status=studio.status,
            is_featured=bool(studio.is_featured),
            featured_until=studio.featured_until,
            account=AccountSnapshot(
                id=user.id,
                email=user.email,
                membership_tier=user.membership_tier,
                subscriptions=subscriptions_by_user.get(user.id, []),
            ),
        )
        for studio, user in rows
    ]


def run_enforcement_sweep(
    db: Session,
    policy: EnforcementPolicy,
    now: Optional[datetime] = None,
    dry_run: bool = False,
    notify: Optional[NotificationSender] = None,
) -> EnforcementSummary:
    now = now or datetime.utcnow()
    logger.info("Starting membership enforcement sweep (now=%s, dry_run=%s)", now.isoformat(), dry_run)

    studios = load_studio_snapshots(db)
    decisions = compute_enforcement_decisions(studios, now, policy)
    # Release the read transaction before the per-account units of work
    db.rollback()

    logger.info("%d of %d studios need enforcement", len(decisions), len(studios))

    if dry_run:
        for decision in decisions:
            logger.info(
                "[dry-run] studio=%s account=%s status=%s unfeature=%s downgrade=%s",
                decision.studio_id,
                decision.account_id,
                decision.status_update.status.value if decision.status_update else "-",
                decision.unfeature_update,
                decision.trigger_downgrade,
            )
        # Would-be counts, assuming every downgrade commits
        downgrade_decisions, other_status_updates, unfeature_ids = partition_decisions(decisions)
        summary = EnforcementSummary(
            status_updates=len(downgrade_decisions) + len(other_status_updates),
            unfeatured_updates=len(unfeature_ids),
            downgrades=len(downgrade_decisions),
            dry_run=True,
        )
    else:
        summary = apply_enforcement_decisions(decisions, db, policy, notify=notify, now=now)

    logger.info(
        "Enforcement sweep complete: status_updates=%d unfeatured_updates=%d downgrades=%d failed_downgrades=%d",
        summary.status_updates,
        summary.unfeatured_updates,
        summary.downgrades,
        summary.failed_downgrades,
    )
    return summary

