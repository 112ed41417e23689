"""
Apply enforcement decisions to the database.

Order of work:
1. Downgrades, one account at a time. A failure for one account never blocks
   or rolls back another.
2. Studios whose owner was just downgraded are set ACTIVE in one bulk update.
   A studio is only activated here if its own downgrade committed.
3. Remaining status changes, one row and one commit each.
4. Expired featured promotions are cleared in one bulk update.

Every phase commits on its own and a failed phase is logged and skipped, so
nothing escapes apply_enforcement_decisions.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from app.core.membership_policy import EnforcementPolicy
from app.models.studio_profile import StudioProfile, StudioStatus
from app.schemas.enforcement import DowngradeResult, EnforcementSummary, StudioEnforcementDecision
from app.services.membership_downgrade import NotificationSender, perform_downgrade

logger = logging.getLogger(__name__)

# (user_id, db) -> result; perform_downgrade bound to a policy/notifier
Downgrader = Callable[[int, Session], DowngradeResult]


def _bulk_activate(studio_ids: List[int], db: Session, now: datetime) -> int:
    if not studio_ids:
        return 0
    try:
        db.query(StudioProfile).filter(StudioProfile.id.in_(studio_ids)).update(
            {"status": StudioStatus.ACTIVE, "updated_at": now},
            synchronize_session=False
        )
        db.commit()
        return len(studio_ids)
    except Exception:
        db.rollback()
        logger.exception("Failed to activate %d downgraded studios", len(studio_ids))
        return 0


def _apply_status_updates(decisions: List[StudioEnforcementDecision], db: Session, now: datetime) -> int:
    # One commit per row: a bad row must not undo the others
    written = 0
    for decision in decisions:
        try:
            db.query(StudioProfile).filter(StudioProfile.id == decision.studio_id).update(
                {"status": decision.status_update.status, "updated_at": now},
                synchronize_session=False
            )
            db.commit()
            written += 1
        except Exception:
            db.rollback()
            logger.exception(
                "Failed to set studio %s to %s",
                decision.studio_id, decision.status_update.status.value
            )
    return written


def _bulk_unfeature(studio_ids: List[int], db: Session, now: datetime) -> int:
    if not studio_ids:
        return 0
    try:
        db.query(StudioProfile).filter(StudioProfile.id.in_(studio_ids)).update(
            {"is_featured": False, "updated_at": now},
            synchronize_session=False
        )
        db.commit()
        return len(studio_ids)
    except Exception:
        db.rollback()
        logger.exception("Failed to unfeature %d studios", len(studio_ids))
        return 0


def partition_decisions(
    decisions: Sequence[StudioEnforcementDecision],
) -> Tuple[List[StudioEnforcementDecision], List[StudioEnforcementDecision], List[int]]:
    """Split decisions into (downgrades, status changes not tied to a downgrade, studio ids to unfeature)."""
    downgrade_decisions = [d for d in decisions if d.trigger_downgrade and d.account_id is not None]
    other_status_updates = [
        d for d in decisions
        if d.status_update is not None and not (d.trigger_downgrade and d.account_id is not None)
    ]
    unfeature_ids = [d.studio_id for d in decisions if d.unfeature_update]
    return downgrade_decisions, other_status_updates, unfeature_ids


def apply_enforcement_decisions(
    decisions: Sequence[StudioEnforcementDecision],
    db: Session,
    policy: EnforcementPolicy,
    notify: Optional[NotificationSender] = None,
    now: Optional[datetime] = None,
    downgrade: Optional[Downgrader] = None,
) -> EnforcementSummary:
    """
    Apply decisions from compute_enforcement_decisions.

    status_updates counts studios activated after a downgrade plus other
    status changes that were written; downgrades counts committed downgrades.

    When a downgrade fails and its decision also asks for INACTIVE, that
    deactivation is still written and counted in status_updates, so the
    count can exceed (committed downgrades + status changes not tied to a
    downgrade). The listing of a failed downgrade is never activated.
    """
    if not decisions:
        return EnforcementSummary()

    now = now or datetime.utcnow()
    if downgrade is None:
        def downgrade(user_id: int, session: Session) -> DowngradeResult:
            return perform_downgrade(user_id, session, policy, notify=notify, now=now)

    downgrade_decisions, other_status_updates, unfeature_ids = partition_decisions(decisions)

    successful_downgrade_ids: List[int] = []
    failed_downgrades = 0
    for decision in downgrade_decisions:
        try:
            result = downgrade(decision.account_id, db)
        except Exception as e:
            db.rollback()
            result = DowngradeResult(downgraded=False, error=str(e) or e.__class__.__name__)

        if result.downgraded:
            successful_downgrade_ids.append(decision.studio_id)
            continue

        if not result.error:
            # Already BASIC since the snapshot was taken; the next sweep sees basic_tier
            continue

        failed_downgrades += 1
        logger.warning(
            "Downgrade failed for account %s (studio %s): %s",
            decision.account_id, decision.studio_id, result.error
        )
        # The owner is still PREMIUM and expired. Never activate; a pending
        # change here can only be -> INACTIVE, which is still applied.
        if decision.status_update is not None and decision.status_update.status == StudioStatus.INACTIVE:
            other_status_updates.append(decision)

    activated = _bulk_activate(successful_downgrade_ids, db, now)
    status_written = _apply_status_updates(other_status_updates, db, now)
    unfeatured = _bulk_unfeature(unfeature_ids, db, now)

    return EnforcementSummary(
        status_updates=activated + status_written,
        unfeatured_updates=unfeatured,
        downgrades=len(successful_downgrade_ids),
        failed_downgrades=failed_downgrades,
    )
