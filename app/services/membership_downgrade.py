"""
PREMIUM -> BASIC downgrade for a single account.

The tier change and the stripping of premium-only studio features are applied
as one unit of work. The confirmation email is sent only after that commit and
is best-effort: a failed email never turns a committed downgrade into a failure.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.orm import Session

from app.core.membership_policy import DOWNGRADE_TEMPLATE_KEY, EnforcementPolicy
from app.db.unit_of_work import unit_of_work
from app.models.studio_profile import StudioProfile
from app.models.studio_studio_type import StudioStudioType
from app.models.user import MembershipTier, User
from app.models.user_metadata import UserMetadata
from app.schemas.enforcement import DowngradeResult
from app.services.membership_email import send_templated_email

logger = logging.getLogger(__name__)

# (account_id, template_key, variables) -> sent?
NotificationSender = Callable[[int, str, Mapping[str, Any]], bool]


def _strip_premium_studio_features(studio: StudioProfile, now: datetime) -> None:
    studio.show_phone = False
    studio.show_directions = False
    studio.is_verified = False
    studio.is_featured = False
    studio.is_premium = False
    studio.featured_until = None
    studio.updated_at = now


def _strip_premium_studio_types(studio_id: int, policy: EnforcementPolicy, db: Session) -> None:
    """Remove premium-only type tags, falling back to the default tag if none would remain."""
    tags = db.query(StudioStudioType).filter(StudioStudioType.studio_id == studio_id).all()
    premium_tags = [t for t in tags if t.studio_type in policy.premium_only_studio_types]
    if not premium_tags:
        return

    for tag in premium_tags:
        db.delete(tag)
    if len(premium_tags) == len(tags):
        db.add(StudioStudioType(studio_id=studio_id, studio_type=policy.default_studio_type))


def _strip_premium_metadata(user_id: int, policy: EnforcementPolicy, db: Session) -> None:
    db.query(UserMetadata).filter(
        UserMetadata.user_id == user_id,
        UserMetadata.key.in_(list(policy.premium_metadata_keys))
    ).delete(synchronize_session=False)


def perform_downgrade(
    user_id: int,
    db: Session,
    policy: EnforcementPolicy,
    notify: Optional[NotificationSender] = None,
    now: Optional[datetime] = None,
) -> DowngradeResult:
    """
    Downgrade an account to BASIC and strip premium-only studio features.

    Returns:
        DowngradeResult(downgraded=True) once the unit of work has committed.
        DowngradeResult(downgraded=False) if the account is already BASIC (no-op).
        DowngradeResult(downgraded=False, error=...) if the account is missing or
        the unit of work failed; nothing was persisted in that case.
    """
    notify = notify or send_templated_email
    now = now or datetime.utcnow()

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return DowngradeResult(downgraded=False, error="not found")

    if user.membership_tier == MembershipTier.BASIC:
        return DowngradeResult(downgraded=False)

    studio = db.query(StudioProfile).filter(StudioProfile.user_id == user_id).first()

    # Captured before commit; the ORM expires attributes afterwards
    email = user.email
    display_name = user.display_name
    studio_name = studio.name if studio else None

    try:
        with unit_of_work(db):
            user.membership_tier = MembershipTier.BASIC
            user.updated_at = now
            if studio:
                _strip_premium_studio_features(studio, now)
                _strip_premium_studio_types(studio.id, policy, db)
            _strip_premium_metadata(user_id, policy, db)
    except Exception as e:
        logger.exception("Downgrade of account %s rolled back", user_id)
        return DowngradeResult(downgraded=False, error=str(e) or e.__class__.__name__)

    logger.info("Account %s downgraded to BASIC", user_id)

    variables = {
        "email": email,
        "display_name": display_name,
        "studio_name": studio_name,
        "downgraded_at": now.isoformat(),
    }
    try:
        if not notify(user_id, DOWNGRADE_TEMPLATE_KEY, variables):
            logger.warning("Downgrade confirmation for account %s was not sent", user_id)
    except Exception as e:
        logger.warning("Downgrade confirmation for account %s failed: %s", user_id, e)

    return DowngradeResult(downgraded=True)
