from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from app.models.studio_profile import StudioStatus
from app.models.user import MembershipTier

StatusReason = Literal["admin_override", "basic_tier", "expired", "active"]
FeaturedReason = Literal["expired_featured", "still_valid"]


# Read model consumed by the decision engine

class SubscriptionSnapshot(BaseModel):
    current_period_end: Optional[datetime] = None


class AccountSnapshot(BaseModel):
    id: Optional[int] = None
    email: str
    membership_tier: MembershipTier
    subscriptions: List[SubscriptionSnapshot] = []  # Most recent first


class StudioSnapshot(BaseModel):
    id: int
    status: StudioStatus
    is_featured: bool = False
    featured_until: Optional[datetime] = None
    account: AccountSnapshot


# Decisions

class StudioStatusDecision(BaseModel):
    studio_id: int
    current_status: StudioStatus
    desired_status: StudioStatus
    reason: StatusReason


class FeaturedStatusDecision(BaseModel):
    studio_id: int
    should_unfeature: bool
    reason: FeaturedReason


class StatusUpdate(BaseModel):
    status: StudioStatus


class StudioEnforcementDecision(BaseModel):
    studio_id: int
    account_id: Optional[int] = None
    status_update: Optional[StatusUpdate] = None  # Only set when the status must change
    unfeature_update: bool = False
    trigger_downgrade: bool = False

    def needs_work(self) -> bool:
        return self.status_update is not None or self.unfeature_update or self.trigger_downgrade


# Results

class DowngradeResult(BaseModel):
    downgraded: bool
    error: Optional[str] = None


class EnforcementSummary(BaseModel):
    status_updates: int = 0
    unfeatured_updates: int = 0
    downgrades: int = 0
    failed_downgrades: int = 0
    dry_run: bool = False
