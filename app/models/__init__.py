from app.models.user import User, MembershipTier
from app.models.subscription import Subscription
from app.models.studio_profile import StudioProfile, StudioStatus, StudioType
from app.models.studio_studio_type import StudioStudioType
from app.models.user_metadata import UserMetadata

__all__ = [
    "User",
    "MembershipTier",
    "Subscription",
    "StudioProfile",
    "StudioStatus",
    "StudioType",
    "StudioStudioType",
    "UserMetadata"
]
