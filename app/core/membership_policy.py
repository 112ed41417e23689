from typing import FrozenSet, Iterable

from pydantic import BaseModel, ConfigDict, field_validator

from app.core.config import settings
from app.models.studio_profile import StudioType

# Studio types only PREMIUM members may list under
PREMIUM_ONLY_STUDIO_TYPES: FrozenSet[StudioType] = frozenset({StudioType.VOICEOVER})

# Fallback tag so a downgraded studio is never left without a type
DEFAULT_STUDIO_TYPE: StudioType = StudioType.HOME

# user_metadata keys that only PREMIUM members may set
PREMIUM_METADATA_KEYS: FrozenSet[str] = frozenset({"custom_meta_title"})

DOWNGRADE_TEMPLATE_KEY = "downgrade-confirmation"


class EnforcementPolicy(BaseModel):
    """Policy data the reconciler is run against.

    Passed into every sweep instead of living in a module global, so tests
    and one-off scripts can use their own allowlist.
    """
    admin_emails: FrozenSet[str] = frozenset()
    premium_only_studio_types: FrozenSet[StudioType] = PREMIUM_ONLY_STUDIO_TYPES
    default_studio_type: StudioType = DEFAULT_STUDIO_TYPE
    premium_metadata_keys: FrozenSet[str] = PREMIUM_METADATA_KEYS

    model_config = ConfigDict(frozen=True)

    @field_validator("admin_emails")
    @classmethod
    def normalize_admin_emails(cls, emails: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(e.strip().lower() for e in emails if e.strip())

    @classmethod
    def with_admins(cls, emails: Iterable[str], **overrides) -> "EnforcementPolicy":
        return cls(admin_emails=frozenset(e for e in emails if e), **overrides)

    def is_admin_email(self, email: str | None) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.admin_emails


def load_policy_from_env(raw_admin_emails: str | None = None) -> EnforcementPolicy:
    """Build the policy from ADMIN_EMAILS (comma-separated)."""
    raw = settings.ADMIN_EMAILS if raw_admin_emails is None else raw_admin_emails
    return EnforcementPolicy.with_admins(raw.split(","))
