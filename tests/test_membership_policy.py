import pytest
from pydantic import ValidationError

from app.core.membership_policy import (
    DEFAULT_STUDIO_TYPE,
    PREMIUM_ONLY_STUDIO_TYPES,
    EnforcementPolicy,
    load_policy_from_env,
)
from app.models.studio_profile import StudioType


def test_load_policy_parses_comma_separated_emails():
    policy = load_policy_from_env(" Owner@Example.com, ops@example.com ,,")
    assert policy.admin_emails == frozenset({"owner@example.com", "ops@example.com"})
    assert policy.is_admin_email("OPS@example.com")
    assert not policy.is_admin_email("someone@example.com")


def test_load_policy_defaults_to_environment():
    # conftest exports ADMIN_EMAILS before settings are loaded
    assert load_policy_from_env().is_admin_email("admin@studios.example")


def test_empty_allowlist():
    policy = load_policy_from_env("")
    assert policy.admin_emails == frozenset()
    assert not policy.is_admin_email("")
    assert not policy.is_admin_email(None)


def test_default_premium_rules():
    policy = EnforcementPolicy()
    assert policy.premium_only_studio_types == PREMIUM_ONLY_STUDIO_TYPES == frozenset({StudioType.VOICEOVER})
    assert policy.default_studio_type == DEFAULT_STUDIO_TYPE == StudioType.HOME
    assert "custom_meta_title" in policy.premium_metadata_keys


def test_direct_construction_normalizes_admin_emails():
    policy = EnforcementPolicy(admin_emails={"  Admin@X.com ", "  "})
    assert policy.admin_emails == frozenset({"admin@x.com"})
    assert policy.is_admin_email("admin@X.COM")


def test_policy_is_immutable():
    policy = EnforcementPolicy()
    with pytest.raises(ValidationError):
        policy.admin_emails = frozenset({"someone@example.com"})
