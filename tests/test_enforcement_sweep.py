"""
Full sweep tests: snapshot loading plus the end-to-end scenarios
(expired premium owner, admin override, expired featured promotion).
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

from app.models import (
    MembershipTier,
    StudioProfile,
    StudioStatus,
    StudioStudioType,
    StudioType,
    User,
)
from app.services.enforcement_sweep import load_studio_snapshots, run_enforcement_sweep

from tests.conftest import ADMIN_EMAIL, NOW

YESTERDAY = NOW - timedelta(days=1)


def studio_types(db, studio_id):
    rows = db.query(StudioStudioType).filter(StudioStudioType.studio_id == studio_id).all()
    return {r.studio_type for r in rows}


class TestLoadStudioSnapshots:

    def test_empty_database(self, db):
        assert load_studio_snapshots(db) == []

    def test_subscriptions_most_recent_first(self, db, make_member):
        oldest, newest = NOW + timedelta(days=200), NOW - timedelta(days=3)
        user_id, studio_id = make_member(period_ends=(oldest, None, newest))

        [snapshot] = load_studio_snapshots(db)

        assert snapshot.id == studio_id
        assert snapshot.account.id == user_id
        assert snapshot.account.membership_tier == MembershipTier.PREMIUM
        assert [s.current_period_end for s in snapshot.account.subscriptions] == [newest, None, oldest]

    def test_users_without_studio_are_skipped(self, db, make_member):
        make_member(with_studio=False)
        _, studio_id = make_member(tier=MembershipTier.BASIC)
        assert [s.id for s in load_studio_snapshots(db)] == [studio_id]


class TestRunEnforcementSweep:

    def test_expired_premium_owner_is_downgraded_and_stays_listed(self, db, policy, make_member):
        user_id, studio_id = make_member(
            period_ends=(YESTERDAY,),
            status=StudioStatus.ACTIVE,
            is_featured=True,
            featured_until=None,
            premium_flags=True,
            studio_types=(StudioType.VOICEOVER,),
        )

        summary = run_enforcement_sweep(db, policy, now=NOW, notify=MagicMock(return_value=True))

        assert summary.downgrades == 1
        db.expire_all()
        user = db.get(User, user_id)
        studio = db.get(StudioProfile, studio_id)
        assert user.membership_tier == MembershipTier.BASIC
        assert studio.show_phone is False
        assert studio.is_verified is False
        assert studio.is_featured is False
        assert studio.is_premium is False
        assert studio.status == StudioStatus.ACTIVE
        assert studio_types(db, studio_id) == {StudioType.HOME}

    def test_admin_studio_reactivated_without_downgrade(self, db, policy, make_member):
        user_id, studio_id = make_member(email=ADMIN_EMAIL, status=StudioStatus.INACTIVE)
        notify = MagicMock(return_value=True)

        summary = run_enforcement_sweep(db, policy, now=NOW, notify=notify)

        assert summary.status_updates == 1
        assert summary.downgrades == 0
        db.expire_all()
        assert db.get(StudioProfile, studio_id).status == StudioStatus.ACTIVE
        assert db.get(User, user_id).membership_tier == MembershipTier.PREMIUM
        notify.assert_not_called()

    def test_expired_featured_promotion_removed(self, db, policy, make_member):
        _, studio_id = make_member(
            tier=MembershipTier.BASIC,
            is_featured=True,
            featured_until=datetime(2020, 1, 1),
            status=StudioStatus.ACTIVE,
        )

        summary = run_enforcement_sweep(db, policy, now=NOW)

        assert summary.unfeatured_updates == 1
        assert summary.status_updates == 0
        db.expire_all()
        studio = db.get(StudioProfile, studio_id)
        assert studio.is_featured is False
        assert studio.status == StudioStatus.ACTIVE

    def test_second_sweep_finds_nothing_to_do(self, db, policy, make_member):
        make_member(period_ends=(YESTERDAY,), studio_types=(StudioType.VOICEOVER,))
        make_member(email=ADMIN_EMAIL, status=StudioStatus.INACTIVE)
        make_member(tier=MembershipTier.BASIC, is_featured=True, featured_until=YESTERDAY)
        notify = MagicMock(return_value=True)

        run_enforcement_sweep(db, policy, now=NOW, notify=notify)
        second = run_enforcement_sweep(db, policy, now=NOW, notify=notify)

        assert (second.status_updates, second.unfeatured_updates, second.downgrades) == (0, 0, 0)
        assert notify.call_count == 1

    def test_active_subscription_left_alone(self, db, policy, make_member):
        user_id, studio_id = make_member(period_ends=(NOW + timedelta(days=30),), premium_flags=True)

        summary = run_enforcement_sweep(db, policy, now=NOW)

        assert (summary.status_updates, summary.unfeatured_updates, summary.downgrades) == (0, 0, 0)
        assert db.get(User, user_id).membership_tier == MembershipTier.PREMIUM
        assert db.get(StudioProfile, studio_id).show_phone is True

    def test_dry_run_writes_nothing(self, db, policy, make_member):
        user_id, s1 = make_member(period_ends=(YESTERDAY,), status=StudioStatus.INACTIVE)
        _, s2 = make_member(email=ADMIN_EMAIL, status=StudioStatus.INACTIVE)
        _, s3 = make_member(tier=MembershipTier.BASIC, is_featured=True, featured_until=YESTERDAY)
        notify = MagicMock(return_value=True)

        summary = run_enforcement_sweep(db, policy, now=NOW, dry_run=True, notify=notify)

        assert summary.dry_run is True
        assert summary.downgrades == 1
        assert summary.status_updates == 2
        assert summary.unfeatured_updates == 1
        notify.assert_not_called()
        db.expire_all()
        assert db.get(User, user_id).membership_tier == MembershipTier.PREMIUM
        assert db.get(StudioProfile, s1).status == StudioStatus.INACTIVE
        assert db.get(StudioProfile, s2).status == StudioStatus.INACTIVE
        assert db.get(StudioProfile, s3).is_featured is True

    def test_dry_run_counts_match_a_real_sweep(self, db, policy, make_member):
        make_member(period_ends=(YESTERDAY,), status=StudioStatus.ACTIVE, is_featured=True, featured_until=YESTERDAY)
        make_member(email=ADMIN_EMAIL, status=StudioStatus.INACTIVE)
        make_member(tier=MembershipTier.BASIC, is_featured=True, featured_until=YESTERDAY)
        notify = MagicMock(return_value=True)

        predicted = run_enforcement_sweep(db, policy, now=NOW, dry_run=True, notify=notify)
        applied = run_enforcement_sweep(db, policy, now=NOW, notify=notify)

        assert predicted.model_dump(exclude={"dry_run"}) == applied.model_dump(exclude={"dry_run"})
