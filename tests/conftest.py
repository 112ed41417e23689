"""
Pytest configuration for membership enforcement tests.
Each test gets a fresh in-memory SQLite database with all tables created.
"""

import os

# Must be set before app.core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@studios.example"
os.environ["RESEND_API_KEY"] = ""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.membership_policy import EnforcementPolicy
from app.db.base import Base
from app.models import (
    MembershipTier,
    StudioProfile,
    StudioStatus,
    StudioStudioType,
    StudioType,
    Subscription,
    User,
    UserMetadata,
)

NOW = datetime(2026, 3, 15, 12, 0, 0)
ADMIN_EMAIL = "admin@studios.example"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    return EnforcementPolicy.with_admins([ADMIN_EMAIL])


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_member(db):
    """Create a user with a studio, subscriptions, type tags and metadata. Returns (user_id, studio_id)."""
    counter = {"n": 0}

    def _make(
        tier=MembershipTier.PREMIUM,
        email=None,
        period_ends=(),
        status=StudioStatus.ACTIVE,
        is_featured=False,
        featured_until=None,
        studio_types=(StudioType.RECORDING,),
        metadata=None,
        premium_flags=False,
        with_studio=True,
    ):
        counter["n"] += 1
        n = counter["n"]
        user = User(email=email or f"member{n}@example.com", display_name=f"Member {n}", membership_tier=tier)
        db.add(user)
        db.flush()

        # period_ends listed oldest first; created_at increases with position
        for i, period_end in enumerate(period_ends):
            db.add(Subscription(
                user_id=user.id,
                status="ACTIVE",
                current_period_end=period_end,
                created_at=NOW - timedelta(days=365) + timedelta(days=i),
            ))

        studio_id = None
        if with_studio:
            studio = StudioProfile(
                user_id=user.id,
                name=f"Studio {n}",
                status=status,
                is_featured=is_featured,
                featured_until=featured_until,
                show_phone=premium_flags,
                show_directions=premium_flags,
                is_verified=premium_flags,
                is_premium=premium_flags,
            )
            db.add(studio)
            db.flush()
            studio_id = studio.id
            for studio_type in studio_types:
                db.add(StudioStudioType(studio_id=studio.id, studio_type=studio_type))

        for key, value in (metadata or {}).items():
            db.add(UserMetadata(user_id=user.id, key=key, value=value))

        db.commit()
        return user.id, studio_id

    return _make
