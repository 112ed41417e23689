"""Create membership and studio listing tables.

Revision ID: 001_membership_tables
Revises:
Create Date: 2026-10-18

users, subscriptions, studio_profiles, studio_studio_types, user_metadata.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_membership_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

membership_tier = sa.Enum("BASIC", "PREMIUM", name="membershiptier")
studio_status = sa.Enum("ACTIVE", "INACTIVE", name="studiostatus")
studio_type = sa.Enum("HOME", "RECORDING", "PODCAST", "VOICEOVER", "EDITING", "MOBILE", name="studiotype")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("membership_tier", membership_tier, nullable=False, server_default="BASIC"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="ACTIVE"),
        sa.Column("current_period_start", sa.DateTime(), nullable=True),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_subscriptions_id", "subscriptions", ["id"])
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])
    op.create_index("ix_subscriptions_created_at", "subscriptions", ["created_at"])

    op.create_table(
        "studio_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", studio_status, nullable=False, server_default="ACTIVE"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("featured_until", sa.DateTime(), nullable=True),
        sa.Column("show_phone", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("show_directions", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_studio_profiles_id", "studio_profiles", ["id"])
    op.create_index("ix_studio_profiles_user_id", "studio_profiles", ["user_id"], unique=True)
    op.create_index("ix_studio_profiles_status", "studio_profiles", ["status"])

    op.create_table(
        "studio_studio_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("studio_id", sa.Integer(), sa.ForeignKey("studio_profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("studio_type", studio_type, nullable=False),
        sa.UniqueConstraint("studio_id", "studio_type", name="uq_studio_studio_type"),
    )
    op.create_index("ix_studio_studio_types_id", "studio_studio_types", ["id"])
    op.create_index("ix_studio_studio_types_studio_id", "studio_studio_types", ["studio_id"])

    op.create_table(
        "user_metadata",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", "key", name="uq_user_metadata_user_key"),
    )
    op.create_index("ix_user_metadata_id", "user_metadata", ["id"])
    op.create_index("ix_user_metadata_user_id", "user_metadata", ["user_id"])


def downgrade() -> None:
    op.drop_table("user_metadata")
    op.drop_table("studio_studio_types")
    op.drop_table("studio_profiles")
    op.drop_table("subscriptions")
    op.drop_table("users")
    bind = op.get_bind()
    studio_type.drop(bind, checkfirst=True)
    studio_status.drop(bind, checkfirst=True)
    membership_tier.drop(bind, checkfirst=True)
