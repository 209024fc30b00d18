"""Initial schema: users, orphanages, children, volunteer profiles, activities.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "orphanages",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("postal_code", sa.String(20), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("registration_number", sa.String(100), nullable=False),
        sa.Column("is_approved", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_orphanages"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_orphanages_user_id_users", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("user_id", name="uq_orphanages_user_id"),
        sa.CheckConstraint("capacity >= 1", name="ck_orphanages_capacity_positive"),
    )

    op.create_table(
        "children",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("orphanage_id", sa.String(36), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.DateTime(timezone=False), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("needs", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("interests", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("is_adopted", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_children"),
        sa.ForeignKeyConstraint(
            ["orphanage_id"], ["orphanages.id"], name="fk_children_orphanage_id_orphanages", ondelete="CASCADE"
        ),
        sa.CheckConstraint("gender IN ('MALE', 'FEMALE', 'OTHER')", name="ck_children_gender"),
    )
    op.create_index("ix_children_orphanage_id", "children", ["orphanage_id"])

    op.create_table(
        "volunteer_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("zip_code", sa.String(5), nullable=False),
        sa.Column("date_of_birth", sa.DateTime(timezone=False), nullable=False),
        sa.Column("emergency_contact_phone", sa.String(20), nullable=False),
        sa.Column("skills", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("availability", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("about", sa.Text(), nullable=False),
        sa.Column("profile_complete", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_volunteer_profiles"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_volunteer_profiles_user_id_users", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("user_id", name="uq_volunteer_profiles_user_id"),
    )

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("volunteer_id", sa.String(36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), server_default="scheduled", nullable=False),
        sa.Column("created_by", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_activities"),
        sa.ForeignKeyConstraint(
            ["volunteer_id"],
            ["volunteer_profiles.id"],
            name="fk_activities_volunteer_id_volunteer_profiles",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("status IN ('scheduled', 'completed', 'cancelled')", name="ck_activities_status"),
    )
    op.create_index("ix_activities_volunteer_id", "activities", ["volunteer_id"])
    op.create_index("ix_activities_created_by", "activities", ["created_by"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_activities_created_by", table_name="activities")
    op.drop_index("ix_activities_volunteer_id", table_name="activities")
    op.drop_table("activities")
    op.drop_table("volunteer_profiles")
    op.drop_index("ix_children_orphanage_id", table_name="children")
    op.drop_table("children")
    op.drop_table("orphanages")
    op.drop_table("users")
