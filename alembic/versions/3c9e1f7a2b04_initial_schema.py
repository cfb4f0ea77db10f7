"""initial_schema

Revision ID: 3c9e1f7a2b04
Revises:
Create Date: 2026-10-16 00:00:00.000000

Creates the users, farms and workers tables, the five daily record tables,
five PostgreSQL enum types and their indexes.  Enables uuid-ossp for the
server-side UUID defaults.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c9e1f7a2b04"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# ── Enum type names (PostgreSQL CREATE TYPE) ────────────────────────────────
ENUM_USER_ROLE = postgresql.ENUM("owner", "worker", name="user_role", create_type=False)
ENUM_FARM_TYPE = postgresql.ENUM(
    "layers", "broilers", "dual_purpose", name="farm_type", create_type=False
)
ENUM_WORKER_ROLE = postgresql.ENUM(
    "worker",
    "caretaker",
    "manager",
    "assistant_manager",
    "accountant",
    name="worker_role",
    create_type=False,
)
ENUM_GENDER = postgresql.ENUM("male", "female", "other", name="gender", create_type=False)
ENUM_KIN_RELATIONSHIP = postgresql.ENUM(
    "parent",
    "sibling",
    "spouse",
    "child",
    "relative",
    "friend",
    name="kin_relationship",
    create_type=False,
)

ALL_ENUMS = (
    ENUM_USER_ROLE,
    ENUM_FARM_TYPE,
    ENUM_WORKER_ROLE,
    ENUM_GENDER,
    ENUM_KIN_RELATIONSHIP,
)

DAILY_RECORD_TABLES = (
    "egg_production",
    "feed_usage",
    "mortality",
    "vaccination",
    "worker_notes",
)


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _daily_record_columns() -> list[sa.SchemaItem]:
    return [
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("worker_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("farm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["farm_id"], ["farms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── 1. Create enum types ────────────────────────────────────────────
    for enum_type in ALL_ENUMS:
        enum_type.create(op.get_bind(), checkfirst=True)

    # ── 2. Identity ─────────────────────────────────────────────────────
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("hashed_password", sa.String(128), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", ENUM_USER_ROLE, server_default=sa.text("'owner'"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── 3. Farms ────────────────────────────────────────────────────────
    op.create_table(
        "farms",
        _uuid_pk(),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("farm_type", ENUM_FARM_TYPE, nullable=False),
        sa.Column("location_district", sa.String(120), nullable=False),
        sa.Column("location_subcounty", sa.String(120), nullable=True),
        sa.Column("location_parish", sa.String(120), nullable=True),
        sa.Column("location_village", sa.String(120), nullable=True),
        sa.Column("size_acres", sa.Float(), nullable=True),
        sa.Column("bird_capacity", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_farms_owner_id", "farms", ["owner_id"])

    # ── 4. Workers ──────────────────────────────────────────────────────
    op.create_table(
        "workers",
        _uuid_pk(),
        sa.Column("farm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("manager_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", ENUM_WORKER_ROLE, server_default=sa.text("'worker'"), nullable=False),
        sa.Column("gender", ENUM_GENDER, nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("contact_phone", sa.String(32), nullable=True),
        sa.Column("nin", sa.String(32), nullable=True),
        sa.Column("next_of_kin_name", sa.String(255), nullable=False),
        sa.Column("next_of_kin_relationship", ENUM_KIN_RELATIONSHIP, nullable=False),
        sa.Column("next_of_kin_phone", sa.String(32), nullable=False),
        sa.Column("username", sa.String(120), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["farm_id"], ["farms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["manager_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workers_farm_id", "workers", ["farm_id"])
    op.create_index("ix_workers_user_id", "workers", ["user_id"])
    op.create_index("ix_workers_username", "workers", ["username"], unique=True)

    # ── 5. Daily records ────────────────────────────────────────────────
    op.create_table(
        "egg_production",
        *_daily_record_columns(),
        sa.Column("trays_collected", sa.Integer(), nullable=False),
        sa.Column("eggs_per_tray", sa.Integer(), nullable=False),
        sa.Column("damaged_trays", sa.Integer(), nullable=False),
        sa.Column("damaged_eggs", sa.Integer(), nullable=False),
    )
    op.create_table(
        "feed_usage",
        *_daily_record_columns(),
        sa.Column("feed_type", sa.String(120), nullable=False),
        sa.Column("quantity_used_kg", sa.Float(), nullable=False),
        sa.Column("remaining_stock_kg", sa.Float(), nullable=False),
    )
    op.create_table(
        "mortality",
        *_daily_record_columns(),
        sa.Column("number_dead", sa.Integer(), nullable=False),
        sa.Column("suspected_cause", sa.String(255), nullable=False),
        sa.Column("age_weeks", sa.Integer(), nullable=False),
    )
    op.create_table(
        "vaccination",
        *_daily_record_columns(),
        sa.Column("vaccine_name", sa.String(120), nullable=False),
        sa.Column("birds_vaccinated", sa.Integer(), nullable=False),
        sa.Column("administered_by", sa.String(255), nullable=False),
    )
    op.create_table(
        "worker_notes",
        *_daily_record_columns(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
    )
    for table in DAILY_RECORD_TABLES:
        op.create_index(f"ix_{table}_farm_date", table, ["farm_id", "date"])


def downgrade() -> None:
    for table in reversed(DAILY_RECORD_TABLES):
        op.drop_index(f"ix_{table}_farm_date", table_name=table)
        op.drop_table(table)

    op.drop_index("ix_workers_username", table_name="workers")
    op.drop_index("ix_workers_user_id", table_name="workers")
    op.drop_index("ix_workers_farm_id", table_name="workers")
    op.drop_table("workers")

    op.drop_index("ix_farms_owner_id", table_name="farms")
    op.drop_table("farms")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    for enum_type in reversed(ALL_ENUMS):
        enum_type.drop(op.get_bind(), checkfirst=True)
