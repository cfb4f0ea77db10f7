"""Farm and Worker ORM models.

A farm belongs to one owner account.  Workers belong to one farm and carry
the auto-generated login credentials; ``password_hash`` stores a bcrypt hash,
the plaintext password is only ever returned once at creation time.
"""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, Enum, Float, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from app.models.enums import (
    FarmTypeEnum,
    GenderEnum,
    KinRelationshipEnum,
    WorkerRoleEnum,
)

# ═══════════════════════════════════════════════════════════════════════════
# Farm
# ═══════════════════════════════════════════════════════════════════════════


class Farm(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A poultry farm owned by one account.

    Farms are never hard-deleted through the API; ``is_active`` is cleared
    instead and inactive farms drop out of the owner's farm list.
    """

    __tablename__ = "farms"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    farm_type: Mapped[FarmTypeEnum] = mapped_column(
        Enum(
            FarmTypeEnum,
            name="farm_type",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
    )
    location_district: Mapped[str] = mapped_column(String(120), nullable=False)
    location_subcounty: Mapped[str | None] = mapped_column(String(120), nullable=True)
    location_parish: Mapped[str | None] = mapped_column(String(120), nullable=True)
    location_village: Mapped[str | None] = mapped_column(String(120), nullable=True)
    size_acres: Mapped[float | None] = mapped_column(Float, nullable=True)
    bird_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    # ── Relationships ────────────────────────────────────────────────────
    workers: Mapped[list[Worker]] = relationship(
        back_populates="farm",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<Farm id={self.id} name={self.name!r} type={self.farm_type}>"


# ═══════════════════════════════════════════════════════════════════════════
# Worker
# ═══════════════════════════════════════════════════════════════════════════


class Worker(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A farm staff member with auto-generated login credentials.

    ``username`` is globally unique: it doubles as the login identifier and
    as the local part of the linked identity account's email.
    """

    __tablename__ = "workers"

    farm_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("farms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    manager_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[WorkerRoleEnum] = mapped_column(
        Enum(
            WorkerRoleEnum,
            name="worker_role",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
        default=WorkerRoleEnum.worker,
        server_default="worker",
    )
    gender: Mapped[GenderEnum] = mapped_column(
        Enum(
            GenderEnum,
            name="gender",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    nin: Mapped[str | None] = mapped_column(String(32), nullable=True)
    next_of_kin_name: Mapped[str] = mapped_column(String(255), nullable=False)
    next_of_kin_relationship: Mapped[KinRelationshipEnum] = mapped_column(
        Enum(
            KinRelationshipEnum,
            name="kin_relationship",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
    )
    next_of_kin_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    username: Mapped[str] = mapped_column(
        String(120), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    # ── Relationships ────────────────────────────────────────────────────
    farm: Mapped[Farm] = relationship(back_populates="workers", lazy="noload")

    def __repr__(self) -> str:
        return f"<Worker id={self.id} username={self.username!r} farm={self.farm_id}>"
