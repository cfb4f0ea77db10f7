"""ORM base class and mixins — all models inherit from Base."""

import datetime as dt
import uuid

from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Declarative base — shared MetaData registry for all models."""

    pass


class TimestampMixin:
    """Adds created_at / updated_at audit columns."""

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class UUIDPrimaryKeyMixin:
    """Adds a UUID primary key with both Python and server-side defaults."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.uuid_generate_v4(),
    )


class DailyRecordMixin:
    """BIGSERIAL PK + worker/farm/date key for the daily record tables.

    Daily records are append-only: workers insert them and nothing updates
    them.  Like high-volume log tables they use an auto-increment key and a
    single ``recorded_at`` column instead of ``TimestampMixin``; ``date`` is
    the operational day the entry describes.
    """

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    recorded_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    @declared_attr
    def worker_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            UUID(as_uuid=True),
            ForeignKey("workers.id", ondelete="CASCADE"),
            nullable=False,
        )

    @declared_attr
    def farm_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            UUID(as_uuid=True),
            ForeignKey("farms.id", ondelete="CASCADE"),
            nullable=False,
        )
