"""Daily record ORM models — the worker's operational log.

Every table carries (worker_id, farm_id, date) via ``DailyRecordMixin`` and a
composite (farm_id, date) index for the per-farm range queries used by list
views and the monthly summary.
"""

from __future__ import annotations

from sqlalchemy import Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, DailyRecordMixin

# ═══════════════════════════════════════════════════════════════════════════
# Production
# ═══════════════════════════════════════════════════════════════════════════


class EggProduction(Base, DailyRecordMixin):
    """Eggs collected in a day, counted in trays."""

    __tablename__ = "egg_production"
    __table_args__ = (Index("ix_egg_production_farm_date", "farm_id", "date"),)

    trays_collected: Mapped[int] = mapped_column(Integer, nullable=False)
    eggs_per_tray: Mapped[int] = mapped_column(Integer, nullable=False)
    damaged_trays: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    damaged_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<EggProduction id={self.id} farm={self.farm_id} date={self.date}>"


class FeedUsage(Base, DailyRecordMixin):
    __tablename__ = "feed_usage"
    __table_args__ = (Index("ix_feed_usage_farm_date", "farm_id", "date"),)

    feed_type: Mapped[str] = mapped_column(String(120), nullable=False)
    quantity_used_kg: Mapped[float] = mapped_column(Float, nullable=False)
    remaining_stock_kg: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<FeedUsage id={self.id} farm={self.farm_id} date={self.date}>"


# ═══════════════════════════════════════════════════════════════════════════
# Flock health
# ═══════════════════════════════════════════════════════════════════════════


class Mortality(Base, DailyRecordMixin):
    __tablename__ = "mortality"
    __table_args__ = (Index("ix_mortality_farm_date", "farm_id", "date"),)

    number_dead: Mapped[int] = mapped_column(Integer, nullable=False)
    suspected_cause: Mapped[str] = mapped_column(String(255), nullable=False)
    age_weeks: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Mortality id={self.id} farm={self.farm_id} date={self.date}>"


class Vaccination(Base, DailyRecordMixin):
    __tablename__ = "vaccination"
    __table_args__ = (Index("ix_vaccination_farm_date", "farm_id", "date"),)

    vaccine_name: Mapped[str] = mapped_column(String(120), nullable=False)
    birds_vaccinated: Mapped[int] = mapped_column(Integer, nullable=False)
    administered_by: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Vaccination id={self.id} farm={self.farm_id} date={self.date}>"


# ═══════════════════════════════════════════════════════════════════════════
# Notes
# ═══════════════════════════════════════════════════════════════════════════


class WorkerNote(Base, DailyRecordMixin):
    """Free-text observation left by a worker."""

    __tablename__ = "worker_notes"
    __table_args__ = (Index("ix_worker_notes_farm_date", "farm_id", "date"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<WorkerNote id={self.id} farm={self.farm_id} date={self.date}>"
