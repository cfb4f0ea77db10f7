"""Pydantic schemas for the daily record payloads."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, Field


class _RecordIn(BaseModel):
	date: dt.date = Field(default_factory=dt.date.today)


class _RecordRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	worker_id: uuid.UUID
	farm_id: uuid.UUID
	date: dt.date
	recorded_at: dt.datetime


# ── Egg production ──────────────────────────────────────────────────────────


class EggProductionIn(_RecordIn):
	trays_collected: int = Field(ge=0)
	eggs_per_tray: int = Field(gt=0)
	damaged_trays: int = Field(default=0, ge=0)
	damaged_eggs: int = Field(default=0, ge=0)


class EggProductionRead(_RecordRead):
	trays_collected: int
	eggs_per_tray: int
	damaged_trays: int
	damaged_eggs: int


# ── Feed usage ──────────────────────────────────────────────────────────────


class FeedUsageIn(_RecordIn):
	feed_type: str = Field(min_length=1, max_length=120)
	quantity_used_kg: float = Field(ge=0)
	remaining_stock_kg: float = Field(ge=0)


class FeedUsageRead(_RecordRead):
	feed_type: str
	quantity_used_kg: float
	remaining_stock_kg: float


# ── Mortality ───────────────────────────────────────────────────────────────


class MortalityIn(_RecordIn):
	number_dead: int = Field(gt=0)
	suspected_cause: str = Field(min_length=1, max_length=255)
	age_weeks: int = Field(ge=0)


class MortalityRead(_RecordRead):
	number_dead: int
	suspected_cause: str
	age_weeks: int


# ── Vaccination ─────────────────────────────────────────────────────────────


class VaccinationIn(_RecordIn):
	vaccine_name: str = Field(min_length=1, max_length=120)
	birds_vaccinated: int = Field(gt=0)
	administered_by: str = Field(min_length=1, max_length=255)


class VaccinationRead(_RecordRead):
	vaccine_name: str
	birds_vaccinated: int
	administered_by: str


# ── Notes ───────────────────────────────────────────────────────────────────


class WorkerNoteIn(_RecordIn):
	title: str = Field(min_length=1, max_length=255)
	content: str = Field(min_length=1)


class WorkerNoteRead(_RecordRead):
	title: str
	content: str


# ── Lists ───────────────────────────────────────────────────────────────────


class EggProductionListRead(BaseModel):
	items: list[EggProductionRead]


class FeedUsageListRead(BaseModel):
	items: list[FeedUsageRead]


class MortalityListRead(BaseModel):
	items: list[MortalityRead]


class VaccinationListRead(BaseModel):
	items: list[VaccinationRead]


class WorkerNoteListRead(BaseModel):
	items: list[WorkerNoteRead]
