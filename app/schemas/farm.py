"""Pydantic request/response schemas for farm objects."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from app.models.enums import FarmTypeEnum


def blank_to_none(value: object) -> object:
	"""Empty or whitespace-only form strings are stored as NULL."""
	if isinstance(value, str) and not value.strip():
		return None
	return value


OptionalText = Annotated[str | None, BeforeValidator(blank_to_none)]
OptionalFloat = Annotated[float | None, BeforeValidator(blank_to_none)]
OptionalInt = Annotated[int | None, BeforeValidator(blank_to_none)]


class FarmCreate(BaseModel):
	name: str = Field(min_length=2, max_length=255)
	farm_type: FarmTypeEnum
	location_district: str = Field(min_length=2, max_length=120)
	location_subcounty: OptionalText = Field(default=None, max_length=120)
	location_parish: OptionalText = Field(default=None, max_length=120)
	location_village: OptionalText = Field(default=None, max_length=120)
	size_acres: OptionalFloat = Field(default=None, gt=0)
	bird_capacity: OptionalInt = Field(default=None, gt=0)
	start_date: date
	description: OptionalText = None


class FarmUpdate(BaseModel):
	"""Partial update — only fields present in the request body are applied."""

	name: str | None = Field(default=None, min_length=2, max_length=255)
	farm_type: FarmTypeEnum | None = None
	location_district: str | None = Field(default=None, min_length=2, max_length=120)
	location_subcounty: OptionalText = Field(default=None, max_length=120)
	location_parish: OptionalText = Field(default=None, max_length=120)
	location_village: OptionalText = Field(default=None, max_length=120)
	size_acres: OptionalFloat = Field(default=None, gt=0)
	bird_capacity: OptionalInt = Field(default=None, gt=0)
	start_date: date | None = None
	description: OptionalText = None


class FarmRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	owner_id: uuid.UUID
	name: str
	farm_type: FarmTypeEnum
	location_district: str
	location_subcounty: str | None = None
	location_parish: str | None = None
	location_village: str | None = None
	size_acres: float | None = None
	bird_capacity: int | None = None
	start_date: date
	description: str | None = None
	is_active: bool
	created_at: datetime
	updated_at: datetime


class FarmListRead(BaseModel):
	items: list[FarmRead]


class FarmSummaryRead(BaseModel):
	"""Team size plus month-to-date totals from the daily records."""

	farm_id: uuid.UUID
	period_start: date
	period_end: date
	team_members: int = 0
	trays_collected: int = 0
	eggs_collected: int = 0
	damaged_eggs: int = 0
	feed_used_kg: float = 0.0
	deaths: int = 0
	birds_vaccinated: int = 0
	notes: int = 0
