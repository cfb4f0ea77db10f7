"""Farm CRUD, ownership checks and the month-to-date summary."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext
from app.models.farm import Farm, Worker
from app.models.records import EggProduction, FeedUsage, Mortality, Vaccination, WorkerNote
from app.schemas.farm import FarmCreate, FarmSummaryRead, FarmUpdate


class FarmService:
	"""Service for farm CRUD scoped to the owning account."""

	def __init__(self, db: AsyncSession):
		self.db = db

	async def create_farm(self, owner_id: uuid.UUID, payload: FarmCreate) -> Farm:
		farm = Farm(
			owner_id=owner_id,
			name=payload.name,
			farm_type=payload.farm_type,
			location_district=payload.location_district,
			location_subcounty=payload.location_subcounty,
			location_parish=payload.location_parish,
			location_village=payload.location_village,
			size_acres=payload.size_acres,
			bird_capacity=payload.bird_capacity,
			start_date=payload.start_date,
			description=payload.description,
		)
		self.db.add(farm)
		await self.db.flush()
		await self.db.refresh(farm)
		return farm

	async def list_farms(self, owner_id: uuid.UUID) -> list[Farm]:
		stmt = (
			select(Farm)
			.where(Farm.owner_id == owner_id, Farm.is_active.is_(True))
			.order_by(Farm.created_at.desc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def get_farm(self, farm_id: uuid.UUID) -> Farm:
		row = await self.db.execute(select(Farm).where(Farm.id == farm_id))
		farm = row.scalar_one_or_none()
		if farm is None:
			raise LookupError(f"Farm {farm_id} not found")
		return farm

	async def get_owned_farm(self, farm_id: uuid.UUID, owner_id: uuid.UUID) -> Farm:
		farm = await self.get_farm(farm_id)
		if farm.owner_id != owner_id:
			raise PermissionError("Farm belongs to another account")
		return farm

	async def ensure_farm_access(self, context: AuthContext, farm_id: uuid.UUID) -> Farm:
		"""Owners may read their own farms; workers only the farm they work on."""
		if context.is_owner:
			return await self.get_owned_farm(farm_id, context.subject_id)
		if context.farm_id != farm_id:
			raise PermissionError("Workers can only access their own farm")
		return await self.get_farm(farm_id)

	async def update_farm(
		self,
		farm_id: uuid.UUID,
		owner_id: uuid.UUID,
		payload: FarmUpdate,
	) -> Farm:
		farm = await self.get_owned_farm(farm_id, owner_id)
		changes = payload.model_dump(exclude_unset=True)
		for required in ("name", "farm_type", "location_district", "start_date"):
			if required in changes and changes[required] is None:
				raise ValueError(f"{required} cannot be cleared")
		for field_name, value in changes.items():
			setattr(farm, field_name, value)
		await self.db.flush()
		await self.db.refresh(farm)
		return farm

	async def deactivate_farm(self, farm_id: uuid.UUID, owner_id: uuid.UUID) -> Farm:
		farm = await self.get_owned_farm(farm_id, owner_id)
		farm.is_active = False
		await self.db.flush()
		await self.db.refresh(farm)
		return farm

	async def summarize(
		self,
		farm_id: uuid.UUID,
		owner_id: uuid.UUID,
		today: date | None = None,
	) -> FarmSummaryRead:
		farm = await self.get_owned_farm(farm_id, owner_id)
		period_end = today or date.today()
		period_start = period_end.replace(day=1)

		team_members = await self._scalar(
			select(func.count(Worker.id)).where(
				Worker.farm_id == farm.id,
				Worker.is_active.is_(True),
			)
		)

		egg_row = await self.db.execute(
			select(
				func.coalesce(func.sum(EggProduction.trays_collected), 0),
				func.coalesce(
					func.sum(EggProduction.trays_collected * EggProduction.eggs_per_tray),
					0,
				),
				func.coalesce(func.sum(EggProduction.damaged_eggs), 0),
			).where(
				EggProduction.farm_id == farm.id,
				EggProduction.date.between(period_start, period_end),
			)
		)
		trays, eggs, damaged = egg_row.one()

		feed_used = await self._period_sum(FeedUsage, FeedUsage.quantity_used_kg, farm.id, period_start, period_end)
		deaths = await self._period_sum(Mortality, Mortality.number_dead, farm.id, period_start, period_end)
		vaccinated = await self._period_sum(
			Vaccination, Vaccination.birds_vaccinated, farm.id, period_start, period_end
		)
		notes = await self._scalar(
			select(func.count(WorkerNote.id)).where(
				WorkerNote.farm_id == farm.id,
				WorkerNote.date.between(period_start, period_end),
			)
		)

		return FarmSummaryRead(
			farm_id=farm.id,
			period_start=period_start,
			period_end=period_end,
			team_members=int(team_members),
			trays_collected=int(trays),
			eggs_collected=int(eggs),
			damaged_eggs=int(damaged),
			feed_used_kg=float(feed_used),
			deaths=int(deaths),
			birds_vaccinated=int(vaccinated),
			notes=int(notes),
		)

	async def _scalar(self, stmt: object) -> int | float:
		row = await self.db.execute(stmt)
		return row.scalar_one() or 0

	async def _period_sum(
		self,
		model: type,
		column: object,
		farm_id: uuid.UUID,
		start: date,
		end: date,
	) -> int | float:
		stmt = select(func.coalesce(func.sum(column), 0)).where(
			model.farm_id == farm_id,
			model.date.between(start, end),
		)
		return await self._scalar(stmt)
