"""Daily record capture for workers and record listing for owners."""

from __future__ import annotations

import json
import uuid
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel
from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext
from app.models.records import EggProduction, FeedUsage, Mortality, Vaccination, WorkerNote
from app.schemas.records import (
	EggProductionIn,
	FeedUsageIn,
	MortalityIn,
	VaccinationIn,
	WorkerNoteIn,
)
from app.services.farm_service import FarmService

RECORD_MODELS: dict[str, type[Any]] = {
	"egg-production": EggProduction,
	"feed-usage": FeedUsage,
	"mortality": Mortality,
	"vaccination": Vaccination,
	"notes": WorkerNote,
}


class RecordService:
	def __init__(self, db: AsyncSession, redis_client: Redis | None = None):
		self.db = db
		self.redis_client = redis_client
		self.farms = FarmService(db)

	@staticmethod
	def model_for(kind: str) -> type[Any]:
		model = RECORD_MODELS.get(kind)
		if model is None:
			raise ValueError(f"unsupported record kind: {kind}")
		return model

	async def add_egg_production(
		self, context: AuthContext, farm_id: uuid.UUID, payload: EggProductionIn
	) -> EggProduction:
		return await self._append(context, farm_id, "egg-production", payload)

	async def add_feed_usage(
		self, context: AuthContext, farm_id: uuid.UUID, payload: FeedUsageIn
	) -> FeedUsage:
		return await self._append(context, farm_id, "feed-usage", payload)

	async def add_mortality(
		self, context: AuthContext, farm_id: uuid.UUID, payload: MortalityIn
	) -> Mortality:
		return await self._append(context, farm_id, "mortality", payload)

	async def add_vaccination(
		self, context: AuthContext, farm_id: uuid.UUID, payload: VaccinationIn
	) -> Vaccination:
		return await self._append(context, farm_id, "vaccination", payload)

	async def add_note(
		self, context: AuthContext, farm_id: uuid.UUID, payload: WorkerNoteIn
	) -> WorkerNote:
		return await self._append(context, farm_id, "notes", payload)

	async def list_records(
		self,
		context: AuthContext,
		farm_id: uuid.UUID,
		kind: str,
		start: date | None = None,
		end: date | None = None,
		worker_id: uuid.UUID | None = None,
	) -> list[Any]:
		if start is not None and end is not None and start > end:
			raise ValueError("start must not be after end")
		model = self.model_for(kind)
		farm = await self.farms.ensure_farm_access(context, farm_id)

		stmt = select(model).where(model.farm_id == farm.id)
		if start is not None:
			stmt = stmt.where(model.date >= start)
		if end is not None:
			stmt = stmt.where(model.date <= end)
		if worker_id is not None:
			stmt = stmt.where(model.worker_id == worker_id)
		rows = await self.db.execute(stmt.order_by(model.date.desc(), model.id.desc()))
		return list(rows.scalars().all())

	async def _append(
		self,
		context: AuthContext,
		farm_id: uuid.UUID,
		kind: str,
		payload: BaseModel,
	) -> Any:
		if not context.is_worker or context.farm_id != farm_id:
			raise PermissionError("Only workers of this farm can record daily data")
		farm = await self.farms.get_farm(farm_id)
		if not farm.is_active:
			raise ValueError("Farm is inactive")

		row = self.model_for(kind)(worker_id=context.subject_id, farm_id=farm.id, **payload.model_dump())
		self.db.add(row)
		await self.db.flush()
		await self.db.refresh(row)
		await self._publish_event(farm.id, kind, row)
		return row

	async def _publish_event(self, farm_id: uuid.UUID, kind: str, row: Any) -> None:
		if self.redis_client is None:
			return
		payload = {
			"event_type": "daily_record",
			"kind": kind,
			"farm_id": str(farm_id),
			"worker_id": str(row.worker_id),
			"record_id": int(row.id),
			"date": row.date.isoformat(),
			"published_at": datetime.now(UTC).isoformat(),
		}
		await self.redis_client.publish(f"farm:{farm_id}:records", json.dumps(payload))
