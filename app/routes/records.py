"""Daily record routes — workers append, owners and coworkers read."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext, get_auth_context, require_worker
from app.database import get_db
from app.schemas.records import (
	EggProductionIn,
	EggProductionListRead,
	EggProductionRead,
	FeedUsageIn,
	FeedUsageListRead,
	FeedUsageRead,
	MortalityIn,
	MortalityListRead,
	MortalityRead,
	VaccinationIn,
	VaccinationListRead,
	VaccinationRead,
	WorkerNoteIn,
	WorkerNoteListRead,
	WorkerNoteRead,
)
from app.services.record_service import RecordService

router = APIRouter(prefix="/farms/{farm_id}/records", tags=["records"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, HTTPException):
		return exc
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, PermissionError):
		return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="record failure")


def _service(request: Request, db: AsyncSession) -> RecordService:
	return RecordService(db, getattr(request.app.state, "redis", None))


async def _list(
	request: Request,
	db: AsyncSession,
	context: AuthContext,
	farm_id: uuid.UUID,
	kind: str,
	start: date | None,
	end: date | None,
	worker_id: uuid.UUID | None,
) -> list[object]:
	try:
		return await _service(request, db).list_records(context, farm_id, kind, start, end, worker_id)
	except Exception as exc:
		raise _map_error(exc) from exc


# ── Egg production ──────────────────────────────────────────────────────────


@router.post("/egg-production", response_model=EggProductionRead, status_code=status.HTTP_201_CREATED)
async def record_egg_production(
	farm_id: uuid.UUID,
	payload: EggProductionIn,
	request: Request,
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> EggProductionRead:
	try:
		row = await _service(request, db).add_egg_production(worker, farm_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return EggProductionRead.model_validate(row)


@router.get("/egg-production", response_model=EggProductionListRead)
async def list_egg_production(
	farm_id: uuid.UUID,
	request: Request,
	start: date | None = Query(default=None),
	end: date | None = Query(default=None),
	worker_id: uuid.UUID | None = Query(default=None),
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> EggProductionListRead:
	rows = await _list(request, db, context, farm_id, "egg-production", start, end, worker_id)
	return EggProductionListRead(items=[EggProductionRead.model_validate(row) for row in rows])


# ── Feed usage ──────────────────────────────────────────────────────────────


@router.post("/feed-usage", response_model=FeedUsageRead, status_code=status.HTTP_201_CREATED)
async def record_feed_usage(
	farm_id: uuid.UUID,
	payload: FeedUsageIn,
	request: Request,
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> FeedUsageRead:
	try:
		row = await _service(request, db).add_feed_usage(worker, farm_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FeedUsageRead.model_validate(row)


@router.get("/feed-usage", response_model=FeedUsageListRead)
async def list_feed_usage(
	farm_id: uuid.UUID,
	request: Request,
	start: date | None = Query(default=None),
	end: date | None = Query(default=None),
	worker_id: uuid.UUID | None = Query(default=None),
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> FeedUsageListRead:
	rows = await _list(request, db, context, farm_id, "feed-usage", start, end, worker_id)
	return FeedUsageListRead(items=[FeedUsageRead.model_validate(row) for row in rows])


# ── Mortality ───────────────────────────────────────────────────────────────


@router.post("/mortality", response_model=MortalityRead, status_code=status.HTTP_201_CREATED)
async def record_mortality(
	farm_id: uuid.UUID,
	payload: MortalityIn,
	request: Request,
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> MortalityRead:
	try:
		row = await _service(request, db).add_mortality(worker, farm_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return MortalityRead.model_validate(row)


@router.get("/mortality", response_model=MortalityListRead)
async def list_mortality(
	farm_id: uuid.UUID,
	request: Request,
	start: date | None = Query(default=None),
	end: date | None = Query(default=None),
	worker_id: uuid.UUID | None = Query(default=None),
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> MortalityListRead:
	rows = await _list(request, db, context, farm_id, "mortality", start, end, worker_id)
	return MortalityListRead(items=[MortalityRead.model_validate(row) for row in rows])


# ── Vaccination ─────────────────────────────────────────────────────────────


@router.post("/vaccination", response_model=VaccinationRead, status_code=status.HTTP_201_CREATED)
async def record_vaccination(
	farm_id: uuid.UUID,
	payload: VaccinationIn,
	request: Request,
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> VaccinationRead:
	try:
		row = await _service(request, db).add_vaccination(worker, farm_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return VaccinationRead.model_validate(row)


@router.get("/vaccination", response_model=VaccinationListRead)
async def list_vaccination(
	farm_id: uuid.UUID,
	request: Request,
	start: date | None = Query(default=None),
	end: date | None = Query(default=None),
	worker_id: uuid.UUID | None = Query(default=None),
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> VaccinationListRead:
	rows = await _list(request, db, context, farm_id, "vaccination", start, end, worker_id)
	return VaccinationListRead(items=[VaccinationRead.model_validate(row) for row in rows])


# ── Notes ───────────────────────────────────────────────────────────────────


@router.post("/notes", response_model=WorkerNoteRead, status_code=status.HTTP_201_CREATED)
async def record_note(
	farm_id: uuid.UUID,
	payload: WorkerNoteIn,
	request: Request,
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> WorkerNoteRead:
	try:
		row = await _service(request, db).add_note(worker, farm_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerNoteRead.model_validate(row)


@router.get("/notes", response_model=WorkerNoteListRead)
async def list_notes(
	farm_id: uuid.UUID,
	request: Request,
	start: date | None = Query(default=None),
	end: date | None = Query(default=None),
	worker_id: uuid.UUID | None = Query(default=None),
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> WorkerNoteListRead:
	rows = await _list(request, db, context, farm_id, "notes", start, end, worker_id)
	return WorkerNoteListRead(items=[WorkerNoteRead.model_validate(row) for row in rows])
