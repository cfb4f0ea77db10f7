"""Farm CRUD, farm summary and farm-scoped worker routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext, require_owner
from app.database import get_db
from app.schemas.farm import FarmCreate, FarmListRead, FarmRead, FarmSummaryRead, FarmUpdate
from app.schemas.worker import (
	WorkerCreate,
	WorkerCreated,
	WorkerCredentials,
	WorkerListRead,
	WorkerRead,
)
from app.services.farm_service import FarmService
from app.services.worker_service import CredentialConflictError, WorkerService

router = APIRouter(prefix="/farms", tags=["farms"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, HTTPException):
		return exc
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, PermissionError):
		return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
	if isinstance(exc, CredentialConflictError):
		return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected farm service failure",
	)


@router.post("", response_model=FarmRead, status_code=status.HTTP_201_CREATED)
async def create_farm(
	payload: FarmCreate,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmRead:
	service = FarmService(db)
	try:
		farm = await service.create_farm(owner.subject_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FarmRead.model_validate(farm)


@router.get("", response_model=FarmListRead)
async def list_farms(
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmListRead:
	service = FarmService(db)
	try:
		farms = await service.list_farms(owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FarmListRead(items=[FarmRead.model_validate(farm) for farm in farms])


@router.get("/{farm_id}", response_model=FarmRead)
async def get_farm(
	farm_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmRead:
	service = FarmService(db)
	try:
		farm = await service.get_owned_farm(farm_id, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FarmRead.model_validate(farm)


@router.patch("/{farm_id}", response_model=FarmRead)
async def update_farm(
	farm_id: uuid.UUID,
	payload: FarmUpdate,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmRead:
	service = FarmService(db)
	try:
		farm = await service.update_farm(farm_id, owner.subject_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FarmRead.model_validate(farm)


@router.delete("/{farm_id}", response_model=FarmRead)
async def deactivate_farm(
	farm_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmRead:
	service = FarmService(db)
	try:
		farm = await service.deactivate_farm(farm_id, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return FarmRead.model_validate(farm)


@router.get("/{farm_id}/summary", response_model=FarmSummaryRead)
async def farm_summary(
	farm_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> FarmSummaryRead:
	service = FarmService(db)
	try:
		return await service.summarize(farm_id, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/{farm_id}/workers", response_model=WorkerCreated, status_code=status.HTTP_201_CREATED)
async def create_worker(
	farm_id: uuid.UUID,
	payload: WorkerCreate,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> WorkerCreated:
	service = WorkerService(db)
	try:
		created = await service.create_worker(farm_id, payload, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerCreated(
		worker=WorkerRead.model_validate(created.worker),
		credentials=WorkerCredentials(
			username=created.credentials.username,
			password=created.credentials.password,
		),
	)


@router.get("/{farm_id}/workers", response_model=WorkerListRead)
async def list_workers(
	farm_id: uuid.UUID,
	include_inactive: bool = Query(default=False),
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> WorkerListRead:
	service = WorkerService(db)
	try:
		workers = await service.list_workers(farm_id, owner.subject_id, include_inactive)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerListRead(items=[WorkerRead.model_validate(worker) for worker in workers])
