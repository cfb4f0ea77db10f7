"""Worker detail, edit, delete and worker self-service routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext, require_owner, require_worker
from app.database import get_db
from app.schemas.farm import FarmRead
from app.schemas.worker import CoworkerRead, WorkerProfileRead, WorkerRead, WorkerUpdate
from app.services.worker_service import WorkerService

router = APIRouter(prefix="/workers", tags=["workers"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, HTTPException):
		return exc
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, PermissionError):
		return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected worker service failure",
	)


@router.get("/me", response_model=WorkerProfileRead)
async def my_profile(
	db: AsyncSession = Depends(get_db),
	worker: AuthContext = Depends(require_worker),
) -> WorkerProfileRead:
	service = WorkerService(db)
	try:
		profile = await service.get_profile(worker.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerProfileRead(
		worker=WorkerRead.model_validate(profile.worker),
		farm=FarmRead.model_validate(profile.farm),
		coworkers=[CoworkerRead.model_validate(item) for item in profile.coworkers],
	)


@router.get("/{worker_id}", response_model=WorkerRead)
async def get_worker(
	worker_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> WorkerRead:
	service = WorkerService(db)
	try:
		worker = await service.get_managed_worker(worker_id, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerRead.model_validate(worker)


@router.patch("/{worker_id}", response_model=WorkerRead)
async def update_worker(
	worker_id: uuid.UUID,
	payload: WorkerUpdate,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> WorkerRead:
	service = WorkerService(db)
	try:
		worker = await service.update_worker(worker_id, owner.subject_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return WorkerRead.model_validate(worker)


@router.delete("/{worker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_worker(
	worker_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: AuthContext = Depends(require_owner),
) -> Response:
	service = WorkerService(db)
	try:
		await service.delete_worker(worker_id, owner.subject_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
