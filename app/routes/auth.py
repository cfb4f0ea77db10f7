"""Sign-up, dual-path sign-in, token refresh and account settings routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import AuthContext, get_auth_context, owner_context, require_owner
from app.auth.jwt import AuthError
from app.database import get_db
from app.schemas.auth import (
	ProfileUpdate,
	ProfileUpdateResult,
	RefreshRequest,
	SessionRead,
	SignInRequest,
	SignInResponse,
	SignUpRequest,
)
from app.services.identity_service import AccountExistsError, IdentityService

router = APIRouter(prefix="/auth", tags=["auth"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, HTTPException):
		return exc
	if isinstance(exc, AuthError):
		return HTTPException(
			status_code=exc.status_code,
			detail={"error": exc.code, "message": exc.detail},
		)
	if isinstance(exc, AccountExistsError):
		return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected authentication failure",
	)


def to_session(context: AuthContext) -> SessionRead:
	return SessionRead(
		kind=context.kind,
		id=context.subject_id,
		full_name=context.full_name,
		email=context.email,
		username=context.username,
		worker_role=context.worker_role,
		farm_id=context.farm_id,
	)


def _service(request: Request, db: AsyncSession) -> IdentityService:
	return IdentityService(db, getattr(request.app.state, "redis", None))


@router.post("/signup", response_model=SignInResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
	payload: SignUpRequest,
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> SignInResponse:
	service = _service(request, db)
	try:
		user = await service.sign_up(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	context = owner_context(user)
	return SignInResponse(session=to_session(context), tokens=service.issue_tokens(context))


@router.post("/signin", response_model=SignInResponse)
async def sign_in(
	payload: SignInRequest,
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> SignInResponse:
	service = _service(request, db)
	try:
		context, tokens = await service.sign_in(payload.identifier, payload.password)
	except Exception as exc:
		raise _map_error(exc) from exc
	return SignInResponse(session=to_session(context), tokens=tokens)


@router.post("/refresh", response_model=SignInResponse)
async def refresh(
	payload: RefreshRequest,
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> SignInResponse:
	service = _service(request, db)
	try:
		context, tokens = await service.refresh(payload.refresh_token)
	except Exception as exc:
		raise _map_error(exc) from exc
	return SignInResponse(session=to_session(context), tokens=tokens)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
	request: Request,
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(get_auth_context),
) -> Response:
	try:
		await _service(request, db).sign_out(context)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=SessionRead)
async def current_session(context: AuthContext = Depends(get_auth_context)) -> SessionRead:
	return to_session(context)


@router.patch("/me", response_model=ProfileUpdateResult)
async def update_settings(
	payload: ProfileUpdate,
	request: Request,
	db: AsyncSession = Depends(get_db),
	context: AuthContext = Depends(require_owner),
) -> ProfileUpdateResult:
	service = _service(request, db)
	try:
		updated, changed, reauth = await service.update_profile(context, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return ProfileUpdateResult(
		session=to_session(updated),
		changed=changed,
		reauthentication_required=reauth,
	)
