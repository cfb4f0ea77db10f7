"""Authentication dependencies — get_auth_context, require_owner, require_worker."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import AuthError, decode_token, revocation_key
from app.auth.models import User
from app.database import get_db
from app.models.enums import UserRoleEnum, WorkerRoleEnum
from app.models.farm import Worker

bearer_scheme = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(slots=True)
class AuthContext:
	"""The signed-in principal, resolved once per request.

	For owners ``subject_id`` is the ``users.id``; for workers it is the
	``workers.id`` and ``farm_id`` scopes everything the worker may touch.
	"""

	kind: UserRoleEnum
	subject_id: uuid.UUID
	full_name: str | None = None
	email: str | None = None
	username: str | None = None
	worker_role: WorkerRoleEnum | None = None
	farm_id: uuid.UUID | None = None
	token_claims: dict[str, Any] = field(default_factory=dict)

	@property
	def is_owner(self) -> bool:
		return self.kind == UserRoleEnum.owner

	@property
	def is_worker(self) -> bool:
		return self.kind == UserRoleEnum.worker


def hash_password(plaintext: str) -> str:
	return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
	try:
		return pwd_context.verify(plaintext, hashed)
	except ValueError:
		return False


def owner_context(user: User, claims: dict[str, Any] | None = None) -> AuthContext:
	return AuthContext(
		kind=UserRoleEnum.owner,
		subject_id=user.id,
		full_name=user.full_name,
		email=user.email,
		token_claims=claims or {},
	)


def worker_context(worker: Worker, claims: dict[str, Any] | None = None) -> AuthContext:
	return AuthContext(
		kind=UserRoleEnum.worker,
		subject_id=worker.id,
		full_name=worker.full_name,
		username=worker.username,
		worker_role=worker.role,
		farm_id=worker.farm_id,
		token_claims=claims or {},
	)


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def extract_request_farm_id(request: Request) -> uuid.UUID | None:
	token = request.path_params.get("farm_id")
	if token is not None:
		try:
			return uuid.UUID(str(token))
		except ValueError:
			return None

	match = re.search(r"/api/v1/farms/([0-9a-fA-F\-]{36})(?:/|$)", request.url.path)
	if match is None:
		return None
	try:
		return uuid.UUID(match.group(1))
	except ValueError:
		return None


def extract_identity_hint(request: Request) -> str:
	"""``{kind}:{sub}`` for a valid access token, else ``anonymous``/``invalid``.

	Runs in middleware before the route, so it only decodes the token; the
	revocation and active-account checks stay in ``get_auth_context``.
	"""
	auth_header = request.headers.get("authorization", "")
	scheme, _, token = auth_header.partition(" ")
	if scheme.lower() != "bearer" or not token.strip():
		return "anonymous"
	try:
		claims = decode_token(token.strip(), expected_type="access")
	except AuthError:
		return "invalid"
	return f"{claims['kind']}:{claims['sub']}"


async def _ensure_not_revoked(request: Request, payload: dict[str, Any]) -> None:
	redis_client = getattr(request.app.state, "redis", None)
	jti = payload.get("jti")
	if redis_client is None or not jti:
		return
	if await redis_client.get(revocation_key(str(jti))):
		raise _raise_auth(AuthError(code="token_revoked", detail="Token has been revoked"))


async def resolve_context_from_claims(db: AsyncSession, payload: dict[str, Any]) -> AuthContext:
	try:
		subject_id = uuid.UUID(str(payload["sub"]))
	except (ValueError, KeyError) as exc:
		raise _raise_auth(AuthError(code="token_invalid", detail="Token subject is invalid")) from exc

	if payload.get("kind") == UserRoleEnum.worker.value:
		row = await db.execute(select(Worker).where(Worker.id == subject_id))
		worker = row.scalar_one_or_none()
		if worker is None or not worker.is_active:
			raise _raise_auth(AuthError(code="user_invalid", detail="Worker is not active"))
		return worker_context(worker, payload)

	row = await db.execute(select(User).where(User.id == subject_id))
	user = row.scalar_one_or_none()
	if user is None or not user.is_active or user.role != UserRoleEnum.owner:
		raise _raise_auth(AuthError(code="user_invalid", detail="User is not active"))
	return owner_context(user, payload)


async def _context_from_credentials(
	request: Request,
	db: AsyncSession,
	credentials: HTTPAuthorizationCredentials | None,
) -> AuthContext:
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise _raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))

	try:
		payload = decode_token(credentials.credentials, expected_type="access")
	except AuthError as exc:
		raise _raise_auth(exc) from exc
	await _ensure_not_revoked(request, payload)
	return await resolve_context_from_claims(db, payload)


async def get_auth_context(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> AuthContext:
	credentials = await bearer_scheme(request)
	return await _context_from_credentials(request, db, credentials)


async def require_owner(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
	if not context.is_owner:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail={"error": "forbidden", "message": "Farm owner account required"},
		)
	return context


async def require_worker(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
	if not context.is_worker:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail={"error": "forbidden", "message": "Worker account required"},
		)
	return context


async def get_current_user(
	context: AuthContext = Depends(require_owner),
	db: AsyncSession = Depends(get_db),
) -> User:
	row = await db.execute(select(User).where(User.id == context.subject_id))
	user = row.scalar_one_or_none()
	if user is None:
		raise _raise_auth(AuthError(code="user_invalid", detail="User is not active"))
	return user
