"""Identity accounts, dual-path sign-in and token lifecycle."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from redis.asyncio import Redis
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import (
	AuthContext,
	hash_password,
	owner_context,
	resolve_context_from_claims,
	verify_password,
	worker_context,
)
from app.auth.jwt import (
	AuthError,
	create_access_token,
	create_refresh_token,
	decode_token,
	revocation_key,
	seconds_until_expiry,
)
from app.auth.models import User
from app.config import Settings, get_settings
from app.models.enums import UserRoleEnum
from app.models.farm import Worker
from app.schemas.auth import ProfileUpdate, SignUpRequest, TokenPair

logger = logging.getLogger("farmsync.identity")


def _invalid_credentials() -> AuthError:
	return AuthError(code="invalid_credentials", detail="Invalid username or password")


class AccountExistsError(ValueError):
	"""An identity account with this email already exists."""


class ReservedEmailError(ValueError):
	"""The email is on the domain used for synthesized worker identities."""


def is_worker_identifier(identifier: str, email_takes_precedence: bool = True) -> bool:
	"""Worker usernames always contain ``_``; owner emails usually do not.

	With ``email_takes_precedence`` an identifier containing ``@`` is treated
	as an email even when it also contains ``_``.
	"""
	if email_takes_precedence and "@" in identifier:
		return False
	return "_" in identifier


class IdentityService:
	def __init__(
		self,
		db: AsyncSession,
		redis_client: Redis | None = None,
		settings: Settings | None = None,
	):
		self.db = db
		self.redis_client = redis_client
		self.settings = settings or get_settings()

	# ── Accounts ─────────────────────────────────────────────────────────

	async def sign_up(self, payload: SignUpRequest) -> User:
		email = payload.email.strip().lower()
		if email.endswith(f"@{self.settings.worker_email_domain.lower()}"):
			raise ReservedEmailError(f"Emails on {self.settings.worker_email_domain} are reserved for workers")
		existing = await self.db.execute(select(User.id).where(User.email == email))
		if existing.scalar_one_or_none() is not None:
			raise AccountExistsError(f"An account for {email} already exists")

		user = User(
			email=email,
			hashed_password=hash_password(payload.password),
			full_name=payload.full_name,
			phone=payload.phone or None,
			role=UserRoleEnum.owner,
		)
		self.db.add(user)
		await self.db.flush()
		await self.db.refresh(user)
		logger.info("owner_signed_up", extra={"user_id": str(user.id)})
		return user

	def worker_email(self, username: str) -> str:
		return f"{username}@{self.settings.worker_email_domain}"

	async def create_worker_identity(self, username: str, password: str, full_name: str) -> User:
		user = User(
			email=self.worker_email(username),
			hashed_password=hash_password(password),
			full_name=full_name,
			role=UserRoleEnum.worker,
		)
		self.db.add(user)
		await self.db.flush()
		return user

	async def delete_identity(self, user_id: uuid.UUID) -> None:
		await self.db.execute(delete(User).where(User.id == user_id))

	# ── Sign-in ──────────────────────────────────────────────────────────

	async def sign_in(self, identifier: str, password: str) -> tuple[AuthContext, TokenPair]:
		identifier = identifier.strip()
		if is_worker_identifier(identifier, self.settings.signin_email_takes_precedence):
			context = await self._sign_in_worker(identifier, password)
		else:
			context = await self._sign_in_email(identifier.lower(), password)
		logger.info(
			"signed_in",
			extra={"kind": context.kind.value, "subject_id": str(context.subject_id)},
		)
		return context, self.issue_tokens(context)

	async def _sign_in_worker(self, username: str, password: str) -> AuthContext:
		row = await self.db.execute(
			select(Worker).where(Worker.username == username, Worker.is_active.is_(True))
		)
		worker = row.scalar_one_or_none()
		if worker is None or not verify_password(password, worker.password_hash):
			raise _invalid_credentials()
		return worker_context(worker)

	async def _sign_in_email(self, email: str, password: str) -> AuthContext:
		row = await self.db.execute(select(User).where(User.email == email))
		user = row.scalar_one_or_none()
		if user is None or not user.is_active or not verify_password(password, user.hashed_password):
			raise _invalid_credentials()

		if user.role == UserRoleEnum.owner:
			return owner_context(user)

		# A worker signing in with the synthesized email gets the same
		# session as signing in with the username.
		worker_row = await self.db.execute(
			select(Worker).where(Worker.user_id == user.id, Worker.is_active.is_(True))
		)
		worker = worker_row.scalar_one_or_none()
		if worker is None:
			raise _invalid_credentials()
		return worker_context(worker)

	# ── Tokens ───────────────────────────────────────────────────────────

	@staticmethod
	def issue_tokens(context: AuthContext) -> TokenPair:
		subject = str(context.subject_id)
		kind = context.kind.value
		return TokenPair(
			access_token=create_access_token(subject, kind),
			refresh_token=create_refresh_token(subject, kind),
		)

	async def refresh(self, refresh_token: str) -> tuple[AuthContext, TokenPair]:
		payload = decode_token(refresh_token, expected_type="refresh")
		if await self._is_revoked(payload):
			raise AuthError(code="token_revoked", detail="Token has been revoked")
		context = await resolve_context_from_claims(self.db, payload)
		await self.revoke(payload)
		return context, self.issue_tokens(context)

	async def revoke(self, claims: dict[str, Any]) -> bool:
		"""Deny-list a token's ``jti`` until it would have expired anyway."""
		jti = claims.get("jti")
		if self.redis_client is None or not jti:
			logger.debug("token_revocation_skipped", extra={"has_redis": self.redis_client is not None})
			return False
		await self.redis_client.setex(revocation_key(str(jti)), seconds_until_expiry(claims), "1")
		return True

	async def sign_out(self, context: AuthContext) -> None:
		await self.revoke(context.token_claims)

	async def _is_revoked(self, claims: dict[str, Any]) -> bool:
		jti = claims.get("jti")
		if self.redis_client is None or not jti:
			return False
		return bool(await self.redis_client.get(revocation_key(str(jti))))

	# ── Settings ─────────────────────────────────────────────────────────

	async def update_profile(
		self,
		context: AuthContext,
		payload: ProfileUpdate,
	) -> tuple[AuthContext, bool, bool]:
		"""Apply name/password changes; returns (context, changed, reauth_required).

		A password change revokes the token used for the request, so the
		caller has to sign in again with the new password.
		"""
		row = await self.db.execute(select(User).where(User.id == context.subject_id))
		user = row.scalar_one_or_none()
		if user is None:
			raise LookupError(f"User {context.subject_id} not found")

		changed = False
		if payload.full_name and payload.full_name != user.full_name:
			user.full_name = payload.full_name
			changed = True

		password_changed = False
		if payload.new_password:
			user.hashed_password = hash_password(payload.new_password)
			changed = True
			password_changed = True

		if changed:
			await self.db.flush()
		if password_changed:
			await self.revoke(context.token_claims)
			logger.info("password_changed", extra={"user_id": str(user.id)})

		return owner_context(user, context.token_claims), changed, password_changed
