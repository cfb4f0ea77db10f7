"""Worker registration, credential assignment and staff management."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.config import Settings, get_settings
from app.models.farm import Farm, Worker
from app.schemas.worker import WorkerCreate, WorkerUpdate
from app.services.credentials import Credentials, generate_credentials, username_prefix
from app.services.farm_service import FarmService
from app.services.identity_service import IdentityService

logger = logging.getLogger("farmsync.workers")

# Unique indexes a freshly generated username can collide with.
USERNAME_CONSTRAINTS = ("ix_workers_username", "ix_users_email")


class CredentialConflictError(ValueError):
	"""Every attempt to claim a fresh username collided with a concurrent insert."""


def is_username_collision(exc: IntegrityError) -> bool:
	"""True only for a unique violation on the username or worker email index."""
	message = str(exc.orig)
	return any(name in message for name in USERNAME_CONSTRAINTS)


@dataclass(slots=True)
class CreatedWorker:
	worker: Worker
	credentials: Credentials


@dataclass(slots=True)
class WorkerProfile:
	worker: Worker
	farm: Farm
	coworkers: list[Worker]


class WorkerService:
	def __init__(self, db: AsyncSession, settings: Settings | None = None):
		self.db = db
		self.settings = settings or get_settings()
		self.farms = FarmService(db)
		self.identity = IdentityService(db, settings=self.settings)

	async def assigned_usernames(self, farm_id: uuid.UUID, prefix: str) -> set[str]:
		"""Usernames on this farm plus any elsewhere that share ``prefix``.

		Usernames are the global login identifier, so a farm on another
		account with the same three-letter abbreviation must not be handed a
		duplicate either.  Identity accounts on the worker email domain are
		included too: one left behind by a failed cleanup still holds its
		``{username}@domain`` email.
		"""
		stmt = select(Worker.username).where(
			or_(
				Worker.farm_id == farm_id,
				Worker.username.startswith(prefix, autoescape=True),
			)
		)
		rows = await self.db.execute(stmt)
		taken = set(rows.scalars().all())

		domain = f"@{self.settings.worker_email_domain}"
		email_rows = await self.db.execute(
			select(User.email).where(
				User.email.startswith(prefix, autoescape=True),
				User.email.endswith(domain, autoescape=True),
			)
		)
		taken.update(email[: -len(domain)] for email in email_rows.scalars().all())
		return taken

	async def create_worker(
		self,
		farm_id: uuid.UUID,
		payload: WorkerCreate,
		manager_id: uuid.UUID,
	) -> CreatedWorker:
		farm = await self.farms.get_owned_farm(farm_id, manager_id)
		if not farm.is_active:
			raise ValueError("Cannot add workers to an inactive farm")

		prefix = username_prefix(payload.full_name, farm.name)
		attempts = max(1, self.settings.worker_credential_attempts)
		for attempt in range(1, attempts + 1):
			existing = await self.assigned_usernames(farm.id, prefix)
			credentials = generate_credentials(payload.full_name, farm.name, existing)
			try:
				async with self.db.begin_nested():
					user = await self.identity.create_worker_identity(
						credentials.username,
						credentials.password,
						payload.full_name,
					)
					worker = Worker(
						farm_id=farm.id,
						manager_id=manager_id,
						user_id=user.id,
						full_name=payload.full_name,
						role=payload.role,
						gender=payload.gender,
						age=payload.age,
						contact_phone=payload.contact_phone,
						nin=payload.nin,
						next_of_kin_name=payload.next_of_kin_name,
						next_of_kin_relationship=payload.next_of_kin_relationship,
						next_of_kin_phone=payload.next_of_kin_phone,
						username=credentials.username,
						password_hash=user.hashed_password,
					)
					self.db.add(worker)
					await self.db.flush()
			except IntegrityError as exc:
				if not is_username_collision(exc):
					raise
				logger.warning(
					"worker_username_collision",
					extra={"farm_id": str(farm.id), "username": credentials.username, "attempt": attempt},
				)
				continue

			await self.db.refresh(worker)
			logger.info(
				"worker_created",
				extra={"farm_id": str(farm.id), "worker_id": str(worker.id), "username": worker.username},
			)
			return CreatedWorker(worker=worker, credentials=credentials)

		raise CredentialConflictError(
			f"Could not assign a unique username for prefix {prefix!r} after {attempts} attempts"
		)

	async def list_workers(
		self,
		farm_id: uuid.UUID,
		owner_id: uuid.UUID,
		include_inactive: bool = False,
	) -> list[Worker]:
		farm = await self.farms.get_owned_farm(farm_id, owner_id)
		stmt = select(Worker).where(Worker.farm_id == farm.id)
		if not include_inactive:
			stmt = stmt.where(Worker.is_active.is_(True))
		rows = await self.db.execute(stmt.order_by(Worker.created_at.desc()))
		return list(rows.scalars().all())

	async def get_worker(self, worker_id: uuid.UUID) -> Worker:
		row = await self.db.execute(select(Worker).where(Worker.id == worker_id))
		worker = row.scalar_one_or_none()
		if worker is None:
			raise LookupError(f"Worker {worker_id} not found")
		return worker

	async def get_managed_worker(self, worker_id: uuid.UUID, owner_id: uuid.UUID) -> Worker:
		worker = await self.get_worker(worker_id)
		await self.farms.get_owned_farm(worker.farm_id, owner_id)
		return worker

	async def update_worker(
		self,
		worker_id: uuid.UUID,
		owner_id: uuid.UUID,
		payload: WorkerUpdate,
	) -> Worker:
		worker = await self.get_managed_worker(worker_id, owner_id)
		renamed = payload.full_name != worker.full_name
		for field_name, value in payload.model_dump().items():
			setattr(worker, field_name, value)
		if renamed and worker.user_id is not None:
			await self.db.execute(
				update(User).where(User.id == worker.user_id).values(full_name=payload.full_name)
			)
		await self.db.flush()
		await self.db.refresh(worker)
		return worker

	async def delete_worker(self, worker_id: uuid.UUID, owner_id: uuid.UUID) -> None:
		"""Remove the worker row, then best-effort remove its identity account.

		A failure deleting the row aborts the whole operation.  A failure
		deleting the identity account is logged and swallowed; the account
		can no longer sign in because no active worker references it.
		"""
		worker = await self.get_managed_worker(worker_id, owner_id)
		user_id = worker.user_id
		await self.db.delete(worker)
		await self.db.flush()
		logger.info("worker_deleted", extra={"worker_id": str(worker_id)})

		if user_id is None:
			return
		try:
			async with self.db.begin_nested():
				await self.identity.delete_identity(user_id)
		except SQLAlchemyError as exc:
			logger.warning(
				"worker_identity_delete_failed",
				extra={"worker_id": str(worker_id), "user_id": str(user_id), "error": str(exc)},
			)

	async def get_profile(self, worker_id: uuid.UUID) -> WorkerProfile:
		worker = await self.get_worker(worker_id)
		farm = await self.farms.get_farm(worker.farm_id)
		stmt = (
			select(Worker)
			.where(
				Worker.farm_id == worker.farm_id,
				Worker.is_active.is_(True),
				Worker.id != worker.id,
			)
			.order_by(Worker.created_at.asc())
		)
		rows = await self.db.execute(stmt)
		return WorkerProfile(worker=worker, farm=farm, coworkers=list(rows.scalars().all()))
