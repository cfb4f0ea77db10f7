"""Shared pytest fixtures — async test client, fake DB session, fake Redis, auth contexts."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.auth.dependencies import AuthContext, get_auth_context
from app.auth.jwt import create_access_token
from app.database import get_db
from app.main import app
from app.models.enums import UserRoleEnum, WorkerRoleEnum


class FakeNestedTransaction:
	def __init__(self, session: FakeAsyncSession) -> None:
		self.session = session

	async def __aenter__(self) -> FakeNestedTransaction:
		return self

	async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
		self.session.savepoints.append("rolled_back" if exc_type else "released")
		return False


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()
		self.flush = AsyncMock()
		self.refresh = AsyncMock()
		self.delete = AsyncMock()
		self.add = MagicMock()
		self.savepoints: list[str] = []

	def begin_nested(self) -> FakeNestedTransaction:
		return FakeNestedTransaction(self)


class FakeRedis:
	def __init__(self) -> None:
		self.publish = AsyncMock()
		self.setex = AsyncMock()
		self.get = AsyncMock(return_value=None)
		self._counter: dict[str, int] = {}
		self.incr = AsyncMock(side_effect=self._incr)
		self.expire = AsyncMock(return_value=True)

	async def _incr(self, key: str) -> int:
		value = self._counter.get(key, 0) + 1
		self._counter[key] = value
		return value

	def reset_counters(self) -> None:
		self._counter.clear()


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides and service tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Reusable fake Redis client with async publish/setex/get/incr behavior."""
	return FakeRedis()


@pytest.fixture
def auth_user_id() -> uuid.UUID:
	return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def worker_farm_id() -> uuid.UUID:
	return uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def owner_ctx(auth_user_id: uuid.UUID) -> AuthContext:
	return AuthContext(
		kind=UserRoleEnum.owner,
		subject_id=auth_user_id,
		full_name="Grace Owner",
		email="grace@example.com",
	)


@pytest.fixture
def worker_ctx(worker_farm_id: uuid.UUID) -> AuthContext:
	return AuthContext(
		kind=UserRoleEnum.worker,
		subject_id=uuid.UUID("33333333-3333-3333-3333-333333333333"),
		full_name="John Okello",
		username="john_gre001",
		worker_role=WorkerRoleEnum.worker,
		farm_id=worker_farm_id,
	)


@asynccontextmanager
async def _test_client(overrides: dict[Any, Any]) -> AsyncGenerator[AsyncClient, None]:
	app.dependency_overrides.update(overrides)
	original_lifespan = app.router.lifespan_context

	@asynccontextmanager
	async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
		yield

	app.router.lifespan_context = noop_lifespan

	transport = ASGITransport(app=app)
	try:
		async with AsyncClient(transport=transport, base_url="http://test") as test_client:
			yield test_client
	finally:
		app.router.lifespan_context = original_lifespan
		app.dependency_overrides.clear()
		app.state.redis = None


@pytest.fixture
async def client(
	fake_db_session: FakeAsyncSession,
	owner_ctx: AuthContext,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB mocked and an owner signed in.

	Tests that need a worker session override ``get_auth_context`` again.
	"""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_auth_context() -> AuthContext:
		return owner_ctx

	async with _test_client(
		{get_db: override_get_db, get_auth_context: override_auth_context}
	) as test_client:
		yield test_client


@pytest.fixture
async def auth_client(fake_db_session: FakeAsyncSession) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependencies active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async with _test_client({get_db: override_get_db}) as test_client:
		yield test_client


@pytest.fixture
def access_token(auth_user_id: uuid.UUID) -> str:
	return create_access_token(str(auth_user_id), "owner", expires_minutes=30)


@pytest.fixture
def now_utc() -> datetime:
	return datetime.now(UTC)
