"""Redis-backed rate limiting middleware."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.auth.dependencies import extract_identity_hint, extract_request_farm_id
from app.config import get_settings

BYPASS_PREFIXES = ("/docs", "/redoc", "/openapi", "/health")
BUCKET_TTL_SECONDS = 65


def bucket_key(farm_id: uuid.UUID, principal: str, now: datetime | None = None) -> str:
	minute = (now or datetime.now(UTC)).strftime("%Y%m%d%H%M")
	return f"ratelimit:farm:{farm_id}:{principal}:{minute}"


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Per-farm, per-principal minute quota.

	Each signed-in owner or worker gets its own counter on a farm, so a
	busy worker cannot use up the owner's or a coworker's allowance.
	Unauthenticated and malformed-token requests share one bucket per farm.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		if request.url.path.startswith(BYPASS_PREFIXES):
			return await call_next(request)

		farm_id = extract_request_farm_id(request)
		redis_client = getattr(request.app.state, "redis", None)
		if farm_id is None or redis_client is None:
			return await call_next(request)

		quota = get_settings().rate_limit_user_per_minute
		key = bucket_key(farm_id, extract_identity_hint(request))
		current = await redis_client.incr(key)
		if current == 1:
			await redis_client.expire(key, BUCKET_TTL_SECONDS)

		if current > quota:
			return JSONResponse(
				status_code=429,
				headers={"Retry-After": str(60 - datetime.now(UTC).second)},
				content={
					"detail": {
						"error": "rate_limited",
						"message": "Request quota for this farm exceeded",
						"farm_id": str(farm_id),
						"quota": quota,
					}
				},
			)

		response = await call_next(request)
		response.headers["x-ratelimit-remaining"] = str(max(quota - current, 0))
		return response
