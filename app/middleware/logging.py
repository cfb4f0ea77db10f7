"""Structured JSON logging with request ID and farm propagation."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.auth.dependencies import extract_identity_hint, extract_request_farm_id
from app.config import LogFormat, get_settings

_configured = False


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
	event_dict.setdefault("service", "farmsync")
	return event_dict


def configure_structured_logging() -> None:
	"""Configure stdlib + structlog once for the API process."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

	shared_processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
		_add_service,
	]

	if settings.log_format == LogFormat.json:
		renderer: Any = structlog.processors.JSONRenderer()
		logging.basicConfig(level=log_level, format="%(message)s")
	else:
		renderer = structlog.dev.ConsoleRenderer()
		logging.basicConfig(level=log_level)

	structlog.configure(
		processors=[
			*shared_processors,
			structlog.processors.format_exc_info,
			renderer,
		],
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Attach request IDs and emit one structured timing log per request.

	Client errors (4xx) are logged at warning level so failed sign-ins and
	rejected forms stand out from normal traffic.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		context: dict[str, Any] = {
			"request_id": request_id,
			"auth": extract_identity_hint(request),
		}
		farm_id = extract_request_farm_id(request)
		if farm_id is not None:
			context["farm_id"] = str(farm_id)
		structlog.contextvars.bind_contextvars(**context)

		logger = structlog.get_logger("farmsync.request")
		start = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception as exc:
			duration_ms = (time.perf_counter() - start) * 1000.0
			logger.exception(
				"http_request_failed",
				method=request.method,
				path=request.url.path,
				duration_ms=round(duration_ms, 2),
				error=str(exc),
			)
			raise

		duration_ms = (time.perf_counter() - start) * 1000.0
		response.headers["x-request-id"] = request_id
		log = logger.warning if 400 <= response.status_code < 500 else logger.info
		log(
			"http_request",
			method=request.method,
			path=request.url.path,
			status_code=response.status_code,
			duration_ms=round(duration_ms, 2),
		)
		return response
